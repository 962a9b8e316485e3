# ===================================
# babobamboo/core/logging.py
# ===================================
import json
import logging
import sys

from babobamboo.core.config import settings

TEXT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


class JsonFormatter(logging.Formatter):
    """Une ligne JSON par enregistrement, message et traceback échappés"""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "t": self.formatTime(record),
            "lv": record.levelname,
            "lg": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(level: str = None, fmt: str = None) -> None:
    """Configurer le logger racine une seule fois (relance à chaud comprise)"""
    level = (level or settings.log_level).upper()
    fmt = (fmt or settings.log_format).lower()

    root = logging.getLogger()
    root.setLevel(getattr(logging, level, logging.INFO))

    if any(getattr(h, "_babobamboo", False) for h in root.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler._babobamboo = True
    handler.setFormatter(JsonFormatter() if fmt == "json" else logging.Formatter(TEXT_FORMAT))
    root.addHandler(handler)

    # APScheduler est très bavard en INFO
    logging.getLogger("apscheduler").setLevel(logging.WARNING)
