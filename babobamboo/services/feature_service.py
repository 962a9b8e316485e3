# ===================================
# babobamboo/services/feature_service.py
# ===================================
"""
Drapeaux de fonctionnalités.

Chaque vérification relit la ligne feature_settings : une modification admin
est visible immédiatement côté serveur comme côté client.

Polarité en cas de problème :
- ligne absente  -> valeur par défaut de chaque drapeau (tout actif sauf le verrouillage du site)
- lecture en échec -> ouvert (actif) pour tous les drapeaux, sauf le verrouillage
  du site qui reste désactivé (on ne bloque jamais le commerce sur un incident)
"""
import logging
from typing import Dict

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from babobamboo.models.feature import FEATURE_DEFAULTS
from babobamboo.repositories.feature_repo import FeatureSettingsRepository

logger = logging.getLogger(__name__)

# Valeur utilisée quand la base ne répond pas
FAIL_SAFE_VALUES = {name: True for name in FEATURE_DEFAULTS}
FAIL_SAFE_VALUES["enable_unpaid_site_lock"] = False

# Drapeaux utilisés par le code serveur
ORDER_RATING = "enable_order_rating"
AUTO_RATING_EMAIL = "enable_auto_rating_email"
RATING_LINK_AFTER_3_DAYS = "enable_rating_link_after_3_days"
ORDER_CREATION = "enable_order_creation"
SITE_LOCK = "enable_unpaid_site_lock"


class FeatureGate:
    """Lecture et mise à jour des drapeaux de fonctionnalités"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = FeatureSettingsRepository(db)

    def get_flags(self) -> Dict[str, bool]:
        """Tous les drapeaux (défauts si la ligne n'existe pas, fail-open si la lecture échoue)"""
        try:
            row = self.repo.get_settings()
        except SQLAlchemyError as e:
            logger.error("Lecture des feature settings impossible, valeurs de secours utilisées: %s", e)
            self._reset_session()
            return dict(FAIL_SAFE_VALUES)

        if row is None:
            return dict(FEATURE_DEFAULTS)
        return row.to_dict()

    def is_enabled(self, flag_name: str) -> bool:
        if flag_name not in FEATURE_DEFAULTS:
            raise ValueError(f"Drapeau inconnu: {flag_name}")
        return self.get_flags()[flag_name]

    def update_flags(self, values: Dict[str, bool]) -> Dict[str, bool]:
        """Mise à jour admin, les drapeaux non fournis gardent leur valeur"""
        unknown = sorted(set(values) - set(FEATURE_DEFAULTS))
        if unknown:
            raise ValueError(f"Drapeaux inconnus: {', '.join(unknown)}")

        row = self.repo.save_settings(values)
        logger.info("Feature settings mis à jour (%d drapeaux fournis)", len(values))
        return row.to_dict()

    def _reset_session(self) -> None:
        try:
            self.db.rollback()
        except SQLAlchemyError:
            logger.debug("Rollback impossible après échec de lecture des feature settings")
