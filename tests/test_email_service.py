import email
import smtplib

import pytest

from babobamboo.core.config import settings
from babobamboo.services import email_service
from babobamboo.services.email_service import EmailService, build_rating_link


class FakeSMTP:
    """Serveur SMTP factice, enregistre les messages envoyés"""
    instances = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.started_tls = False
        self.logged_in = None
        self.messages = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.started_tls = True

    def login(self, username, password):
        self.logged_in = (username, password)

    def sendmail(self, sender, recipients, message):
        self.messages.append((sender, recipients, message))

    def close(self):
        pass


class RefusingSMTP(FakeSMTP):
    def sendmail(self, sender, recipients, message):
        raise smtplib.SMTPRecipientsRefused({recipients[0]: (550, b"No such user")})


@pytest.fixture
def smtp_config():
    FakeSMTP.instances = []
    return settings.model_copy(update={
        "smtp_server": "smtp.babobamboo.com",
        "smtp_port": 587,
        "smtp_username": "mailer",
        "smtp_password": "secret",
        "smtp_use_tls": True,
        "smtp_use_ssl": False,
        "smtp_connection_timeout": 10.0,
    })


def test_build_rating_link_strips_trailing_slash():
    assert build_rating_link("abc123", "https://shop.babobamboo.com/") == \
        "https://shop.babobamboo.com/rate-order/abc123"


def test_unconfigured_server_returns_false():
    config = settings.model_copy(update={"smtp_server": None})

    assert EmailService(config).send_email("client@babobamboo.com", "Hello", "<p>Hi</p>") is False


def test_missing_recipient_returns_false(smtp_config):
    assert EmailService(smtp_config).send_rating_email(None, 1, "https://x/rate-order/t") is False


def test_rating_email_is_sent_with_link(smtp_config, monkeypatch):
    monkeypatch.setattr(email_service.smtplib, "SMTP", FakeSMTP)

    sent = EmailService(smtp_config).send_rating_email(
        "client@babobamboo.com", 42, "https://shop.babobamboo.com/rate-order/tok42"
    )

    assert sent is True
    server = FakeSMTP.instances[0]
    assert server.timeout == 10.0
    assert server.started_tls is True
    assert server.logged_in == ("mailer", "secret")
    sender, recipients, message = server.messages[0]
    assert recipients == ["client@babobamboo.com"]
    body = "".join(
        part.get_payload(decode=True).decode("utf-8")
        for part in email.message_from_string(message).walk() if not part.is_multipart()
    )
    assert "rate-order/tok42" in body


def test_smtp_error_returns_false(smtp_config, monkeypatch):
    monkeypatch.setattr(email_service.smtplib, "SMTP", RefusingSMTP)

    assert EmailService(smtp_config).send_rating_email("nobody@babobamboo.com", 1, "https://x") is False


def test_connection_error_returns_false(smtp_config, monkeypatch):
    def unreachable(host, port, timeout=None):
        raise ConnectionRefusedError("connection refused")

    monkeypatch.setattr(email_service.smtplib, "SMTP", unreachable)

    assert EmailService(smtp_config).send_rating_email("client@babobamboo.com", 1, "https://x") is False
