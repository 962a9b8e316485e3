# ===================================
# babobamboo/services/email_service.py
# ===================================
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from babobamboo.core.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)

RATING_EMAIL_SUBJECT = "We'd love your feedback on your recent order! - Babobamboo"

RATING_EMAIL_TEMPLATE = """\
<p>Dear Customer,</p>
<p>Thank you for your recent purchase from us! We hope you are enjoying your new products.</p>
<p>We would greatly appreciate it if you could take a moment to rate your order and the products
you received. Your feedback helps us improve our services and product offerings.</p>
<p>Please click on the link below to provide your rating:</p>
<p><a href="{rating_link}">Rate Your Order and Products</a></p>
<p>This link can only be used once.</p>
<p>Thank you again for your business!</p>
<p>Sincerely,</p>
<p>The Babobamboo Team</p>
"""


def build_rating_link(token: str, frontend_url: Optional[str] = None) -> str:
    base = (frontend_url or default_settings.frontend_url).rstrip("/")
    return f"{base}/rate-order/{token}"


class EmailService:
    """Envoi d'emails transactionnels via SMTP"""

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings

    @property
    def is_configured(self) -> bool:
        return bool(self.config.smtp_server)

    def send_email(self, recipient: str, subject: str, html_body: str) -> bool:
        """
        Envoyer un email HTML.
        Retourne False (après log) si le serveur est absent, injoignable ou refuse l'envoi.
        """
        if not self.is_configured:
            logger.error("Serveur SMTP non configuré, email '%s' non envoyé", subject)
            return False
        if not recipient:
            logger.error("Destinataire manquant, email '%s' non envoyé", subject)
            return False

        message = MIMEMultipart("alternative")
        message["From"] = self.config.from_email
        message["To"] = recipient
        message["Subject"] = subject
        message.attach(MIMEText(html_body, "html", "utf-8"))

        try:
            with self._connect() as server:
                server.sendmail(self.config.from_email, [recipient], message.as_string())
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Échec d'envoi de l'email '%s': %s", subject, e)
            return False

        return True

    def send_rating_email(self, recipient: str, order_id: int, rating_link: str) -> bool:
        """Email d'invitation à noter la commande (lien à usage unique)"""
        sent = self.send_email(
            recipient,
            RATING_EMAIL_SUBJECT,
            RATING_EMAIL_TEMPLATE.format(rating_link=rating_link),
        )
        if sent:
            logger.info("Email de notation envoyé pour la commande %s", order_id)
        else:
            logger.warning("Email de notation non envoyé pour la commande %s", order_id)
        return sent

    def _connect(self) -> smtplib.SMTP:
        """Connexion SMTP (SSL ou STARTTLS), le timeout couvre connexion, accueil et commandes"""
        timeout = self.config.smtp_connection_timeout
        if self.config.smtp_use_ssl:
            server = smtplib.SMTP_SSL(self.config.smtp_server, self.config.smtp_port, timeout=timeout)
        else:
            server = smtplib.SMTP(self.config.smtp_server, self.config.smtp_port, timeout=timeout)

        try:
            if self.config.smtp_use_tls and not self.config.smtp_use_ssl:
                server.starttls()
            if self.config.smtp_username and self.config.smtp_password:
                server.login(self.config.smtp_username, self.config.smtp_password)
        except (smtplib.SMTPException, OSError):
            server.close()
            raise
        return server
