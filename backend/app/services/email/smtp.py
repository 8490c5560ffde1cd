"""Delivery over SMTP, with optional STARTTLS or implicit TLS."""

import smtplib
from email.message import EmailMessage
from email.utils import make_msgid

from app.core.logging import get_logger
from app.services.email.base import EmailProvider, OutgoingEmail

logger = get_logger(__name__)

SMTP_TIMEOUT_SECONDS = 10


class SMTPEmailProvider(EmailProvider):
    def __init__(self, host: str, port: int, from_email: str, use_tls: bool = False, use_ssl: bool = False):
        self.host = host
        self.port = port
        self.from_email = from_email
        self.use_tls = use_tls
        self.use_ssl = use_ssl

    def _mime(self, message: OutgoingEmail) -> EmailMessage:
        mime = EmailMessage()
        mime["Message-ID"] = make_msgid(domain=self.from_email.rpartition("@")[2] or None)
        mime["From"] = self.from_email
        mime["To"] = message.to
        mime["Subject"] = message.subject
        mime.set_content(message.body_text)
        if message.body_html:
            mime.add_alternative(message.body_html, subtype="html")
        return mime

    def _connect(self) -> smtplib.SMTP:
        if self.use_ssl:
            return smtplib.SMTP_SSL(self.host, self.port, timeout=SMTP_TIMEOUT_SECONDS)
        return smtplib.SMTP(self.host, self.port, timeout=SMTP_TIMEOUT_SECONDS)

    def send(self, message: OutgoingEmail) -> str:
        mime = self._mime(message)
        # The socket is closed even when STARTTLS fails
        with self._connect() as connection:
            if self.use_tls and not self.use_ssl:
                connection.starttls()
            connection.send_message(mime)
        logger.info("Email delivered", extra={"message_id": mime["Message-ID"], "email_to": message.to})
        return mime["Message-ID"]
