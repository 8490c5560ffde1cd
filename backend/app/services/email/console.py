"""Backend for development and tests: messages are logged and kept, never delivered."""

from app.core.logging import get_logger
from app.services.email.base import EmailProvider, OutgoingEmail

logger = get_logger(__name__)


class ConsoleEmailProvider(EmailProvider):
    def __init__(self) -> None:
        self.sent: list[OutgoingEmail] = []

    def send(self, message: OutgoingEmail) -> str:
        self.sent.append(message)
        message_id = f"console-{len(self.sent)}"
        # The body is logged so reset links can be followed locally
        logger.info(
            "Email captured",
            extra={
                "message_id": message_id,
                "email_to": message.to,
                "email_subject": message.subject,
                "email_body": message.body_text,
            },
        )
        return message_id
