"""Outgoing messages and the interface every delivery backend implements."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class OutgoingEmail:
    to: str
    subject: str
    body_text: str
    body_html: str | None = None


class EmailProvider(ABC):
    @abstractmethod
    def send(self, message: OutgoingEmail) -> str:
        """Deliver ``message`` and return the backend's message id."""
