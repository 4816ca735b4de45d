"""
Pydantic model for inbound email messages.
"""

from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError

from subtracker.errors import InvalidMessageError


class EmailMessage(BaseModel):
    """Inbound message as delivered by the mail webhook."""
    sender: str = Field(alias="from")
    to: str = ""
    subject: str = ""
    body_text: Optional[str] = Field(default=None, alias="bodyText")
    body_html: Optional[str] = Field(default=None, alias="bodyHtml")
    received_at: datetime = Field(default_factory=datetime.now, alias="receivedAt")
    headers: Dict[str, str] = Field(default_factory=dict)
    message_id: Optional[str] = Field(default=None, alias="messageId")

    class Config:
        frozen = True
        populate_by_name = True

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "EmailMessage":
        """
        Build a message from a raw webhook payload.

        Args:
            payload: Mapping using either field names or camelCase keys

        Returns:
            Validated EmailMessage

        Raises:
            InvalidMessageError: If required fields are missing or malformed
        """
        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            raise InvalidMessageError(f"Invalid email payload: {exc}") from exc

    @property
    def resolved_message_id(self) -> Optional[str]:
        """Explicit message id, else the Message-ID header."""
        if self.message_id:
            return self.message_id
        for key, value in self.headers.items():
            if key.lower() == "message-id":
                return value
        return None
