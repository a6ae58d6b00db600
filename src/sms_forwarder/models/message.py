"""
Incoming SMS message value.
"""

from datetime import datetime, timezone
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict


class SmsMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    sender: str
    body: str
    timestamp: int  # epoch milliseconds
    thread_id: Optional[Union[int, str]] = None  # device-local, never forwarded

    @property
    def sent_at(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp / 1000, tz=timezone.utc)

    def to_payload(self) -> dict[str, str]:
        """Flat mapping of the fields that are sent to remote endpoints."""
        return {
            "sender": self.sender,
            "body": self.body,
            "timestamp": str(self.timestamp),
        }
