from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from chat_client.domain.entities.payload import Payload

SELF_SENDER = "self"


@dataclass(frozen=True, slots=True)
class Message:
    sender: str
    content: Payload
    timestamp: datetime

    @property
    def is_own(self) -> bool:
        return self.sender == SELF_SENDER

    @property
    def display_time(self) -> str:
        return self.timestamp.astimezone().strftime("%H:%M:%S")
