from __future__ import annotations

import uuid

from pydantic import ConfigDict, field_validator
from pydantic_settings import BaseSettings

from chat_client.domain.value_objects.enums import SubscribeMode
from chat_client.domain.value_objects.topic import validate_room


def generate_client_id() -> str:
    return f"chat_{uuid.uuid4().hex[:8]}"


class Settings(BaseSettings):
    BROKER_URL: str = "redis://localhost:6379/0"
    CHAT_ROOM: str = "chatroom"
    CONNECT_TIMEOUT_MS: int = 30_000
    CLIENT_ID: str | None = None
    CLEAN_SESSION: bool = True
    SUBSCRIBE_MODE: SubscribeMode = SubscribeMode.ROOM

    RECORDING_MIME: str = "audio/mp3"
    RECORDING_TICK_SECONDS: float = 1.0

    LOG_LEVEL: str = "INFO"

    @field_validator("CHAT_ROOM")
    @classmethod
    def _check_room(cls, value: str) -> str:
        return validate_room(value)

    @field_validator("CONNECT_TIMEOUT_MS")
    @classmethod
    def _check_timeout(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("CONNECT_TIMEOUT_MS must be positive")
        return value

    @property
    def connect_timeout(self) -> float:
        return self.CONNECT_TIMEOUT_MS / 1000

    @property
    def client_id(self) -> str:
        if not self.CLIENT_ID:
            self.CLIENT_ID = generate_client_id()
        return self.CLIENT_ID

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()
