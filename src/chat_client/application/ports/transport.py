from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Protocol

OnMessageCallback = Callable[[str, bytes], None]


@dataclass(frozen=True, slots=True)
class ConnectOptions:
    client_id: str
    clean_session: bool = True
    connect_timeout: float = 30.0


class Transport(Protocol):
    """Pub/sub broker. ``connect`` raises ConnectionFailed on failure."""

    async def connect(self, url: str, options: ConnectOptions) -> Any: ...

    async def subscribe(self, handle: Any, topic_pattern: str) -> None: ...

    async def publish(self, handle: Any, topic: str, payload: str) -> None: ...

    def on_message(self, handle: Any, callback: OnMessageCallback) -> None: ...

    async def disconnect(self, handle: Any) -> None: ...
