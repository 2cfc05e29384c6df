"""Shared test fixtures."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from chat_client.application.exceptions import CaptureUnsupported, ConnectionFailed
from chat_client.application.ports.capture import OnChunkCallback
from chat_client.application.ports.transport import ConnectOptions, OnMessageCallback
from chat_client.domain.entities.message import Message
from chat_client.domain.value_objects.enums import SubscribeMode
from chat_client.domain.value_objects.identity import Identity
from chat_client.services import payload_codec
from chat_client.services.session_channel import SessionChannel

FIXED_NOW = datetime(2024, 5, 1, 12, 30, 0, tzinfo=timezone.utc)


@dataclass
class FixedClock:
    current: datetime = FIXED_NOW

    def now(self) -> datetime:
        return self.current


def make_message(*, sender: str = "bob", raw: str = "hello") -> Message:
    return Message(sender=sender, content=payload_codec.decode(raw), timestamp=FIXED_NOW)


@dataclass
class FakeHandle:
    url: str
    options: ConnectOptions
    callbacks: list[OnMessageCallback] = field(default_factory=list)


@dataclass
class FakeTransport:
    """In-memory broker stand-in recording every call."""
    fail_connect: bool = False
    fail_subscribe: bool = False
    hang_connect: bool = False
    fail_publish: bool = False
    fail_disconnect: bool = False
    handles: list[FakeHandle] = field(default_factory=list)
    subscriptions: list[str] = field(default_factory=list)
    published: list[tuple[str, str]] = field(default_factory=list)
    disconnects: int = 0

    async def connect(self, url: str, options: ConnectOptions) -> FakeHandle:
        if self.hang_connect:
            await asyncio.sleep(3600)
        if self.fail_connect:
            raise ConnectionFailed("broker unreachable")
        handle = FakeHandle(url=url, options=options)
        self.handles.append(handle)
        return handle

    async def subscribe(self, handle: FakeHandle, topic_pattern: str) -> None:
        if self.fail_subscribe:
            raise RuntimeError("not authorized")
        self.subscriptions.append(topic_pattern)

    async def publish(self, handle: FakeHandle, topic: str, payload: str) -> None:
        if self.fail_publish:
            raise RedisConnectionError("connection reset by peer")
        self.published.append((topic, payload))

    def on_message(self, handle: FakeHandle, callback: OnMessageCallback) -> None:
        handle.callbacks.append(callback)

    async def disconnect(self, handle: FakeHandle) -> None:
        if self.fail_disconnect:
            raise RedisConnectionError("connection reset by peer")
        self.disconnects += 1

    def deliver(self, topic: str, payload: bytes) -> None:
        for handle in self.handles:
            for callback in handle.callbacks:
                callback(topic, payload)


@dataclass
class FakeCaptureSession:
    chunks_on_stop: list[bytes] = field(default_factory=list)
    stopped: bool = False
    _callback: OnChunkCallback | None = None

    def on_chunk(self, callback: OnChunkCallback) -> None:
        self._callback = callback

    def emit(self, chunk: bytes) -> None:
        assert self._callback is not None
        self._callback(chunk)

    async def stop(self) -> None:
        self.stopped = True
        for chunk in self.chunks_on_stop:
            self.emit(chunk)


@dataclass
class FakeAudioInput:
    available: bool = True
    availability_checks: int = 0
    sessions: list[FakeCaptureSession] = field(default_factory=list)

    def is_available(self) -> bool:
        self.availability_checks += 1
        return self.available

    async def acquire(self) -> FakeCaptureSession:
        if not self.available:
            raise CaptureUnsupported("no microphone")
        session = FakeCaptureSession()
        self.sessions.append(session)
        return session


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


def make_channel(
    transport: FakeTransport,
    *,
    identity: str = "alice",
    peer: str = "bob",
    mode: SubscribeMode = SubscribeMode.ROOM,
    timeout: float = 1.0,
    **kwargs: Any,
) -> SessionChannel:
    return SessionChannel(
        transport,
        Identity(identity),
        Identity(peer),
        broker_url="redis://broker.test:6379/0",
        room="room",
        options=ConnectOptions(client_id="chat_test", connect_timeout=timeout),
        mode=mode,
        **kwargs,
    )
