"""Binds one (self, peer) pair to one broker connection."""
from __future__ import annotations

import asyncio
import logging
from types import TracebackType
from typing import Any

from chat_client.application.exceptions import ConnectionFailed
from chat_client.application.ports.clock import Clock, SystemClock
from chat_client.application.ports.transport import ConnectOptions, Transport
from chat_client.domain.entities.message import SELF_SENDER, Message
from chat_client.domain.value_objects.enums import ConnectionState, SubscribeMode
from chat_client.domain.value_objects.identity import Identity
from chat_client.domain.value_objects.topic import (
    publish_topic,
    sender_of,
    subscription_topic,
)
from chat_client.services import payload_codec
from chat_client.services.composer import Composer
from chat_client.services.message_log import MessageLog

logger = logging.getLogger(__name__)


class SessionChannel:
    """Owns the transport connection for the lifetime of a chat context.

    Inbound broker events are queued by the transport callback and drained
    in arrival order by a single consumer task.
    """

    def __init__(
        self,
        transport: Transport,
        identity: Identity,
        peer: Identity,
        *,
        broker_url: str,
        room: str,
        options: ConnectOptions,
        mode: SubscribeMode = SubscribeMode.ROOM,
        log: MessageLog | None = None,
        composer: Composer | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._transport = transport
        self.identity = identity
        self.peer = peer
        self._broker_url = broker_url
        self._room = room
        self._options = options
        self._mode = mode
        self.log = log if log is not None else MessageLog()
        self.composer = composer if composer is not None else Composer()
        self._clock = clock or SystemClock()
        self.connection_state = ConnectionState.DISCONNECTED
        self.subscribed_topic: str | None = None
        self._handle: Any = None
        self._inbound: asyncio.Queue[tuple[str, bytes]] = asyncio.Queue()
        self._consumer: asyncio.Task[None] | None = None

    @property
    def publish_topic(self) -> str:
        return publish_topic(self._room, self.identity)

    @property
    def connected(self) -> bool:
        return self.connection_state is ConnectionState.CONNECTED

    async def open(self) -> None:
        if self.connection_state is not ConnectionState.DISCONNECTED:
            return
        self.connection_state = ConnectionState.CONNECTING
        try:
            self._handle = await asyncio.wait_for(
                self._transport.connect(self._broker_url, self._options),
                timeout=self._options.connect_timeout,
            )
        except asyncio.TimeoutError:
            self.connection_state = ConnectionState.DISCONNECTED
            raise ConnectionFailed(
                f"Timed out connecting to {self._broker_url} after {self._options.connect_timeout}s"
            )
        except ConnectionFailed:
            self.connection_state = ConnectionState.DISCONNECTED
            raise
        except Exception as exc:
            self.connection_state = ConnectionState.DISCONNECTED
            raise ConnectionFailed(f"Cannot connect to {self._broker_url}: {exc}") from exc

        topic = subscription_topic(self._room, self.peer, self._mode)
        self._transport.on_message(self._handle, self._enqueue)
        try:
            await self._transport.subscribe(self._handle, topic)
        except Exception as exc:
            await self._teardown()
            raise ConnectionFailed(f"Cannot subscribe to {topic}: {exc}") from exc

        self.subscribed_topic = topic
        self._consumer = asyncio.create_task(self._drain(), name="session-inbound")
        self.connection_state = ConnectionState.CONNECTED
        logger.info("Connected to %s as %s, subscribed to %s", self._broker_url, self.identity, topic)

    def on_inbound_message(self, topic: str, raw: bytes) -> None:
        sender = sender_of(topic)
        if sender == self.identity:
            return
        content = payload_codec.decode_bytes(raw)
        self.log.append(Message(sender=sender, content=content, timestamp=self._clock.now()))

    async def send(self, content: str) -> Message | None:
        """Publish ``content`` and append the local echo.

        Blank content and sends on a closed channel are no-ops.
        """
        if not content or not content.strip():
            return None
        if not self.connected:
            logger.warning("Send ignored: channel is %s", self.connection_state)
            return None

        try:
            await self._transport.publish(self._handle, self.publish_topic, content)
        except Exception as exc:
            raise ConnectionFailed(f"Cannot publish to {self.publish_topic}: {exc}") from exc
        record = Message(
            sender=SELF_SENDER,
            content=payload_codec.decode(content),
            timestamp=self._clock.now(),
        )
        self.log.append(record)
        self.composer.clear()
        return record

    async def send_text(self, text: str) -> Message | None:
        if not text.strip():
            return None
        return await self.send(payload_codec.encode_text(text))

    async def send_preview(self) -> Message | None:
        pending = self.composer.pending
        if pending is None:
            return None
        return await self.send(pending.raw)

    async def close(self) -> None:
        if self.connection_state is ConnectionState.DISCONNECTED and self._handle is None:
            return
        await self._teardown()
        logger.info("Disconnected from %s", self._broker_url)

    async def __aenter__(self) -> SessionChannel:
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    def _enqueue(self, topic: str, raw: bytes) -> None:
        self._inbound.put_nowait((topic, raw))

    async def _drain(self) -> None:
        while True:
            topic, raw = await self._inbound.get()
            try:
                self.on_inbound_message(topic, raw)
            except Exception:
                logger.exception("Error processing inbound message on %s", topic)

    async def _teardown(self) -> None:
        if self._consumer is not None:
            self._consumer.cancel()
            try:
                await self._consumer
            except asyncio.CancelledError:
                pass
            self._consumer = None
        handle, self._handle = self._handle, None
        self.connection_state = ConnectionState.DISCONNECTED
        self.subscribed_topic = None
        if handle is not None:
            try:
                await self._transport.disconnect(handle)
            except Exception:
                logger.warning("Error releasing connection to %s", self._broker_url, exc_info=True)
