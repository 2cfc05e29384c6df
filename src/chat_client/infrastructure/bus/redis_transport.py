"""Redis Pub/Sub binding of the transport port."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

import redis.asyncio as aioredis
from redis.asyncio.client import PubSub
from redis.exceptions import RedisError

from chat_client.application.exceptions import ConnectionFailed
from chat_client.application.ports.transport import ConnectOptions, OnMessageCallback
from chat_client.domain.value_objects.identity import (
    MULTI_LEVEL_WILDCARD,
    SINGLE_LEVEL_WILDCARD,
    TOPIC_SEPARATOR,
)

logger = logging.getLogger(__name__)

_GLOB_SPECIALS = "\\*?[]"


def to_redis_subscription(topic_pattern: str) -> tuple[str, bool]:
    """Map a topic filter to ``(channel_or_glob, is_pattern)``.

    Only a trailing ``/#`` or ``/+`` level is treated as a wildcard; the
    prefix is glob-escaped so identities are always matched literally.
    """
    for wildcard in (MULTI_LEVEL_WILDCARD, SINGLE_LEVEL_WILDCARD):
        suffix = TOPIC_SEPARATOR + wildcard
        if topic_pattern.endswith(suffix):
            prefix = topic_pattern[: -len(wildcard)]
            escaped = "".join("\\" + ch if ch in _GLOB_SPECIALS else ch for ch in prefix)
            return escaped + "*", True
    return topic_pattern, False


@dataclass(eq=False)
class RedisConnection:
    client_id: str
    redis: aioredis.Redis
    pubsub: PubSub
    callbacks: list[OnMessageCallback] = field(default_factory=list)
    topics: set[str] = field(default_factory=set)
    listener: asyncio.Task[None] | None = None
    closed: bool = False


class RedisTransport:
    """Implements application.ports.transport.Transport."""

    def __init__(self) -> None:
        # Subscriptions kept per client id for connects with clean_session=False.
        self._retained: dict[str, set[str]] = {}

    async def connect(self, url: str, options: ConnectOptions) -> RedisConnection:
        redis = aioredis.from_url(
            url,
            client_name=options.client_id,
            socket_connect_timeout=options.connect_timeout,
            decode_responses=False,
        )
        try:
            await redis.ping()
        except (RedisError, OSError) as exc:
            await redis.aclose()
            raise ConnectionFailed(f"Cannot reach broker at {url}: {exc}") from exc

        conn = RedisConnection(client_id=options.client_id, redis=redis, pubsub=redis.pubsub())
        if options.clean_session:
            self._retained.pop(options.client_id, None)
        else:
            for topic in sorted(self._retained.get(options.client_id, set())):
                await self.subscribe(conn, topic)
        logger.info("Redis transport connected: client_id=%s", options.client_id)
        return conn

    async def subscribe(self, handle: RedisConnection, topic_pattern: str) -> None:
        channel, is_pattern = to_redis_subscription(topic_pattern)
        if is_pattern:
            await handle.pubsub.psubscribe(channel)
        else:
            await handle.pubsub.subscribe(channel)
        handle.topics.add(topic_pattern)
        self._retained.setdefault(handle.client_id, set()).add(topic_pattern)
        if handle.listener is None:
            handle.listener = asyncio.create_task(
                self._listen(handle), name=f"redis-transport-{handle.client_id}",
            )
        logger.debug("Subscribed to %s (%s)", topic_pattern, channel)

    async def publish(self, handle: RedisConnection, topic: str, payload: str) -> None:
        await handle.redis.publish(topic, payload.encode("utf-8"))

    def on_message(self, handle: RedisConnection, callback: OnMessageCallback) -> None:
        handle.callbacks.append(callback)

    async def disconnect(self, handle: RedisConnection) -> None:
        if handle.closed:
            return
        handle.closed = True
        try:
            if handle.listener is not None:
                handle.listener.cancel()
                try:
                    await handle.listener
                except asyncio.CancelledError:
                    pass
                except Exception:
                    logger.warning("Listener for %s ended with an error", handle.client_id, exc_info=True)
        finally:
            try:
                await handle.pubsub.aclose()
            finally:
                await handle.redis.aclose()
        logger.info("Redis transport disconnected: client_id=%s", handle.client_id)

    async def _listen(self, handle: RedisConnection) -> None:
        async for message in handle.pubsub.listen():
            if message["type"] not in ("message", "pmessage"):
                continue
            channel = message["channel"]
            topic = channel.decode("utf-8", errors="replace") if isinstance(channel, bytes) else channel
            data = message["data"]
            if isinstance(data, str):
                data = data.encode("utf-8")
            for callback in list(handle.callbacks):
                try:
                    callback(topic, data)
                except Exception:
                    logger.exception("Error dispatching message on %s", topic)
