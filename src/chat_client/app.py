from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator

from chat_client.application.ports.capture import AudioInput
from chat_client.application.ports.clock import Clock, SystemClock
from chat_client.application.ports.transport import ConnectOptions, Transport
from chat_client.config import Settings, settings as default_settings
from chat_client.domain.value_objects.identity import Identity
from chat_client.infrastructure.bus.redis_transport import RedisTransport
from chat_client.infrastructure.capture.unavailable import UnavailableAudioInput
from chat_client.services.composer import Composer
from chat_client.services.message_log import MessageLog
from chat_client.services.recording_controller import RecordingController
from chat_client.services.session_channel import SessionChannel

logger = logging.getLogger(__name__)


@dataclass
class ChatContext:
    """Everything that lives exactly as long as one conversation."""

    channel: SessionChannel
    recorder: RecordingController

    @property
    def log(self) -> MessageLog:
        return self.channel.log

    @property
    def composer(self) -> Composer:
        return self.channel.composer


def create_context(
    identity: Identity,
    peer: Identity,
    *,
    config: Settings | None = None,
    transport: Transport | None = None,
    audio_input: AudioInput | None = None,
    clock: Clock | None = None,
) -> ChatContext:
    config = config or default_settings
    clock = clock or SystemClock()
    composer = Composer()
    channel = SessionChannel(
        transport or RedisTransport(),
        identity,
        peer,
        broker_url=config.BROKER_URL,
        room=config.CHAT_ROOM,
        options=ConnectOptions(
            client_id=config.client_id,
            clean_session=config.CLEAN_SESSION,
            connect_timeout=config.connect_timeout,
        ),
        mode=config.SUBSCRIBE_MODE,
        log=MessageLog(),
        composer=composer,
        clock=clock,
    )
    recorder = RecordingController(
        audio_input or UnavailableAudioInput(),
        clock=clock,
        mime=config.RECORDING_MIME,
        tick_seconds=config.RECORDING_TICK_SECONDS,
        on_recorded=composer.set_recording,
    )
    return ChatContext(channel=channel, recorder=recorder)


@asynccontextmanager
async def lifespan(context: ChatContext) -> AsyncIterator[ChatContext]:
    """Open the channel; on exit discard any recording and close it."""
    await context.channel.open()
    try:
        yield context
    finally:
        await context.recorder.cancel()
        await context.channel.close()
        logger.info("Chat context closed")
