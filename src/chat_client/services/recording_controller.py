"""Audio capture lifecycle: idle -> recording -> stopped -> idle."""
from __future__ import annotations

import asyncio
import logging
from typing import Callable

from chat_client.application.exceptions import CaptureUnsupported
from chat_client.application.ports.capture import AudioInput, CaptureSession
from chat_client.application.ports.clock import Clock, SystemClock
from chat_client.domain.entities.payload import Payload
from chat_client.domain.entities.recording import RecordingSession
from chat_client.domain.value_objects.enums import RecordingState
from chat_client.services import payload_codec

logger = logging.getLogger(__name__)

OnRecorded = Callable[[Payload], None]


class RecordingController:
    """Owns the single active recording.

    Starting while a recording is active stops and discards the previous one.
    """

    def __init__(
        self,
        audio_input: AudioInput,
        *,
        clock: Clock | None = None,
        mime: str = payload_codec.DEFAULT_AUDIO_MIME,
        tick_seconds: float = 1.0,
        on_recorded: OnRecorded | None = None,
    ) -> None:
        self._audio_input = audio_input
        self._clock = clock or SystemClock()
        self._mime = mime
        self._tick_seconds = tick_seconds
        self._on_recorded = on_recorded
        self._available: bool | None = None
        self._session: RecordingSession | None = None
        self._capture: CaptureSession | None = None
        self._tick_task: asyncio.Task[None] | None = None

    @property
    def state(self) -> RecordingState:
        if self._session is None:
            return RecordingState.IDLE
        if self._session.closing:
            return RecordingState.STOPPED
        return self._session.state

    @property
    def elapsed_seconds(self) -> int:
        return self._session.elapsed_seconds if self._session else 0

    @property
    def available(self) -> bool:
        if self._available is None:
            self._available = self._audio_input.is_available()
        return self._available

    async def start(self) -> None:
        if not self.available:
            raise CaptureUnsupported("Audio recording is not supported on this device")
        if self._session is not None and self._session.active:
            logger.info("Discarding active recording in favour of a new one")
            await self.cancel()

        capture = await self._audio_input.acquire()
        session = RecordingSession(started_at=self._clock.now())
        capture.on_chunk(session.add_chunk)
        self._capture = capture
        self._session = session
        self._tick_task = asyncio.create_task(self._tick(session), name="recording-tick")
        logger.debug("Recording started")

    async def stop(self) -> Payload | None:
        session = self._session
        if session is None or not session.active:
            return None

        session.closing = True
        await self._release()
        blob = session.finalize()
        logger.debug("Recording stopped: %d chunks, %d bytes", len(session.chunks), len(blob))

        raw = await asyncio.to_thread(payload_codec.encode_audio, blob, self._mime)
        payload = payload_codec.decode(raw)
        if self._session is session:
            self._session = None
        if self._on_recorded is not None:
            self._on_recorded(payload)
        return payload

    async def cancel(self) -> None:
        session = self._session
        if session is None or not session.active:
            return
        session.closing = True
        await self._release()
        session.finalize()
        if self._session is session:
            self._session = None

    async def _release(self) -> None:
        if self._tick_task is not None:
            self._tick_task.cancel()
            try:
                await self._tick_task
            except asyncio.CancelledError:
                pass
            self._tick_task = None
        if self._capture is not None:
            capture, self._capture = self._capture, None
            await capture.stop()

    async def _tick(self, session: RecordingSession) -> None:
        while True:
            await asyncio.sleep(self._tick_seconds)
            session.elapsed_seconds += 1
