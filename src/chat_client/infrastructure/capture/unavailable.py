from __future__ import annotations

from chat_client.application.exceptions import CaptureUnsupported
from chat_client.application.ports.capture import CaptureSession


class UnavailableAudioInput:
    """Audio input used when no capture backend is installed."""

    def is_available(self) -> bool:
        return False

    async def acquire(self) -> CaptureSession:
        raise CaptureUnsupported("No audio capture backend available")
