from __future__ import annotations

from typing import Callable, Protocol

OnChunkCallback = Callable[[bytes], None]


class CaptureSession(Protocol):
    def on_chunk(self, callback: OnChunkCallback) -> None: ...

    async def stop(self) -> None: ...


class AudioInput(Protocol):
    def is_available(self) -> bool: ...

    async def acquire(self) -> CaptureSession: ...
