from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from chat_client.domain.value_objects.enums import RecordingState


@dataclass(slots=True)
class RecordingSession:
    """One capture attempt. Never reused once stopped."""

    started_at: datetime
    state: RecordingState = RecordingState.RECORDING
    elapsed_seconds: int = 0
    closing: bool = False
    chunks: list[bytes] = field(default_factory=list)

    @property
    def active(self) -> bool:
        return self.state is RecordingState.RECORDING and not self.closing

    def add_chunk(self, chunk: bytes) -> None:
        if self.state is RecordingState.RECORDING:
            self.chunks.append(chunk)

    def finalize(self) -> bytes:
        self.state = RecordingState.STOPPED
        return b"".join(self.chunks)
