from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from pathlib import Path

from chat_client.application.exceptions import AttachmentError
from chat_client.domain.value_objects.enums import MediaKind
from chat_client.services.payload_codec import media_kind


@dataclass(frozen=True, slots=True)
class Attachment:
    media_kind: MediaKind
    mime: str
    data: bytes


def read_attachment(path: str | Path) -> Attachment:
    """Load a user-selected file. Unknown types come back as MediaKind.OTHER."""
    path = Path(path)
    mime, _ = mimetypes.guess_type(path.name)
    kind = media_kind(mime)
    if kind is MediaKind.OTHER:
        return Attachment(media_kind=kind, mime=mime or "application/octet-stream", data=b"")
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise AttachmentError(f"Cannot read {path}: {exc.strerror or exc}") from exc
    return Attachment(media_kind=kind, mime=mime or "", data=data)
