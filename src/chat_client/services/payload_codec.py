"""Wire encoding of chat payloads.

Every payload travels as a single string. Media are data URIs; the content
type is recovered from the marker prefix alone, anything else is text.
"""
from __future__ import annotations

import base64

from chat_client.domain.entities.payload import Payload
from chat_client.domain.value_objects.enums import MediaKind, PayloadKind

IMAGE_MARKER = "data:image"
AUDIO_MARKER = "data:audio"
TEXT_ESCAPE = "\\"

DEFAULT_IMAGE_MIME = "image/png"
DEFAULT_AUDIO_MIME = "audio/mp3"


def media_kind(mime: str | None) -> MediaKind:
    if mime and mime.startswith("image"):
        return MediaKind.IMAGE
    if mime and mime.startswith("audio"):
        return MediaKind.AUDIO
    return MediaKind.OTHER


def encode_media(data: bytes, mime: str) -> str:
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def encode_image(data: bytes, mime: str = DEFAULT_IMAGE_MIME) -> str:
    if media_kind(mime) is not MediaKind.IMAGE:
        raise ValueError(f"not an image mime type: {mime!r}")
    return encode_media(data, mime)


def encode_audio(data: bytes, mime: str = DEFAULT_AUDIO_MIME) -> str:
    if media_kind(mime) is not MediaKind.AUDIO:
        raise ValueError(f"not an audio mime type: {mime!r}")
    return encode_media(data, mime)


def _looks_like_media(value: str) -> bool:
    return value.startswith((IMAGE_MARKER, AUDIO_MARKER))


def encode_text(text: str) -> str:
    """Escape text that would otherwise be classified as media."""
    if _looks_like_media(text.lstrip(TEXT_ESCAPE)):
        return TEXT_ESCAPE + text
    return text


def classify(raw: str) -> PayloadKind:
    if raw.startswith(IMAGE_MARKER):
        return PayloadKind.IMAGE
    if raw.startswith(AUDIO_MARKER):
        return PayloadKind.AUDIO
    return PayloadKind.TEXT


def decode(raw: str) -> Payload:
    kind = classify(raw)
    if kind is PayloadKind.TEXT and raw.startswith(TEXT_ESCAPE) and _looks_like_media(raw.lstrip(TEXT_ESCAPE)):
        raw = raw[len(TEXT_ESCAPE):]
    return Payload(kind=kind, raw=raw)


def decode_bytes(raw: bytes) -> Payload:
    return decode(raw.decode("utf-8", errors="replace"))


def media_bytes(payload: Payload) -> bytes:
    """Binary content of a media payload; empty for text or malformed URIs."""
    if not payload.is_media:
        return b""
    _, sep, encoded = payload.raw.partition(";base64,")
    if not sep:
        return b""
    try:
        return base64.b64decode(encoded, validate=False)
    except ValueError:
        return b""
