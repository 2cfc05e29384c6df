"""Preview stage between composing an attachment/recording and sending it."""
from __future__ import annotations

import logging

from chat_client.application.exceptions import UnsupportedAttachmentKind
from chat_client.domain.entities.payload import Payload
from chat_client.domain.value_objects.enums import MediaKind
from chat_client.services import payload_codec

logger = logging.getLogger(__name__)


class Composer:
    def __init__(self) -> None:
        self._attachment: Payload | None = None
        self._recording: Payload | None = None

    @property
    def attachment(self) -> Payload | None:
        return self._attachment

    @property
    def recording(self) -> Payload | None:
        return self._recording

    @property
    def pending(self) -> Payload | None:
        return self._attachment or self._recording

    def attach(self, kind: MediaKind, data: bytes, mime: str) -> Payload | None:
        """Select an attachment. Kinds other than image/audio are ignored."""
        try:
            raw = self._encode(kind, data, mime)
        except UnsupportedAttachmentKind as exc:
            logger.debug("Attachment ignored: %s", exc.detail)
            return None
        self._attachment = payload_codec.decode(raw)
        return self._attachment

    def set_recording(self, payload: Payload) -> None:
        self._recording = payload

    def discard(self) -> None:
        self._attachment = None

    def clear(self) -> None:
        self._attachment = None
        self._recording = None

    @staticmethod
    def _encode(kind: MediaKind, data: bytes, mime: str) -> str:
        if kind is MediaKind.IMAGE and payload_codec.media_kind(mime) is MediaKind.IMAGE:
            return payload_codec.encode_image(data, mime)
        if kind is MediaKind.AUDIO and payload_codec.media_kind(mime) is MediaKind.AUDIO:
            return payload_codec.encode_audio(data, mime)
        raise UnsupportedAttachmentKind(f"{kind} ({mime})")
