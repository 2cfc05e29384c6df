from __future__ import annotations

from dataclasses import dataclass

from chat_client.domain.value_objects.enums import PayloadKind


@dataclass(frozen=True, slots=True)
class Payload:
    kind: PayloadKind
    raw: str

    @property
    def is_media(self) -> bool:
        return self.kind is not PayloadKind.TEXT
