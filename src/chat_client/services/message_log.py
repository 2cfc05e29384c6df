"""Append-only record of the conversation as seen locally."""
from __future__ import annotations

import logging
from typing import Callable, Iterator

from chat_client.domain.entities.message import Message

logger = logging.getLogger(__name__)

Listener = Callable[[Message], None]


class MessageLog:
    def __init__(self) -> None:
        self._records: list[Message] = []
        self._listeners: list[Listener] = []

    def append(self, record: Message) -> None:
        self._records.append(record)
        for listener in list(self._listeners):
            try:
                listener(record)
            except Exception:
                logger.exception("Message log listener failed")

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """Register an observer of appended records. Returns a remover."""
        self._listeners.append(listener)

        def remove() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

        return remove

    @property
    def records(self) -> tuple[Message, ...]:
        return tuple(self._records)

    @property
    def last(self) -> Message | None:
        return self._records[-1] if self._records else None

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._records))
