"""Topic layout: ``<room>/<participant>``."""
from __future__ import annotations

from chat_client.domain.value_objects.enums import SubscribeMode
from chat_client.domain.value_objects.identity import (
    MULTI_LEVEL_WILDCARD,
    SINGLE_LEVEL_WILDCARD,
    TOPIC_SEPARATOR,
    Identity,
)

UNKNOWN_SENDER = "Unknown"


def validate_room(room: str) -> str:
    if not room:
        raise ValueError("room must not be empty")
    for reserved in (TOPIC_SEPARATOR, MULTI_LEVEL_WILDCARD, SINGLE_LEVEL_WILDCARD):
        if reserved in room:
            raise ValueError(f"room must not contain '{reserved}'")
    return room


def publish_topic(room: str, identity: Identity) -> str:
    return f"{room}{TOPIC_SEPARATOR}{identity}"


def subscription_topic(room: str, peer: Identity, mode: SubscribeMode) -> str:
    if mode is SubscribeMode.ROOM:
        return f"{room}{TOPIC_SEPARATOR}{MULTI_LEVEL_WILDCARD}"
    return publish_topic(room, peer)


def sender_of(topic: str) -> str:
    """Participant segment of ``topic``, or UNKNOWN_SENDER when absent."""
    parts = topic.split(TOPIC_SEPARATOR)
    if len(parts) < 2 or not parts[1]:
        return UNKNOWN_SENDER
    return parts[1]
