from __future__ import annotations

from typing import NewType

from chat_client.application.exceptions import InvalidIdentity

Identity = NewType("Identity", str)

TOPIC_SEPARATOR = "/"
MULTI_LEVEL_WILDCARD = "#"
SINGLE_LEVEL_WILDCARD = "+"


def validate_identity(raw: str) -> Identity:
    """Return ``raw`` as an Identity or raise InvalidIdentity."""
    if not raw:
        raise InvalidIdentity("Name must not be empty")
    if TOPIC_SEPARATOR in raw:
        raise InvalidIdentity(f"Name must not contain '{TOPIC_SEPARATOR}'")
    if MULTI_LEVEL_WILDCARD in raw:
        raise InvalidIdentity(f"Name must not contain '{MULTI_LEVEL_WILDCARD}'")
    return Identity(raw)
