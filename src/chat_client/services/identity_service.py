from __future__ import annotations

import logging
from typing import Callable

from chat_client.application.exceptions import InvalidIdentity
from chat_client.domain.value_objects.identity import Identity, validate_identity

logger = logging.getLogger(__name__)

Prompt = Callable[[str], str]
Report = Callable[[str], None]

SELF_LABEL = "Your name"
PEER_LABEL = "Chat with"


def resolve_identity(prompt: Prompt, report: Report, label: str) -> Identity:
    """Ask until a valid identity is supplied. Never gives up."""
    while True:
        raw = prompt(label)
        try:
            return validate_identity(raw)
        except InvalidIdentity as exc:
            logger.debug("Rejected %s=%r: %s", label, raw, exc.detail)
            report(exc.detail)


def resolve_identities(prompt: Prompt, report: Report) -> tuple[Identity, Identity]:
    me = resolve_identity(prompt, report, SELF_LABEL)
    peer = resolve_identity(prompt, report, PEER_LABEL)
    return me, peer
