from __future__ import annotations

import pytest

from chat_client.domain.value_objects.enums import SubscribeMode
from chat_client.domain.value_objects.identity import Identity
from chat_client.domain.value_objects.topic import (
    UNKNOWN_SENDER,
    publish_topic,
    sender_of,
    subscription_topic,
    validate_room,
)


def test_publish_topic_is_keyed_by_own_identity():
    assert publish_topic("chatroom", Identity("alice")) == "chatroom/alice"


def test_subscription_topic_per_mode():
    assert subscription_topic("chatroom", Identity("bob"), SubscribeMode.PEER) == "chatroom/bob"
    assert subscription_topic("chatroom", Identity("bob"), SubscribeMode.ROOM) == "chatroom/#"


@pytest.mark.parametrize(
    "topic, sender",
    [("room/bob", "bob"), ("room/bob/extra", "bob"), ("room", UNKNOWN_SENDER), ("room/", UNKNOWN_SENDER)],
)
def test_sender_of(topic, sender):
    assert sender_of(topic) == sender


@pytest.mark.parametrize("room", ["", "a/b", "room#", "room+"])
def test_validate_room_rejects_reserved(room):
    with pytest.raises(ValueError):
        validate_room(room)
