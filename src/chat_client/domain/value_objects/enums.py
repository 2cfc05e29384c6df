from __future__ import annotations

from enum import StrEnum


class PayloadKind(StrEnum):
    TEXT = "text"
    IMAGE = "image"
    AUDIO = "audio"


class MediaKind(StrEnum):
    IMAGE = "image"
    AUDIO = "audio"
    OTHER = "other"


class ConnectionState(StrEnum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class RecordingState(StrEnum):
    IDLE = "idle"
    RECORDING = "recording"
    STOPPED = "stopped"


class SubscribeMode(StrEnum):
    PEER = "peer"
    ROOM = "room"
