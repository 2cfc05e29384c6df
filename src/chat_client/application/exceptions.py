from __future__ import annotations


class AppError(Exception):
    """Base application error."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail)


class InvalidIdentity(AppError):
    pass


class ConnectionFailed(AppError):
    pass


class CaptureUnsupported(AppError):
    pass


class UnsupportedAttachmentKind(AppError):
    pass


class AttachmentError(AppError):
    pass
