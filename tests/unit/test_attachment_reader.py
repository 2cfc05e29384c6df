from __future__ import annotations

import pytest

from chat_client.application.exceptions import AttachmentError
from chat_client.domain.value_objects.enums import MediaKind
from chat_client.infrastructure.files.attachment_reader import read_attachment


def test_reads_image_file(tmp_path):
    path = tmp_path / "cat.png"
    path.write_bytes(b"\x89PNG\r\n")

    attachment = read_attachment(path)

    assert attachment.media_kind is MediaKind.IMAGE
    assert attachment.mime == "image/png"
    assert attachment.data == b"\x89PNG\r\n"


def test_reads_audio_file(tmp_path):
    path = tmp_path / "note.wav"
    path.write_bytes(b"RIFF")

    attachment = read_attachment(str(path))

    assert attachment.media_kind is MediaKind.AUDIO
    assert attachment.data == b"RIFF"


def test_other_files_are_not_read(tmp_path):
    path = tmp_path / "report.pdf"
    path.write_bytes(b"%PDF")

    attachment = read_attachment(path)

    assert attachment.media_kind is MediaKind.OTHER
    assert attachment.data == b""


def test_missing_media_file_raises(tmp_path):
    with pytest.raises(AttachmentError):
        read_attachment(tmp_path / "missing.jpg")
