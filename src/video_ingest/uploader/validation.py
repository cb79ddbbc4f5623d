"""Local checks on a selected video file. No network access."""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from video_ingest.config import settings
from video_ingest.errors import FileTooLargeError, InvalidFileTypeError, UploadError
from video_ingest.tools.naming import file_extension

_MIB = 1024 * 1024

INVALID_TYPE_MESSAGE = "Por favor selecciona un archivo de video válido"


@dataclass(frozen=True)
class VideoFile:
    """A user-selected file: declared media type plus its bytes."""

    name: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def extension(self) -> str:
        return file_extension(self.name)

    @classmethod
    def from_path(cls, path: Union[str, Path], content_type: Optional[str] = None) -> "VideoFile":
        path = Path(path)
        guessed, _ = mimetypes.guess_type(path.name)
        return cls(
            name=path.name,
            content_type=content_type or guessed or "application/octet-stream",
            data=path.read_bytes(),
        )


class RejectionReason(str, Enum):
    INVALID_FILE_TYPE = "invalid_file_type"
    FILE_TOO_LARGE = "file_too_large"


@dataclass(frozen=True)
class Accepted:
    file: VideoFile


@dataclass(frozen=True)
class Rejected:
    reason: RejectionReason
    message: str

    def to_error(self) -> UploadError:
        if self.reason is RejectionReason.FILE_TOO_LARGE:
            return FileTooLargeError(self.message)
        return InvalidFileTypeError(self.message)


ValidationOutcome = Union[Accepted, Rejected]


def too_large_message(max_bytes: int) -> str:
    return f"El archivo es demasiado grande. Máximo {max_bytes // _MIB}MB"


def validate(file: VideoFile, max_bytes: Optional[int] = None) -> ValidationOutcome:
    """Accept video/* files up to *max_bytes* (settings.max_upload_bytes by default)."""
    limit = settings.max_upload_bytes if max_bytes is None else max_bytes

    if not (file.content_type or "").lower().startswith("video/"):
        return Rejected(RejectionReason.INVALID_FILE_TYPE, INVALID_TYPE_MESSAGE)
    if file.size > limit:
        return Rejected(RejectionReason.FILE_TOO_LARGE, too_large_message(limit))
    return Accepted(file)


def parse_tags(text: str) -> list[str]:
    """Split comma-separated tag input ("tag1, tag2, tag3"), dropping blanks."""
    return [tag.strip() for tag in (text or "").split(",") if tag.strip()]
