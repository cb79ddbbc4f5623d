"""Collision-avoiding object paths for raw videos and thumbnails.

Paths combine the owner folder, a millisecond timestamp and a short random
suffix. Two uploads from the same owner in the same millisecond still differ
by suffix; no global uniqueness is promised.
"""

from __future__ import annotations

import time
import uuid
from typing import Callable, Optional

from video_ingest.models.video import StoredVideoPath

_SUFFIX_LEN = 10


def _epoch_millis(clock: Callable[[], float]) -> int:
    return int(clock() * 1000)


def random_suffix() -> str:
    return uuid.uuid4().hex[:_SUFFIX_LEN]


def file_extension(filename: str) -> str:
    """Text after the last dot; the whole name when there is no dot."""
    return filename.rsplit(".", 1)[-1]


def build_video_path(
    owner_id: str,
    extension: str,
    clock: Callable[[], float] = time.time,
    suffix: Optional[str] = None,
) -> StoredVideoPath:
    generated_name = f"{_epoch_millis(clock)}-{suffix or random_suffix()}.{extension}"
    return StoredVideoPath(
        owner_id=owner_id,
        generated_name=generated_name,
        full_path=f"{owner_id}/{generated_name}",
    )


def build_thumbnail_path(
    owner_id: str,
    clock: Callable[[], float] = time.time,
    suffix: Optional[str] = None,
) -> str:
    return f"{owner_id}/thumbnail_{_epoch_millis(clock)}_{suffix or random_suffix()}.jpg"
