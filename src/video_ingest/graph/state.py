"""Per-invocation state for the video-processor LangGraph workflow."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from typing_extensions import TypedDict


class Stage(str, Enum):
    RECEIVED = "received"
    DOWNLOADING = "downloading"
    EXTRACTING = "extracting"
    UPLOADING_THUMBNAIL = "uploading_thumbnail"
    PERSISTING = "persisting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ProcessingState(TypedDict, total=False):
    """State threaded through the processor nodes.

    Each node adds its output; the next node requires it. Once ``error`` is
    set, routing ends the run.
    """

    # Raw trigger body, as received
    payload: Any

    # Validated request (ProcessingRequest.model_dump())
    request: Optional[dict]

    # Step outputs
    video_bytes: Optional[bytes]
    thumbnail_bytes: Optional[bytes]
    thumbnail_path: Optional[str]
    video_id: Optional[int]

    # State machine
    stage: str
    failed_stage: Optional[str]
    error: Optional[str]
