"""Request/Response schemas for the video-processor function."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class ProcessingRequest(BaseModel):
    """Body of the trigger call. Immutable once built."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    owner_id: str
    video_path: str
    description: Optional[str] = None
    tags: list[str] = Field(default_factory=list)


class ProcessingSuccess(BaseModel):
    success: Literal[True] = True
    message: str
    video_id: int
    thumbnail_path: str
    video_path: str
    timestamp: str = Field(default_factory=utc_timestamp)


class ProcessingFailure(BaseModel):
    success: Literal[False] = False
    error: str
    timestamp: str = Field(default_factory=utc_timestamp)
    # Internal only: which pipeline stage failed. Not part of the wire body.
    stage: str = Field(default="failed", exclude=True)


ProcessingResult = Union[ProcessingSuccess, ProcessingFailure]


def parse_processing_result(payload: dict) -> ProcessingResult:
    """Build the matching result variant from a decoded response body.

    A ``success: true`` body missing the success fields is reported as a
    failure rather than raised.
    """
    if payload.get("success") is True:
        try:
            return ProcessingSuccess.model_validate(payload)
        except ValidationError as exc:
            fields = ", ".join(str(err["loc"][0]) for err in exc.errors() if err["loc"])
            return ProcessingFailure(
                error=f"Respuesta inválida del procesador: {fields}"
            )
    return ProcessingFailure(
        error=str(payload.get("error") or "Error desconocido"),
        timestamp=str(payload.get("timestamp") or utc_timestamp()),
    )
