"""FastAPI route handler for the video-processor function."""

from __future__ import annotations

import json

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from video_ingest.api.dependencies import get_processor
from video_ingest.api.schemas import ProcessingFailure, ProcessingSuccess
from video_ingest.graph.state import Stage
from video_ingest.processor import VideoProcessor

logger = structlog.get_logger()

router = APIRouter(prefix="/functions/v1")


def _status_code(result: ProcessingSuccess | ProcessingFailure) -> int:
    if isinstance(result, ProcessingSuccess):
        return 200
    if result.stage == Stage.RECEIVED.value:
        return 400
    return 500


@router.post("/video-processor")
async def video_processor(request: Request, processor: VideoProcessor = Depends(get_processor)):
    """Process one uploaded video: thumbnail + metadata record.

    Always answers with the structured success/failure body; malformed JSON
    is handed to the pipeline as an invalid payload.
    """
    raw = await request.body()
    try:
        payload = json.loads(raw) if raw else None
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("video_processor.invalid_json", size=len(raw))
        payload = None

    result = await processor.process(payload)
    return JSONResponse(status_code=_status_code(result), content=result.model_dump())
