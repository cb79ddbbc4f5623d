"""Video processor: runs the pipeline graph and shapes its terminal outcome."""

from __future__ import annotations

import uuid
from typing import Any, Optional

import structlog

from video_ingest.api.schemas import (
    ProcessingFailure,
    ProcessingResult,
    ProcessingSuccess,
)
from video_ingest.graph.builder import get_compiled_graph
from video_ingest.graph.state import Stage
from video_ingest.tools.ffmpeg import FFmpegFrameExtractor, FrameExtractor
from video_ingest.tools.storage_backend import StorageBackend, get_backend

logger = structlog.get_logger()

SUCCESS_MESSAGE = "Video procesado exitosamente"


class VideoProcessor:
    """Converts a stored raw video into a thumbnail plus a videos record.

    Collaborators are injected; the compiled graph is shared. Every call
    returns exactly one ProcessingSuccess or ProcessingFailure and never
    raises.
    """

    def __init__(
        self,
        backend: Optional[StorageBackend] = None,
        extractor: Optional[FrameExtractor] = None,
        graph=None,
    ):
        self.backend = backend if backend is not None else get_backend()
        self.extractor = extractor if extractor is not None else FFmpegFrameExtractor()
        self.graph = graph if graph is not None else get_compiled_graph()

    async def process(self, payload: Any) -> ProcessingResult:
        with structlog.contextvars.bound_contextvars(invocation_id=uuid.uuid4().hex):
            return await self._process(payload)

    async def _process(self, payload: Any) -> ProcessingResult:
        config = {
            "configurable": {
                "backend": self.backend,
                "extractor": self.extractor,
            },
            "run_name": "video-processor",
        }
        initial_state = {
            "payload": payload,
            "request": None,
            "stage": Stage.RECEIVED.value,
            "failed_stage": None,
            "error": None,
        }

        logger.info("processor.received")
        try:
            final_state = await self.graph.ainvoke(initial_state, config=config)
        except Exception as exc:
            logger.exception("processor.unexpected_error")
            return ProcessingFailure(
                error=str(exc) or exc.__class__.__name__,
                stage=Stage.FAILED.value,
            )

        if final_state.get("error"):
            logger.warning(
                "processor.failed",
                stage=final_state.get("failed_stage"),
                error=final_state["error"],
            )
            return ProcessingFailure(
                error=final_state["error"],
                stage=final_state.get("failed_stage") or Stage.FAILED.value,
            )

        request = final_state["request"]
        result = ProcessingSuccess(
            message=SUCCESS_MESSAGE,
            video_id=final_state["video_id"],
            thumbnail_path=final_state["thumbnail_path"],
            video_path=request["video_path"],
        )
        logger.info(
            "processor.succeeded",
            video_id=result.video_id,
            thumbnail_path=result.thumbnail_path,
        )
        return result
