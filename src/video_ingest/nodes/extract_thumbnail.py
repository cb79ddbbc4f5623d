"""Extract node: grabs one frame from the downloaded video."""

from __future__ import annotations

import structlog
from langchain_core.runnables import RunnableConfig

from video_ingest.config import settings
from video_ingest.errors import ExternalToolError
from video_ingest.graph.state import ProcessingState, Stage
from video_ingest.nodes._deps import failure, get_extractor

logger = structlog.get_logger()


async def extract_thumbnail(state: ProcessingState, config: RunnableConfig) -> dict:
    """Run the frame extractor at the configured offset (1s by default).

    The extractor owns its temporary files and removes them before
    returning or raising.
    """
    offset = settings.thumbnail_offset_sec
    logger.info("processor.extract.start", offset_seconds=offset)

    try:
        frame = await get_extractor(config).extract_frame(state["video_bytes"], offset)
    except (ExternalToolError, OSError) as exc:
        logger.exception("processor.extract.failed")
        error = ExternalToolError(
            f"Error generando miniatura: {exc}",
            diagnostics=getattr(exc, "diagnostics", ""),
            returncode=getattr(exc, "returncode", None),
        )
        return failure(error)

    logger.info("processor.extract.done", size=len(frame))
    # Raw video is no longer needed past this point
    return {
        "thumbnail_bytes": frame,
        "video_bytes": None,
        "stage": Stage.UPLOADING_THUMBNAIL.value,
    }
