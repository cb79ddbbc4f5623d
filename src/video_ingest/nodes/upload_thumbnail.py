"""Upload node: stores the extracted frame in the thumbnails bucket."""

from __future__ import annotations

import structlog
from langchain_core.runnables import RunnableConfig

from video_ingest.config import settings
from video_ingest.errors import StoreError, ThumbnailUploadError
from video_ingest.graph.state import ProcessingState, Stage
from video_ingest.nodes._deps import failure, get_backend
from video_ingest.tools.naming import build_thumbnail_path

logger = structlog.get_logger()


async def upload_thumbnail(state: ProcessingState, config: RunnableConfig) -> dict:
    owner_id = state["request"]["owner_id"]
    thumbnail_path = build_thumbnail_path(owner_id)
    logger.info("processor.thumbnail_upload.start", thumbnail_path=thumbnail_path)

    try:
        await get_backend(config).upload(
            settings.thumbnails_bucket,
            thumbnail_path,
            state["thumbnail_bytes"],
            content_type="image/jpeg",
            upsert=False,
        )
    except StoreError as exc:
        logger.exception("processor.thumbnail_upload.failed", thumbnail_path=thumbnail_path)
        return failure(ThumbnailUploadError(f"Error subiendo miniatura: {exc}"))

    logger.info("processor.thumbnail_upload.done", thumbnail_path=thumbnail_path)
    return {
        "thumbnail_path": thumbnail_path,
        "thumbnail_bytes": None,
        "stage": Stage.PERSISTING.value,
    }
