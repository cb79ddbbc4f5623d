"""Download node: fetches the raw video from the videos bucket."""

from __future__ import annotations

import structlog
from langchain_core.runnables import RunnableConfig

from video_ingest.config import settings
from video_ingest.errors import DownloadError, StoreError
from video_ingest.graph.state import ProcessingState, Stage
from video_ingest.nodes._deps import failure, get_backend

logger = structlog.get_logger()


async def download_video(state: ProcessingState, config: RunnableConfig) -> dict:
    video_path = state["request"]["video_path"]
    logger.info("processor.download.start", video_path=video_path)

    try:
        video_bytes = await get_backend(config).download(settings.videos_bucket, video_path)
        if not video_bytes:
            raise StoreError(f"{settings.videos_bucket}/{video_path}: empty object")
    except StoreError as exc:
        logger.exception("processor.download.failed", video_path=video_path)
        return failure(DownloadError(f"Error descargando video: {exc}"))

    logger.info("processor.download.done", video_path=video_path, size=len(video_bytes))
    return {"video_bytes": video_bytes, "stage": Stage.EXTRACTING.value}
