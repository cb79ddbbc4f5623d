"""Persist node: inserts the videos row once both blobs exist."""

from __future__ import annotations

import structlog
from langchain_core.runnables import RunnableConfig

from video_ingest.config import settings
from video_ingest.errors import RecordInsertError, StoreError
from video_ingest.graph.state import ProcessingState, Stage
from video_ingest.nodes._deps import failure, get_backend

logger = structlog.get_logger()


def build_record_row(request: dict, thumbnail_path: str) -> dict:
    return {
        "uploader_id": request["owner_id"],
        "storage_path": request["video_path"],
        "thumbnail_path": thumbnail_path,
        "description": request.get("description"),
        "tags": list(request.get("tags") or []),
    }


async def persist_record(state: ProcessingState, config: RunnableConfig) -> dict:
    row = build_record_row(state["request"], state["thumbnail_path"])
    logger.info("processor.persist.start", uploader_id=row["uploader_id"])

    try:
        record = await get_backend(config).insert(settings.videos_table, row)
    except StoreError as exc:
        logger.exception("processor.persist.failed", uploader_id=row["uploader_id"])
        return failure(RecordInsertError(f"Error guardando registro: {exc}"))

    # Only the id is read back; videos.id is a bigint identity column
    video_id = int(record["id"])
    logger.info("processor.persist.done", video_id=video_id)
    return {"video_id": video_id, "stage": Stage.SUCCEEDED.value}
