"""Uploader: stores the raw video, then triggers the processor."""

from __future__ import annotations

import time
from typing import Callable, Optional, Sequence

import structlog

from video_ingest.api.schemas import ProcessingFailure, ProcessingRequest, ProcessingSuccess
from video_ingest.config import settings
from video_ingest.errors import ProcessingFailedError, StoreError, StoreWriteError
from video_ingest.models.video import StoredVideoPath
from video_ingest.tools.naming import build_video_path
from video_ingest.tools.storage_backend import StorageBackend
from video_ingest.uploader.client import ProcessorClient
from video_ingest.uploader.validation import Rejected, ValidationOutcome, VideoFile, validate

logger = structlog.get_logger()


class VideoUploader:
    def __init__(
        self,
        backend: StorageBackend,
        client: ProcessorClient,
        max_bytes: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.backend = backend
        self.client = client
        self.max_bytes = max_bytes
        self.clock = clock

    def validate(self, file: VideoFile) -> ValidationOutcome:
        return validate(file, max_bytes=self.max_bytes)

    async def upload(self, file: VideoFile, owner_id: str) -> StoredVideoPath:
        """Validate, then write the raw video under ``owner_id/`` without overwriting."""
        outcome = self.validate(file)
        if isinstance(outcome, Rejected):
            logger.info("uploader.upload.rejected", reason=outcome.reason.value, size=file.size)
            raise outcome.to_error()

        stored = build_video_path(owner_id, file.extension, clock=self.clock)
        logger.info("uploader.upload.start", path=stored.full_path, size=file.size)
        try:
            await self.backend.upload(
                settings.videos_bucket,
                stored.full_path,
                file.data,
                content_type=file.content_type,
                upsert=False,
                cache_control="3600",
            )
        except StoreError as exc:
            logger.exception("uploader.upload.failed", path=stored.full_path)
            raise StoreWriteError(f"Error al subir el video: {exc}") from exc

        logger.info("uploader.upload.done", path=stored.full_path)
        return stored

    async def submit_for_processing(
        self,
        stored: StoredVideoPath,
        owner_id: str,
        description: Optional[str] = None,
        tags: Optional[Sequence[str]] = None,
    ) -> ProcessingSuccess:
        request = ProcessingRequest(
            owner_id=owner_id,
            video_path=stored.full_path,
            description=description or None,
            tags=list(tags or []),
        )
        result = await self.client.invoke(request)
        if isinstance(result, ProcessingFailure):
            logger.warning("uploader.processing.failed", error=result.error)
            raise ProcessingFailedError(f"Error al procesar el video: {result.error}")

        logger.info("uploader.processing.done", video_id=result.video_id)
        return result
