"""Upload form state: selection, metadata, progress and status message."""

from __future__ import annotations

import asyncio
from typing import Callable, Optional

import structlog

from video_ingest.api.schemas import ProcessingSuccess
from video_ingest.config import settings
from video_ingest.errors import UploadError
from video_ingest.uploader.service import VideoUploader
from video_ingest.uploader.validation import Rejected, VideoFile, parse_tags

logger = structlog.get_logger()

NO_FILE_MESSAGE = "Por favor selecciona un archivo de video"
UPLOADED_MESSAGE = "Video subido exitosamente. Procesando..."
PUBLISHED_MESSAGE = "¡Video publicado exitosamente!"

ProgressCallback = Callable[[int, str], None]


class UploadForm:
    """Drives one user's publish flow.

    Progress is stage-grained: 50 once the raw video is stored, 100 once the
    processor answers. A failed publish only clears ``is_uploading``; the
    selected file, description and tags stay so the user can retry.
    """

    def __init__(
        self,
        uploader: VideoUploader,
        owner_id: str,
        on_progress: Optional[ProgressCallback] = None,
        clear_after: Optional[float] = None,
    ):
        self.uploader = uploader
        self.owner_id = owner_id
        self.on_progress = on_progress
        self.clear_after = settings.message_clear_sec if clear_after is None else clear_after

        self.selected_file: Optional[VideoFile] = None
        self.description = ""
        self.tags_text = ""
        self.is_uploading = False
        self.progress = 0
        self.message = ""
        self._clear_handle: Optional[asyncio.TimerHandle] = None

    @property
    def tags(self) -> list[str]:
        return parse_tags(self.tags_text)

    @property
    def can_publish(self) -> bool:
        return self.selected_file is not None and not self.is_uploading

    def select_file(self, file: VideoFile) -> bool:
        outcome = self.uploader.validate(file)
        if isinstance(outcome, Rejected):
            logger.info("uploader.file_rejected", reason=outcome.reason.value, size=file.size)
            self.message = outcome.message
            self._schedule_clear()
            return False
        self.selected_file = file
        self.message = ""
        return True

    def reset(self) -> None:
        self.selected_file = None
        self.description = ""
        self.tags_text = ""

    def _set_progress(self, progress: int, message: str) -> None:
        self.progress = progress
        self.message = message
        if self.on_progress is not None:
            self.on_progress(progress, message)

    def _clear_message(self, expected: str) -> None:
        if self.message == expected:
            self.message = ""

    def _schedule_clear(self) -> None:
        if self._clear_handle is not None:
            self._clear_handle.cancel()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Selected outside a loop (sync CLI path); the next message replaces it
            return
        self._clear_handle = loop.call_later(self.clear_after, self._clear_message, self.message)

    async def publish(self) -> Optional[ProcessingSuccess]:
        """Upload, then process. Returns the processor's success body, or None."""
        if self.selected_file is None or not self.owner_id:
            self.message = NO_FILE_MESSAGE
            self._schedule_clear()
            return None

        self.is_uploading = True
        self._set_progress(0, "")

        try:
            stored = await self.uploader.upload(self.selected_file, self.owner_id)
            self._set_progress(50, UPLOADED_MESSAGE)

            result = await self.uploader.submit_for_processing(
                stored,
                self.owner_id,
                description=self.description.strip() or None,
                tags=self.tags,
            )
            self._set_progress(100, PUBLISHED_MESSAGE)
            self.reset()
            return result
        except UploadError as exc:
            self.message = f"Error: {exc}"
            return None
        finally:
            self.is_uploading = False
            self._schedule_clear()
