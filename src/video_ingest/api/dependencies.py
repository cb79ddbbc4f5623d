"""FastAPI dependency injection: processor instance."""

from __future__ import annotations

from functools import lru_cache

from video_ingest.processor import VideoProcessor
from video_ingest.tools.ffmpeg import FFmpegFrameExtractor
from video_ingest.tools.storage_backend import get_backend


@lru_cache(maxsize=1)
def get_processor() -> VideoProcessor:
    """Return the process-wide processor wired to the configured backend."""
    return VideoProcessor(backend=get_backend(), extractor=FFmpegFrameExtractor())
