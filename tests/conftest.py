"""Shared pytest fixtures for video-ingest tests."""

from __future__ import annotations

from typing import Any, Optional

import pytest
from fastapi.testclient import TestClient

from video_ingest.api.dependencies import get_processor
from video_ingest.errors import ExternalToolError
from video_ingest.main import app
from video_ingest.memory.blob_store import InMemoryBackend
from video_ingest.processor import VideoProcessor

FAKE_JPEG = b"\xff\xd8\xff\xe0fake-jpeg-frame\xff\xd9"
SAMPLE_VIDEO = b"\x00\x00\x00\x18ftypmp42" + b"\x00" * 64


class RecordingBackend(InMemoryBackend):
    """InMemoryBackend that logs every call and can be told to fail one method."""

    def __init__(self):
        super().__init__()
        self.calls: list[tuple[str, str, str]] = []
        self.failures: dict[str, Exception] = {}

    def fail(self, method: str, exc: Exception) -> None:
        self.failures[method] = exc

    async def download(self, bucket: str, path: str) -> bytes:
        self.calls.append(("download", bucket, path))
        if "download" in self.failures:
            raise self.failures["download"]
        return await super().download(bucket, path)

    async def upload(self, bucket, path, data, content_type, upsert=False, cache_control="3600"):
        self.calls.append(("upload", bucket, path))
        if "upload" in self.failures:
            raise self.failures["upload"]
        return await super().upload(bucket, path, data, content_type, upsert, cache_control)

    async def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("insert", table, row.get("thumbnail_path", "")))
        if "insert" in self.failures:
            raise self.failures["insert"]
        return await super().insert(table, row)

    def call_names(self) -> list[str]:
        return [name for name, _, _ in self.calls]


class StubExtractor:
    """Frame extractor that returns fixed bytes, or raises when given an error."""

    def __init__(self, frame: bytes = FAKE_JPEG, error: Optional[Exception] = None):
        self.frame = frame
        self.error = error
        self.calls: list[tuple[int, float]] = []

    async def extract_frame(self, video_bytes: bytes, offset_seconds: float) -> bytes:
        self.calls.append((len(video_bytes), offset_seconds))
        if self.error is not None:
            raise self.error
        return self.frame


@pytest.fixture
def backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture
def extractor() -> StubExtractor:
    return StubExtractor()


@pytest.fixture
def failing_extractor() -> StubExtractor:
    return StubExtractor(
        error=ExternalToolError(
            "ffmpeg terminó con código 1: moov atom not found",
            diagnostics="moov atom not found",
            returncode=1,
        )
    )


@pytest.fixture
def processor(backend: RecordingBackend, extractor: StubExtractor) -> VideoProcessor:
    return VideoProcessor(backend=backend, extractor=extractor)


@pytest.fixture
def stored_video(backend: RecordingBackend) -> str:
    """Seed one raw video for owner u1 and return its path."""
    path = "u1/123-abc.mp4"
    backend.put_object("videos", path, SAMPLE_VIDEO, content_type="video/mp4")
    return path


@pytest.fixture
def api_client(processor: VideoProcessor):
    app.dependency_overrides[get_processor] = lambda: processor
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
