"""Access to per-invocation collaborators carried in the run config."""

from __future__ import annotations

from langchain_core.runnables import RunnableConfig

from video_ingest.graph.state import Stage
from video_ingest.errors import ProcessingError
from video_ingest.tools.ffmpeg import FrameExtractor
from video_ingest.tools.storage_backend import StorageBackend


def get_backend(config: RunnableConfig) -> StorageBackend:
    return config["configurable"]["backend"]


def get_extractor(config: RunnableConfig) -> FrameExtractor:
    return config["configurable"]["extractor"]


def failure(exc: ProcessingError) -> dict:
    """State update that moves the run to Failed(stage, reason)."""
    return {
        "stage": Stage.FAILED.value,
        "failed_stage": exc.stage,
        "error": str(exc),
    }
