"""Conditional edge routing for the processor graph.

Every step either hands off to the next one or, once an error is recorded,
ends the run. There are no retries between states.
"""

from __future__ import annotations

from typing import Literal

from video_ingest.graph.state import ProcessingState

END = "__end__"


def _failed(state: ProcessingState) -> bool:
    return bool(state.get("error"))


def route_after_validate(state: ProcessingState) -> Literal["download_video", "__end__"]:
    return END if _failed(state) else "download_video"


def route_after_download(state: ProcessingState) -> Literal["extract_thumbnail", "__end__"]:
    return END if _failed(state) else "extract_thumbnail"


def route_after_extract(state: ProcessingState) -> Literal["upload_thumbnail", "__end__"]:
    return END if _failed(state) else "upload_thumbnail"


def route_after_thumbnail(state: ProcessingState) -> Literal["persist_record", "__end__"]:
    return END if _failed(state) else "persist_record"
