"""StateGraph definition: the five processor steps in strict sequence."""

from __future__ import annotations

from functools import lru_cache

from langgraph.graph import END, StateGraph

from video_ingest.graph.edges import (
    route_after_download,
    route_after_extract,
    route_after_thumbnail,
    route_after_validate,
)
from video_ingest.graph.state import ProcessingState
from video_ingest.nodes.download_video import download_video
from video_ingest.nodes.extract_thumbnail import extract_thumbnail
from video_ingest.nodes.persist_record import persist_record
from video_ingest.nodes.upload_thumbnail import upload_thumbnail
from video_ingest.nodes.validate_request import validate_request


def build_graph():
    """Build and compile the video-processor graph.

    validate_request -> download_video -> extract_thumbnail ->
    upload_thumbnail -> persist_record, with an exit to END after any
    step that recorded an error. No checkpointer: a run is never resumed.
    """
    graph = StateGraph(ProcessingState)

    graph.add_node("validate_request", validate_request)
    graph.add_node("download_video", download_video)
    graph.add_node("extract_thumbnail", extract_thumbnail)
    graph.add_node("upload_thumbnail", upload_thumbnail)
    graph.add_node("persist_record", persist_record)

    graph.set_entry_point("validate_request")

    graph.add_conditional_edges(
        "validate_request",
        route_after_validate,
        {"download_video": "download_video", END: END},
    )
    graph.add_conditional_edges(
        "download_video",
        route_after_download,
        {"extract_thumbnail": "extract_thumbnail", END: END},
    )
    graph.add_conditional_edges(
        "extract_thumbnail",
        route_after_extract,
        {"upload_thumbnail": "upload_thumbnail", END: END},
    )
    graph.add_conditional_edges(
        "upload_thumbnail",
        route_after_thumbnail,
        {"persist_record": "persist_record", END: END},
    )
    graph.add_edge("persist_record", END)

    return graph.compile()


@lru_cache(maxsize=1)
def get_compiled_graph():
    """Return the compiled graph, built once per process."""
    return build_graph()
