"""Validate node: turns the raw trigger body into a ProcessingRequest."""

from __future__ import annotations

from typing import Any

import structlog
from pydantic import ValidationError

from video_ingest.api.schemas import ProcessingRequest
from video_ingest.errors import InvalidRequestError
from video_ingest.graph.state import ProcessingState, Stage
from video_ingest.nodes._deps import failure

logger = structlog.get_logger()

MISSING_FIELDS_MESSAGE = "owner_id y video_path son requeridos"


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def parse_request(payload: Any) -> ProcessingRequest:
    """Check the required-field set, then build the typed request.

    Raises InvalidRequestError before any side effect.
    """
    if not isinstance(payload, dict):
        raise InvalidRequestError("El cuerpo de la petición debe ser un objeto JSON")
    if _is_blank(payload.get("owner_id")) or _is_blank(payload.get("video_path")):
        raise InvalidRequestError(MISSING_FIELDS_MESSAGE)

    body = dict(payload)
    if body.get("tags") is None:
        body.pop("tags", None)
    try:
        return ProcessingRequest.model_validate(body)
    except ValidationError as exc:
        fields = ", ".join(str(err["loc"][0]) for err in exc.errors() if err["loc"])
        raise InvalidRequestError(f"Campos inválidos: {fields}") from exc


async def validate_request(state: ProcessingState) -> dict:
    try:
        request = parse_request(state.get("payload"))
    except InvalidRequestError as exc:
        logger.warning("processor.validate.rejected", reason=str(exc))
        return failure(exc)

    logger.info(
        "processor.validate.accepted",
        owner_id=request.owner_id,
        video_path=request.video_path,
        tag_count=len(request.tags),
    )
    return {"request": request.model_dump(), "stage": Stage.DOWNLOADING.value}
