"""Pydantic models for stored videos."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class StoredVideoPath(BaseModel):
    """Location of a raw video in the videos bucket: ``<owner_id>/<generated_name>``."""

    model_config = ConfigDict(frozen=True)

    owner_id: str
    generated_name: str
    full_path: str
