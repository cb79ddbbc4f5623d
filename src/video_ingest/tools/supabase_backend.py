"""Supabase Storage downloads/uploads and PostgreSQL record inserts."""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import structlog
from postgrest.exceptions import APIError
from supabase import Client, create_client

from video_ingest.config import settings
from video_ingest.errors import (
    BlobConflictError,
    BlobNotFoundError,
    StoreAccessError,
    StoreError,
)

logger = structlog.get_logger()


def _status_code(exc: Exception) -> Optional[int]:
    """Pull an HTTP status out of a storage3 exception.

    Newer storage3 releases expose ``status``; older ones carry a dict with
    ``statusCode`` as the first arg.
    """
    candidates: list[Any] = [getattr(exc, "status", None), getattr(exc, "status_code", None)]
    if exc.args and isinstance(exc.args[0], dict):
        candidates.append(exc.args[0].get("statusCode"))
        candidates.append(exc.args[0].get("status"))
    for value in candidates:
        try:
            return int(value)
        except (TypeError, ValueError):
            continue
    return None


def _storage_error(exc: Exception, bucket: str, path: str) -> StoreError:
    status = _status_code(exc)
    detail = str(exc) or exc.__class__.__name__
    # Storage answers a missing object with 400 "Object not found" on some versions
    if status == 404 or "not found" in detail.lower():
        return BlobNotFoundError(f"{bucket}/{path}: {detail}")
    if status == 409 or "already exists" in detail.lower():
        return BlobConflictError(f"{bucket}/{path}: {detail}")
    return StoreAccessError(f"{bucket}/{path}: {detail}")


class SupabaseBackend:
    """StorageBackend over the synchronous supabase-py client.

    SDK calls run in the default thread pool to avoid blocking the event loop.
    """

    def __init__(self, client: Client):
        self._client = client

    @classmethod
    def from_settings(cls, key: Optional[str] = None) -> "SupabaseBackend":
        api_key = key or settings.supabase_service_role_key
        if not settings.supabase_url or not api_key:
            raise StoreAccessError("supabase_url and an API key must be configured")
        return cls(create_client(settings.supabase_url, api_key))

    # -- blobs ---------------------------------------------------------------

    def _download_sync(self, bucket: str, path: str) -> bytes:
        try:
            return self._client.storage.from_(bucket).download(path)
        except Exception as exc:
            raise _storage_error(exc, bucket, path) from exc

    async def download(self, bucket: str, path: str) -> bytes:
        data = await asyncio.to_thread(self._download_sync, bucket, path)
        logger.info("supabase.download.success", bucket=bucket, path=path, size=len(data))
        return data

    def _upload_sync(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str,
        upsert: bool,
        cache_control: str,
    ) -> None:
        try:
            self._client.storage.from_(bucket).upload(
                path,
                data,
                file_options={
                    "content-type": content_type,
                    "cache-control": cache_control,
                    "upsert": "true" if upsert else "false",
                },
            )
        except Exception as exc:
            raise _storage_error(exc, bucket, path) from exc

    async def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str,
        upsert: bool = False,
        cache_control: str = "3600",
    ) -> None:
        await asyncio.to_thread(
            self._upload_sync, bucket, path, data, content_type, upsert, cache_control
        )
        logger.info("supabase.upload.success", bucket=bucket, path=path, size=len(data))

    # -- records -------------------------------------------------------------

    def _insert_sync(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        try:
            response = self._client.table(table).insert(row).execute()
        except APIError as exc:
            raise StoreAccessError(f"{table}: {exc.message or exc}") from exc
        if not response.data:
            raise StoreAccessError(f"{table}: insert returned no row")
        return response.data[0]

    async def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        record = await asyncio.to_thread(self._insert_sync, table, row)
        logger.info("supabase.insert.success", table=table, id=record.get("id"))
        return record
