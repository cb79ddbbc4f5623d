"""In-memory storage backend: buckets and tables held in process memory.

Selected with STORAGE_BACKEND=memory for local development; replace with
SupabaseBackend for anything that must survive a restart.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from video_ingest.errors import BlobConflictError, BlobNotFoundError


class InMemoryBackend:
    def __init__(self):
        self._buckets: dict[str, dict[str, tuple[bytes, str]]] = {}
        self._tables: dict[str, list[dict[str, Any]]] = {}

    async def download(self, bucket: str, path: str) -> bytes:
        try:
            data, _ = self._buckets[bucket][path]
        except KeyError:
            raise BlobNotFoundError(f"{bucket}/{path}: Object not found") from None
        return data

    async def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str,
        upsert: bool = False,
        cache_control: str = "3600",
    ) -> None:
        objects = self._buckets.setdefault(bucket, {})
        if path in objects and not upsert:
            raise BlobConflictError(f"{bucket}/{path}: The resource already exists")
        self.put_object(bucket, path, data, content_type)

    async def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        rows = self._tables.setdefault(table, [])
        record = {
            "id": len(rows) + 1,
            "created_at": datetime.now(timezone.utc).isoformat(),
            **row,
        }
        rows.append(record)
        return dict(record)

    # Seeding / inspection helpers

    def put_object(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str = "application/octet-stream",
    ) -> None:
        self._buckets.setdefault(bucket, {})[path] = (bytes(data), content_type)

    def objects(self, bucket: str) -> dict[str, bytes]:
        return {path: data for path, (data, _) in self._buckets.get(bucket, {}).items()}

    def content_type(self, bucket: str, path: str) -> str:
        return self._buckets[bucket][path][1]

    def rows(self, table: str) -> list[dict[str, Any]]:
        return [dict(r) for r in self._tables.get(table, [])]
