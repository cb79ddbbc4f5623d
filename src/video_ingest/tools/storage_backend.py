"""Storage backend interface and the process-wide backend factory."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Protocol

from video_ingest.config import settings


class StorageBackend(Protocol):
    """Blob store + record store used by the uploader and the processor."""

    async def download(self, bucket: str, path: str) -> bytes:
        """Return object bytes. Raises BlobNotFoundError / StoreAccessError."""
        ...

    async def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str,
        upsert: bool = False,
        cache_control: str = "3600",
    ) -> None:
        """Write an object. Raises BlobConflictError when it exists and upsert is off."""
        ...

    async def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        """Insert one row and return it with store-assigned fields (id, created_at)."""
        ...


def create_backend(kind: str | None = None, key: str | None = None) -> StorageBackend:
    """Build a backend from configuration.

    *kind*: "supabase" | "memory" (defaults to settings.storage_backend).
    *key*: Supabase API key (defaults to the service-role key).
    """
    use = kind or settings.storage_backend
    if use == "memory":
        from video_ingest.memory.blob_store import InMemoryBackend

        return InMemoryBackend()

    from video_ingest.tools.supabase_backend import SupabaseBackend

    return SupabaseBackend.from_settings(key=key)


@lru_cache(maxsize=1)
def get_backend() -> StorageBackend:
    """Return the process-wide backend, constructed once from settings."""
    return create_backend()
