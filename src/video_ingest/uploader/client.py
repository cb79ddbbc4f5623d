"""HTTP client for the video-processor function."""

from __future__ import annotations

from typing import Optional

import httpx
import structlog

from video_ingest.api.schemas import (
    ProcessingFailure,
    ProcessingRequest,
    ProcessingResult,
    parse_processing_result,
)
from video_ingest.config import settings
from video_ingest.errors import ProcessingFailedError

logger = structlog.get_logger()


class ProcessorClient:
    """Invokes the processor once per call. No retries.

    The request blocks until the processor answers; no client-side timeout
    is applied unless *timeout* is given.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        api_key: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ):
        self.url = url or settings.resolved_processor_url()
        self.api_key = api_key if api_key is not None else settings.supabase_anon_key
        self._http_client = http_client
        self._timeout = timeout

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
            headers["apikey"] = self.api_key
        return headers

    async def _post(self, client: httpx.AsyncClient, body: dict) -> httpx.Response:
        return await client.post(self.url, json=body, headers=self._headers())

    async def invoke(self, request: ProcessingRequest) -> ProcessingResult:
        body = request.model_dump()
        logger.info("processor_client.invoke", url=self.url, video_path=request.video_path)

        try:
            if self._http_client is not None:
                response = await self._post(self._http_client, body)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await self._post(client, body)
        except httpx.HTTPError as exc:
            logger.exception("processor_client.transport_error", url=self.url)
            raise ProcessingFailedError(f"Error al procesar el video: {exc}") from exc

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not isinstance(payload, dict):
            return ProcessingFailure(
                error=f"Respuesta inválida del procesador (HTTP {response.status_code})"
            )
        if response.is_error and payload.get("success") is not False:
            return ProcessingFailure(
                error=str(payload.get("error") or f"HTTP {response.status_code}")
            )
        return parse_processing_result(payload)
