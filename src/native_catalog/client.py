"""
HTTP client for the native database backend.

Endpoints used:
- ``GET /api/natives``: bulk list of natives
- ``GET /api/native/{hash}``: detail envelope with translations and params
- ``GET /api/native/{hash}/source``: decompiled source (404 when absent)
- ``GET /api/native/{hash}/example``: usage examples (404 when absent)
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from .models import CodeExample, Native, NativeDetail, SourceCode

logger = logging.getLogger("native-catalog")

DEFAULT_API_BASE = "http://localhost:8080"
DEFAULT_TIMEOUT = 30.0
MAX_RETRIES = 3
RETRY_BACKOFF = 2.0


class NativesClientError(Exception):
    """Error fetching or parsing data from the native database backend."""
    pass


class NativesClient:
    """Async client for the native database API.

    Usage:
        async with NativesClient("https://natives.example.org") as client:
            natives = await client.list_natives()
            detail = await client.get_detail(natives[0].id)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Initialize the client.

        Args:
            base_url: Backend origin, without the ``/api`` suffix
            client: Optional preconfigured httpx client; one is created
                    lazily otherwise and owned by this instance
            timeout: Request timeout in seconds for an owned client
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> NativesClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    # =========================================================================
    # Endpoints
    # =========================================================================

    async def list_natives(self) -> list[Native]:
        """Fetch every native in bulk.

        Records that fail validation are skipped with a warning.

        Raises:
            NativesClientError: If the request fails or the payload is not a list
        """
        data = await self._get_json("/api/natives")
        if not isinstance(data, list):
            raise NativesClientError("Invalid natives list: expected JSON array")

        natives = []
        for record in data:
            try:
                natives.append(Native.model_validate(record))
            except ValidationError as e:
                native_id = record.get("hash", "unknown") if isinstance(record, dict) else "unknown"
                logger.warning(f"Failed to parse native '{native_id}': {e}")
        return natives

    async def get_detail(self, native_id: str) -> NativeDetail:
        """Fetch the detail envelope for one native.

        Raises:
            NativesClientError: If the request fails or the envelope has no data
        """
        data = await self._get_json(f"/api/native/{native_id}")
        if not isinstance(data, dict) or not data.get("data"):
            raise NativesClientError(f"No detail data for native {native_id}")
        try:
            return NativeDetail.model_validate(data)
        except ValidationError as e:
            raise NativesClientError(f"Invalid detail for native {native_id}: {e}") from e

    async def get_source(self, native_id: str) -> SourceCode | None:
        """Fetch decompiled source; None when the native has none."""
        data = await self._get_json(f"/api/native/{native_id}/source", allow_missing=True)
        if data is None:
            return None
        try:
            return SourceCode.model_validate(data)
        except ValidationError as e:
            raise NativesClientError(f"Invalid source for native {native_id}: {e}") from e

    async def get_examples(self, native_id: str) -> list[CodeExample]:
        """Fetch usage examples; empty when the native has none."""
        data = await self._get_json(f"/api/native/{native_id}/example", allow_missing=True)
        if not isinstance(data, list):
            return []

        examples = []
        for item in data:
            if not (isinstance(item, dict) and item.get("language") and item.get("code")):
                continue
            try:
                examples.append(CodeExample.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Skipping invalid example for native {native_id}: {e}")
        return examples

    # =========================================================================
    # HTTP Helpers
    # =========================================================================

    async def _get_json(self, path: str, allow_missing: bool = False) -> Any:
        """
        GET a backend path with retry logic and decode the JSON body.

        Args:
            path: Path below the base URL
            allow_missing: Return None on 404 instead of raising

        Returns:
            Parsed JSON, or None for an allowed 404

        Raises:
            NativesClientError: If the fetch fails after retries
        """
        url = f"{self.base_url}{path}"
        client = self._get_client()
        last_error: Exception | None = None

        for attempt in range(MAX_RETRIES):
            try:
                response = await client.get(url)

                if response.status_code == 404 and allow_missing:
                    return None

                if response.status_code == 429:
                    wait = RETRY_BACKOFF ** attempt
                    logger.warning(f"Rate limited, waiting {wait}s")
                    last_error = NativesClientError("rate limited")
                    await asyncio.sleep(wait)
                    continue

                response.raise_for_status()
                return response.json()

            except httpx.TimeoutException as e:
                logger.warning(f"Timeout fetching {url}, attempt {attempt + 1}/{MAX_RETRIES}")
                last_error = e
                await asyncio.sleep(RETRY_BACKOFF ** attempt)

            except httpx.HTTPStatusError as e:
                if e.response.status_code >= 500:
                    logger.warning(
                        f"Server error {e.response.status_code}, attempt {attempt + 1}/{MAX_RETRIES}"
                    )
                    last_error = e
                    await asyncio.sleep(RETRY_BACKOFF ** attempt)
                else:
                    raise NativesClientError(f"HTTP error: {e}") from e

            except httpx.RequestError as e:
                raise NativesClientError(f"Failed to connect to {self.base_url}: {e}") from e

            except ValueError as e:
                # JSONDecodeError and UnicodeDecodeError
                raise NativesClientError(f"Invalid JSON from {url}: {e}") from e

        raise NativesClientError(f"Failed to fetch {url} after {MAX_RETRIES} retries: {last_error}")


__all__ = [
    "NativesClient",
    "NativesClientError",
    "DEFAULT_API_BASE",
]
