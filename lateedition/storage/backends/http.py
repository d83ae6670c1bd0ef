"""HTTP blob backend for a Vercel-Blob style REST API.

Endpoints used:
    PUT  {api_url}/{pathname}   upload (x-allow-overwrite, x-add-random-suffix: 0)
    GET  {api_url}?prefix=...   paginated listing (cursor / hasMore)
    POST {api_url}/delete       {"urls": [...]}
    GET  {blob url}             download
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from lateedition.storage.backends.base import BlobBackend, BlobRef
from lateedition.storage.errors import BlobNotFoundError, BlobStorageError

logger = logging.getLogger(__name__)

API_VERSION = "7"


class HttpBlobBackend(BlobBackend):
    """Blob backend talking to a remote object store over httpx.

    Attributes:
        api_url: Base URL of the blob API.
    """

    def __init__(
        self,
        api_url: str,
        token: str,
        *,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self._token = token
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    def _headers(self, **extra: str) -> dict[str, str]:
        headers = {
            "authorization": f"Bearer {self._token}",
            "x-api-version": API_VERSION,
        }
        headers.update(extra)
        return headers

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise BlobStorageError(f"{method} {url} failed: {e}") from e
        if response.status_code == 404:
            raise BlobNotFoundError(f"{method} {url} returned 404")
        if response.is_error:
            raise BlobStorageError(
                f"{method} {url} returned {response.status_code}: {response.text[:200]}"
            )
        return response

    async def put(
        self,
        pathname: str,
        data: bytes,
        *,
        overwrite: bool = True,
        content_type: str = "application/json",
    ) -> BlobRef:
        """Upload a blob without a random suffix so its path stays fixed."""
        response = await self._request(
            "PUT",
            f"{self.api_url}/{pathname}",
            content=data,
            headers=self._headers(**{
                "x-add-random-suffix": "0",
                "x-allow-overwrite": "1" if overwrite else "0",
                "x-content-type": content_type,
            }),
        )
        body = response.json()
        return BlobRef(pathname=body.get("pathname", pathname), url=body["url"])

    async def list(self, prefix: str) -> list[BlobRef]:
        """List blobs under a prefix, following pagination cursors."""
        refs: list[BlobRef] = []
        cursor: str | None = None
        while True:
            params = {"prefix": prefix}
            if cursor:
                params["cursor"] = cursor
            response = await self._request(
                "GET", self.api_url, params=params, headers=self._headers()
            )
            body = response.json()
            refs.extend(
                BlobRef(pathname=b["pathname"], url=b["url"]) for b in body.get("blobs", [])
            )
            cursor = body.get("cursor")
            if not body.get("hasMore") or not cursor:
                break
        return refs

    async def delete(self, url: str) -> None:
        """Delete a blob by URL."""
        await self._request(
            "POST",
            f"{self.api_url}/delete",
            json={"urls": [url]},
            headers=self._headers(),
        )
        logger.debug(f"Blob deleted: {url}")

    async def fetch(self, url: str) -> bytes:
        """Download a blob body, asking every cache on the way to revalidate."""
        response = await self._request(
            "GET",
            url,
            headers={"Cache-Control": "no-cache", "Pragma": "no-cache"},
        )
        return response.content

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
