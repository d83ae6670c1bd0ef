"""Helpers shared by the content routers."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse

from lateedition.schemas.base import Document
from lateedition.storage.errors import BlobStorageError
from lateedition.storage.service import StorageService

logger = logging.getLogger(__name__)

PUBLIC_CACHE = "public, s-maxage=300, stale-while-revalidate=60"
NO_STORE = "no-store"


def get_storage(request: Request) -> StorageService:
    """FastAPI dependency returning the app's StorageService."""
    return request.app.state.storage


def cache_headers(request: Request) -> dict[str, str]:
    """Listings are CDN-cacheable unless the caller asks for ``?fresh``."""
    if "fresh" in request.query_params:
        return {"Cache-Control": NO_STORE}
    return {"Cache-Control": PUBLIC_CACHE}


def document_response(
    body: Document | list[Document],
    status_code: int = status.HTTP_200_OK,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Serialize one document or a list of them with camelCase keys."""
    content: Any
    if isinstance(body, list):
        content = [d.model_dump(mode="json", by_alias=True) for d in body]
    else:
        content = body.model_dump(mode="json", by_alias=True)
    return JSONResponse(content=content, status_code=status_code, headers=headers)


def changes_from(payload: Document) -> dict[str, Any]:
    """Fields the caller actually sent, by field name. Nulls mean "unchanged"."""
    return payload.model_dump(exclude_unset=True, exclude_none=True)


def bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def not_found(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


@contextmanager
def storage_errors(action: str) -> Iterator[None]:
    """Turn storage failures into a generic 500 ``Failed to <action>``."""
    try:
        yield
    except BlobStorageError as e:
        logger.error(f"Failed to {action}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to {action}",
        ) from e
