"""Blob path naming, id generation and slug sanitization.

Layout:
    {collection}/index.json   -> list of index entries
    {collection}/{id}.json    -> one full entity

Examples:
    >>> from lateedition.storage.naming import entity_path, index_path, slugify
    >>> index_path("posts")
    'posts/index.json'
    >>> entity_path("posts", "lx3k9a2b4c6d")
    'posts/lx3k9a2b4c6d.json'
    >>> slugify("Hello, World!")
    'hello-world'
"""

from __future__ import annotations

import re
import secrets
import time
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"

INDEX_FILENAME = "index.json"


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_id(now_ms: int | None = None) -> str:
    """Generate an opaque entity id.

    Format: base-36 millisecond timestamp followed by 6 random base-36 chars.

    Args:
        now_ms: Override timestamp in epoch milliseconds.

    Returns:
        Id string, e.g. ``'lx3k9a2b4c6d'``.
    """
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    suffix = "".join(secrets.choice(_BASE36) for _ in range(6))
    return f"{_to_base36(now_ms)}{suffix}"


def slugify(text: str) -> str:
    """Turn a title into a URL slug.

    Rules:
        - Lowercase
        - Strip characters other than word chars, whitespace and hyphens
        - Whitespace runs become one hyphen
        - Collapse multiple hyphens
        - Strip surrounding whitespace

    Args:
        text: Raw title.

    Returns:
        Slug string (may be empty if the title had no word characters).
    """
    slug = text.lower()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip()


def index_path(collection: str) -> str:
    """Logical path of a collection's index document."""
    return f"{collection}/{INDEX_FILENAME}"


def index_prefix(collection: str) -> str:
    """Listing prefix that finds a collection's index document."""
    return f"{collection}/index"


def entity_path(collection: str, entity_id: str) -> str:
    """Logical path of one entity document."""
    return f"{collection}/{entity_id}.json"


def entity_prefix(collection: str, entity_id: str) -> str:
    """Listing prefix that finds one entity document."""
    return f"{collection}/{entity_id}"


def cache_busted_url(url: str, token: str | None = None) -> str:
    """Append download and cache-busting query parameters to a blob URL.

    Every read gets a distinct ``_t`` value so no intermediate cache can
    serve a stale copy of a document that was rewritten in place.

    Args:
        url: Blob URL as returned by the backend listing.
        token: Override cache-busting value.

    Returns:
        URL with ``download=1`` and ``_t=<token>`` set.
    """
    if token is None:
        token = f"{time.time_ns()}{secrets.token_hex(4)}"
    parts = urlsplit(url)
    query = [(k, v) for k, v in parse_qsl(parts.query) if k not in ("download", "_t")]
    query.extend([("download", "1"), ("_t", token)])
    return urlunsplit(parts._replace(query=urlencode(query)))
