"""Three-state read results for blob lookups.

A read either found the document, found nothing, or could not tell because
storage failed. Public store reads collapse the last two for callers that
only care about content; ``lookup_*`` methods expose all three.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ReadStatus(str, Enum):
    """Outcome of a blob read."""

    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass(frozen=True)
class ReadResult(Generic[T]):
    """Tagged result of a read.

    Attributes:
        status: Which of the three outcomes occurred.
        value: The parsed document when found.
        error: The underlying exception when storage failed.
    """

    status: ReadStatus
    value: T | None = None
    error: Exception | None = None

    @classmethod
    def found(cls, value: T) -> "ReadResult[T]":
        return cls(status=ReadStatus.FOUND, value=value)

    @classmethod
    def not_found(cls) -> "ReadResult[T]":
        return cls(status=ReadStatus.NOT_FOUND)

    @classmethod
    def failed(cls, error: Exception) -> "ReadResult[T]":
        return cls(status=ReadStatus.ERROR, error=error)

    @property
    def is_found(self) -> bool:
        return self.status == ReadStatus.FOUND

    @property
    def is_error(self) -> bool:
        return self.status == ReadStatus.ERROR

    def unwrap_or(self, default: T) -> T:
        """Return the value if found, otherwise ``default``."""
        if self.status == ReadStatus.FOUND:
            return self.value  # type: ignore[return-value]
        return default
