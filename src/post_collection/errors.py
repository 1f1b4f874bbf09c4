"""Error taxonomy for the post collection."""

from __future__ import annotations

from enum import Enum


class FailureKind(str, Enum):
    """Why a record was not inserted."""
    VALIDATION = "validation"
    DUPLICATE_ID = "duplicate_id"
    NOT_FOUND = "not_found"


class CollectionError(Exception):
    """Base class for post collection errors."""


class PostValidationError(CollectionError):
    """A raw record failed schema validation.

    Carries one reason per violated field, not just the first.
    """

    def __init__(self, reasons: list[str], record_id: str | None = None) -> None:
        self.reasons = list(reasons)
        self.record_id = record_id
        label = f"record {record_id!r}" if record_id else "record"
        super().__init__(f"{label} is invalid: " + "; ".join(self.reasons))


class DuplicateIdError(CollectionError):
    """A post with the same id is already present."""

    def __init__(self, post_id: str) -> None:
        self.post_id = post_id
        super().__init__(f"duplicate post id: {post_id!r}")


class InternalConsistencyError(CollectionError):
    """Indices diverged from the store. Further mutation is refused."""
