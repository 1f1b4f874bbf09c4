"""Record model for blog posts.

Raw records use the front-end's camelCase keys (``readTime``); snake_case is
accepted too. ``content`` is opaque markup and is never stripped or parsed.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import PostValidationError


class Author(BaseModel):
    """Post author. No uniqueness constraint across posts."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    avatar: str = ""

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class Post(BaseModel):
    """A single validated, immutable content item."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    id: str
    title: str
    excerpt: str = ""
    content: str
    date: date
    tags: frozenset[str] = Field(default_factory=frozenset)
    read_time: Optional[str] = Field(default=None, alias="readTime")
    image: str = ""
    author: Author

    @field_validator("id", "title", "content")
    @classmethod
    def _required_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("date", mode="before")
    @classmethod
    def _coerce_date(cls, value: Any) -> Any:
        # Numbers would otherwise be read as unix timestamps
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            raise ValueError("expected an ISO date (YYYY-MM-DD)")
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, str):
            # Digit strings would otherwise be read as unix timestamps too
            try:
                return date.fromisoformat(value.strip())
            except ValueError:
                raise ValueError("expected an ISO date (YYYY-MM-DD)") from None
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_default(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("tags")
    @classmethod
    def _clean_tags(cls, value: frozenset[str]) -> frozenset[str]:
        cleaned = frozenset(tag.strip() for tag in value)
        if "" in cleaned:
            raise ValueError("tag labels must not be blank")
        return cleaned

    @field_validator("read_time")
    @classmethod
    def _read_time_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("must not be blank when given")
        return value

    @property
    def sort_key(self) -> tuple[int, str]:
        """Canonical ordering: newest first, ties broken by id."""
        return (-self.date.toordinal(), self.id)

    def to_dict(self) -> dict:
        """Serialize back to the camelCase record shape."""
        data = self.model_dump(mode="json", by_alias=True)
        data["tags"] = sorted(self.tags)
        return data


def _format_errors(exc: ValidationError) -> list[str]:
    reasons = []
    for error in exc.errors():
        path = ".".join(str(part) for part in error["loc"]) or "record"
        reasons.append(f"{path}: {error['msg']}")
    return reasons


def raw_record_id(raw: Any) -> str | None:
    """Best-effort id of a raw record, for failure reports."""
    if isinstance(raw, Mapping):
        value = raw.get("id")
        if isinstance(value, (str, int)) and not isinstance(value, bool):
            return str(value)
    return None


def validate_record(raw: Any) -> Post:
    """Validate a raw record into a Post.

    Raises:
        PostValidationError: listing every violated field.
    """
    if isinstance(raw, Post):
        return raw
    if not isinstance(raw, Mapping):
        raise PostValidationError(
            [f"record: expected a mapping, got {type(raw).__name__}"]
        )
    try:
        return Post.model_validate(dict(raw))
    except ValidationError as exc:
        raise PostValidationError(_format_errors(exc), record_id=raw_record_id(raw)) from exc
