"""Query engine over the post collection.

Tag and author filters are answered from their indices, and date ranges by
bisection over the date index. Only the text search scans, and only over
the candidates left by the indexed filters.

Usage:
    engine = collection.engine
    engine.query(tag="react")
    engine.query(QuerySpec(dateFrom="2024-01-01", sort="titleAsc", limit=5))
    page = engine.query_page({"author": "Baha", "offset": 10})
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from src.common.config import settings

from .indexes import IndexSnapshot
from .models import Post

if TYPE_CHECKING:
    from .store import PostCollection

logger = logging.getLogger(__name__)


class SortOrder(str, Enum):
    """Result orderings."""
    DATE_DESC = "dateDesc"
    DATE_ASC = "dateAsc"
    TITLE_ASC = "titleAsc"


class QuerySpec(BaseModel):
    """A filter/sort/pagination request. Filters combine with AND."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    tag: Optional[str] = None
    author: Optional[str] = None
    date_from: Optional[date] = Field(default=None, alias="dateFrom")
    date_to: Optional[date] = Field(default=None, alias="dateTo")
    text_search: Optional[str] = Field(default=None, alias="textSearch")
    sort: SortOrder = SortOrder.DATE_DESC
    limit: Optional[int] = Field(default=None, ge=1)
    offset: int = Field(default=0, ge=0)


@dataclass(frozen=True)
class QueryPage:
    """One page of results plus the size of the full filtered result."""
    items: tuple[Post, ...]
    total: int
    offset: int
    limit: int

    @property
    def has_more(self) -> bool:
        return self.offset + len(self.items) < self.total

    def to_dict(self) -> dict:
        return {
            "items": [p.to_dict() for p in self.items],
            "total": self.total,
            "offset": self.offset,
            "limit": self.limit,
            "has_more": self.has_more,
        }


SpecLike = Union[QuerySpec, Mapping[str, Any], None]


class QueryEngine:
    """Answers QuerySpec requests against the latest committed snapshot."""

    def __init__(self, collection: PostCollection) -> None:
        self._collection = collection

    def query(self, spec: SpecLike = None, **filters: Any) -> tuple[Post, ...]:
        """Filter, sort and paginate.

        Accepts a QuerySpec, a mapping in QuerySpec shape, keyword filters,
        or a spec plus keyword overrides. Returns a new tuple; later writes
        to the collection never change it.
        """
        spec = self._coerce(spec, filters)
        matched = self._matching(spec, self._collection.indexes)
        end = None if spec.limit is None else spec.offset + spec.limit
        return tuple(matched[spec.offset:end])

    def query_page(self, spec: SpecLike = None, **filters: Any) -> QueryPage:
        """Like query(), with a default page size and the total count."""
        spec = self._coerce(spec, filters)
        limit = min(
            spec.limit or settings.query.default_page_size,
            settings.query.max_page_size,
        )
        matched = self._matching(spec, self._collection.indexes)
        return QueryPage(
            items=tuple(matched[spec.offset:spec.offset + limit]),
            total=len(matched),
            offset=spec.offset,
            limit=limit,
        )

    def count(self, spec: SpecLike = None, **filters: Any) -> int:
        """Number of posts matching the filters, ignoring pagination."""
        spec = self._coerce(spec, filters)
        return len(self._matching(spec, self._collection.indexes))

    def tag_counts(self) -> dict[str, int]:
        """Post count per tag, most used first, then alphabetical."""
        by_tag = self._collection.indexes.by_tag
        ordered = sorted(by_tag.items(), key=lambda item: (-len(item[1]), item[0]))
        return {tag: len(ids) for tag, ids in ordered}

    def related(self, post_id: str, limit: int = 3) -> tuple[Post, ...]:
        """Posts sharing the most tags with ``post_id``, newest first on ties.

        Unknown ids and untagged posts give an empty result.
        """
        indexes = self._collection.indexes
        post = indexes.by_id.get(post_id)
        if post is None or limit < 1:
            return ()

        shared: Counter[str] = Counter()
        for tag in post.tags:
            for other_id in indexes.by_tag.get(tag, ()):
                if other_id != post_id:
                    shared[other_id] += 1

        ranked = sorted(
            shared,
            key=lambda i: (-shared[i], indexes.by_id[i].sort_key),
        )
        return tuple(indexes.by_id[i] for i in ranked[:limit])

    # --- Internals ---

    @staticmethod
    def _coerce(spec: SpecLike, filters: Mapping[str, Any]) -> QuerySpec:
        if spec is None:
            return QuerySpec(**filters)
        if isinstance(spec, QuerySpec):
            if not filters:
                return spec
            spec = spec.model_dump(exclude_unset=True)
        return QuerySpec.model_validate({**dict(spec), **filters})

    @staticmethod
    def _matching(spec: QuerySpec, indexes: IndexSnapshot) -> list[Post]:
        if spec.date_from and spec.date_to and spec.date_from > spec.date_to:
            return []

        narrowing: list[tuple[str, ...]] = []
        if spec.tag is not None:
            narrowing.append(indexes.by_tag.get(spec.tag, ()))
        if spec.author is not None:
            narrowing.append(indexes.by_author.get(spec.author, ()))

        if narrowing:
            narrowing.sort(key=len)
            base, *others = narrowing
            other_sets = [set(ids) for ids in others]
            posts = [
                indexes.by_id[i] for i in base
                if all(i in s for s in other_sets)
            ]
            if spec.date_from is not None:
                posts = [p for p in posts if p.date >= spec.date_from]
            if spec.date_to is not None:
                posts = [p for p in posts if p.date <= spec.date_to]
            posts.sort(key=lambda p: p.sort_key)
        else:
            posts = [
                indexes.by_id[i]
                for i in indexes.ids_between(spec.date_from, spec.date_to)
            ]

        if spec.text_search and spec.text_search.strip():
            needle = spec.text_search.casefold()
            posts = [
                p for p in posts
                if needle in p.title.casefold() or needle in p.excerpt.casefold()
            ]

        if spec.sort == SortOrder.DATE_ASC:
            posts.sort(key=lambda p: (p.date, p.id))
        elif spec.sort == SortOrder.TITLE_ASC:
            posts.sort(key=lambda p: (p.title.casefold(), p.id))

        logger.debug("Query %r matched %d posts", spec, len(posts))
        return posts
