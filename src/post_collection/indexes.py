"""Secondary indices over the post store.

An IndexSnapshot is immutable. Inserts and removals produce a new snapshot
(copy-on-write) so a reader holding the old one never sees a half-applied
change. ``build()`` derives the same snapshot from scratch.

Indices:
- by_id: id -> Post
- by_tag: tag -> ids, in insertion order
- by_author: author name -> ids, in insertion order
- by_date: ids sorted date descending, ties by id ascending
"""

from __future__ import annotations

import bisect
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from types import MappingProxyType
from typing import Optional

from .errors import InternalConsistencyError
from .models import Post

DateKey = tuple[int, str]


def _freeze(mapping: dict) -> Mapping:
    return MappingProxyType(mapping)


def _append(index: dict[str, tuple[str, ...]], key: str, post_id: str) -> None:
    index[key] = index.get(key, ()) + (post_id,)


def _discard(index: dict[str, tuple[str, ...]], key: str, post_id: str) -> None:
    ids = index.get(key, ())
    if post_id not in ids:
        raise InternalConsistencyError(
            f"index entry {key!r} is missing post {post_id!r}"
        )
    remaining = tuple(i for i in ids if i != post_id)
    if remaining:
        index[key] = remaining
    else:
        del index[key]


@dataclass(frozen=True)
class IndexSnapshot:
    """Read-only view of every index at one point in time."""

    by_id: Mapping[str, Post]
    by_tag: Mapping[str, tuple[str, ...]]
    by_author: Mapping[str, tuple[str, ...]]
    date_keys: tuple[DateKey, ...]

    @classmethod
    def empty(cls) -> IndexSnapshot:
        return cls(_freeze({}), _freeze({}), _freeze({}), ())

    @classmethod
    def build(cls, posts: Iterable[Post]) -> IndexSnapshot:
        """Derive all indices from posts given in store insertion order."""
        by_id: dict[str, Post] = {}
        by_tag: dict[str, tuple[str, ...]] = {}
        by_author: dict[str, tuple[str, ...]] = {}
        keys: list[DateKey] = []

        for post in posts:
            by_id[post.id] = post
            for tag in sorted(post.tags):
                _append(by_tag, tag, post.id)
            _append(by_author, post.author.name, post.id)
            keys.append(post.sort_key)

        keys.sort()
        return cls(_freeze(by_id), _freeze(by_tag), _freeze(by_author), tuple(keys))

    @property
    def by_date(self) -> tuple[str, ...]:
        return tuple(post_id for _, post_id in self.date_keys)

    def __len__(self) -> int:
        return len(self.by_id)

    def with_post(self, post: Post) -> IndexSnapshot:
        """Return a snapshot that also indexes ``post``."""
        if post.id in self.by_id:
            raise InternalConsistencyError(f"post {post.id!r} is already indexed")

        by_id = dict(self.by_id)
        by_id[post.id] = post
        by_tag = dict(self.by_tag)
        for tag in post.tags:
            _append(by_tag, tag, post.id)
        by_author = dict(self.by_author)
        _append(by_author, post.author.name, post.id)
        keys = list(self.date_keys)
        bisect.insort(keys, post.sort_key)

        return IndexSnapshot(_freeze(by_id), _freeze(by_tag), _freeze(by_author), tuple(keys))

    def without_post(self, post: Post) -> IndexSnapshot:
        """Return a snapshot with every entry for ``post`` retracted."""
        if self.by_id.get(post.id) != post:
            raise InternalConsistencyError(f"post {post.id!r} is not indexed as stored")

        by_id = dict(self.by_id)
        del by_id[post.id]
        by_tag = dict(self.by_tag)
        for tag in post.tags:
            _discard(by_tag, tag, post.id)
        by_author = dict(self.by_author)
        _discard(by_author, post.author.name, post.id)

        keys = list(self.date_keys)
        pos = bisect.bisect_left(keys, post.sort_key)
        if pos == len(keys) or keys[pos] != post.sort_key:
            raise InternalConsistencyError(f"date index is missing post {post.id!r}")
        del keys[pos]

        return IndexSnapshot(_freeze(by_id), _freeze(by_tag), _freeze(by_author), tuple(keys))

    def ids_between(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> tuple[str, ...]:
        """Ids whose date lies in [date_from, date_to], newest first.

        Either bound may be None for an open range.
        """
        keys = self.date_keys
        lo = 0 if date_to is None else bisect.bisect_left(keys, (-date_to.toordinal(),))
        hi = (
            len(keys) if date_from is None
            else bisect.bisect_left(keys, (-date_from.toordinal() + 1,))
        )
        return tuple(post_id for _, post_id in keys[lo:hi])

    def fingerprint(self) -> tuple:
        """Plain-data form of all indices, for equality checks."""
        return (
            dict(self.by_id),
            dict(self.by_tag),
            dict(self.by_author),
            self.date_keys,
        )
