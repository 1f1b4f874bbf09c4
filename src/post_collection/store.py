"""Collection store: the single owner of every Post.

Writers are serialised by one lock. Each mutation builds a new state (posts
in insertion order plus an IndexSnapshot) and swaps it in with a single
assignment, so readers never block and only ever see fully committed state.

Usage:
    collection = PostCollection()
    report = collection.ingest(records)
    post = collection.get("1")
    posts = collection.engine.query(tag="react")
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Optional

from src.common.config import settings

from .errors import (
    DuplicateIdError,
    FailureKind,
    InternalConsistencyError,
    PostValidationError,
)
from .guard import screen_batch
from .indexes import IndexSnapshot
from .models import Post, validate_record
from .query import QueryEngine
from .report import IngestFailure, IngestReport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _CollectionState:
    posts: Mapping[str, Post]  # insertion order
    indexes: IndexSnapshot


_EMPTY_STATE = _CollectionState(MappingProxyType({}), IndexSnapshot.empty())


class PostCollection:
    """In-memory post store with derived indices."""

    def __init__(
        self,
        records: Iterable[Any] | None = None,
        verify_on_write: bool | None = None,
    ) -> None:
        """Create a collection, optionally ingesting an initial batch.

        Args:
            records: Raw records to ingest right away.
            verify_on_write: Re-derive and compare indices after every write.
                Defaults to settings.collection.verify_on_write.
        """
        self.verify_on_write = (
            settings.collection.verify_on_write
            if verify_on_write is None else verify_on_write
        )
        self._lock = threading.Lock()
        self._state = _EMPTY_STATE
        self._halted = False
        self._engine: QueryEngine | None = None
        self.last_report: IngestReport | None = None

        if records is not None:
            self.last_report = self.ingest(records)

    # --- Reads ---

    @property
    def halted(self) -> bool:
        """True once an index divergence was detected."""
        return self._halted

    @property
    def indexes(self) -> IndexSnapshot:
        """The latest committed index snapshot."""
        return self._read_state().indexes

    @property
    def engine(self) -> QueryEngine:
        """Query engine bound to this collection."""
        if self._engine is None:
            self._engine = QueryEngine(self)
        return self._engine

    def get(self, post_id: str) -> Optional[Post]:
        """Look up a post by id. Returns None when absent."""
        return self._read_state().posts.get(post_id)

    def all(self) -> tuple[Post, ...]:
        """Every post, in insertion order."""
        return tuple(self._read_state().posts.values())

    def ids(self) -> tuple[str, ...]:
        return tuple(self._read_state().posts)

    def __len__(self) -> int:
        return len(self._state.posts)

    def __contains__(self, post_id: object) -> bool:
        return post_id in self._state.posts

    # --- Writes ---

    def ingest(self, records: Iterable[Any]) -> IngestReport:
        """Validate a batch and insert its valid subset.

        The whole batch is screened before anything is committed. Failures
        are reported, never raised.
        """
        records = list(records)
        with self._lock:
            self._ensure_writable()
            state = self._state
            screened = screen_batch(records, existing_ids=state.posts.keys())
            report = IngestReport(failures=screened.failures)

            if screened.accepted:
                posts = dict(state.posts)
                for _, post in screened.accepted:
                    posts[post.id] = post
                    report.inserted_ids.append(post.id)
                if len(screened.accepted) == 1:
                    first = screened.accepted[0][1]
                    indexes = self._derive(lambda: state.indexes.with_post(first))
                else:
                    indexes = IndexSnapshot.build(posts.values())
                self._commit(posts, indexes)

        logger.info(
            "Ingested %d of %d records (%d rejected)",
            report.inserted_count,
            len(records),
            report.failed_count,
        )
        return report

    def insert(self, record: Any) -> Post:
        """Insert a single record.

        Raises:
            PostValidationError: The record is malformed.
            DuplicateIdError: A post with the same id exists. Never overwrites.
        """
        post = validate_record(record)
        with self._lock:
            self._ensure_writable()
            state = self._state
            if post.id in state.posts:
                raise DuplicateIdError(post.id)
            posts = dict(state.posts)
            posts[post.id] = post
            self._commit(posts, self._derive(lambda: state.indexes.with_post(post)))

        logger.debug("Inserted post %s", post.id)
        return post

    def remove(self, post_id: str) -> bool:
        """Remove a post and retract its index entries. Returns True if removed."""
        with self._lock:
            self._ensure_writable()
            state = self._state
            post = state.posts.get(post_id)
            if post is None:
                return False
            posts = dict(state.posts)
            del posts[post_id]
            self._commit(posts, self._derive(lambda: state.indexes.without_post(post)))

        logger.info("Removed post %s", post_id)
        return True

    def replace(self, record: Any) -> IngestReport:
        """Retract a post and reinsert the new version under the same id.

        The record is validated first; on failure the stored post is left
        untouched. The replaced post moves to the end of insertion order.
        """
        report = IngestReport()
        try:
            post = validate_record(record)
        except PostValidationError as exc:
            report.failures.append(IngestFailure(
                index=0,
                record_id=exc.record_id,
                kind=FailureKind.VALIDATION,
                reasons=exc.reasons,
            ))
            logger.warning("Replace rejected for %s: %s", exc.record_id, exc)
            return report

        with self._lock:
            self._ensure_writable()
            state = self._state
            old = state.posts.get(post.id)
            if old is None:
                report.failures.append(IngestFailure(
                    index=0,
                    record_id=post.id,
                    kind=FailureKind.NOT_FOUND,
                    reasons=[f"id: {post.id!r} is not in the collection"],
                ))
                logger.warning("Replace rejected: post %s not found", post.id)
                return report

            posts = dict(state.posts)
            del posts[post.id]
            posts[post.id] = post
            self._commit(
                posts,
                self._derive(lambda: state.indexes.without_post(old).with_post(post)),
            )

        report.inserted_ids.append(post.id)
        logger.info("Replaced post %s", post.id)
        return report

    def rebuild_all(self) -> IndexSnapshot:
        """Rebuild every index from the store. Idempotent."""
        with self._lock:
            self._ensure_writable()
            state = self._state
            indexes = IndexSnapshot.build(state.posts.values())
            self._state = _CollectionState(state.posts, indexes)
        logger.debug("Rebuilt indices over %d posts", len(indexes))
        return indexes

    def check_consistency(self) -> None:
        """Compare live indices with a fresh rebuild.

        Raises:
            InternalConsistencyError: On divergence. The collection halts and
                refuses all further mutation and queries.
        """
        state = self._state
        problem = self._divergence(state.posts, state.indexes)
        if problem:
            self._halt(problem)
            raise InternalConsistencyError(problem)

    # --- Internals ---

    def _read_state(self) -> _CollectionState:
        if self._halted:
            raise InternalConsistencyError("collection halted after index divergence")
        return self._state

    def _ensure_writable(self) -> None:
        if self._halted:
            raise InternalConsistencyError("collection halted after index divergence")

    def _derive(self, build) -> IndexSnapshot:
        try:
            return build()
        except InternalConsistencyError as exc:
            self._halt(str(exc))
            raise

    def _commit(self, posts: dict[str, Post], indexes: IndexSnapshot) -> None:
        if self.verify_on_write:
            problem = self._divergence(posts, indexes)
            if problem:
                self._halt(problem)
                raise InternalConsistencyError(problem)
        self._state = _CollectionState(MappingProxyType(posts), indexes)

    @staticmethod
    def _divergence(posts: Mapping[str, Post], indexes: IndexSnapshot) -> str | None:
        if tuple(posts) != tuple(indexes.by_id):
            return "id index does not mirror the store"
        expected = IndexSnapshot.build(posts.values())
        if indexes.fingerprint() != expected.fingerprint():
            return "indices diverge from a rebuild of the store"
        return None

    def _halt(self, reason: str) -> None:
        self._halted = True
        logger.error("Post collection halted: %s", reason)
