"""Consistency guard applied at the ingest boundary.

The whole batch is screened before anything is inserted, so the report
enumerates every problem up front. The valid subset is still inserted when
some records fail.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable
from dataclasses import dataclass, field
from typing import Any

from .errors import FailureKind, PostValidationError
from .models import Post, validate_record
from .report import IngestFailure

logger = logging.getLogger(__name__)


@dataclass
class ScreenResult:
    """Batch screening outcome: accepted posts (with batch index) and failures."""
    accepted: list[tuple[int, Post]] = field(default_factory=list)
    failures: list[IngestFailure] = field(default_factory=list)


def screen_batch(
    records: Iterable[Any],
    existing_ids: Collection[str] = (),
) -> ScreenResult:
    """Validate a batch and reject id collisions.

    Args:
        records: Raw records in submission order.
        existing_ids: Ids already held by the store.

    Returns:
        ScreenResult. Of several valid records sharing an id, the first is
        accepted and each later one becomes a duplicate_id failure.
    """
    result = ScreenResult()
    seen: dict[str, int] = {}

    for index, raw in enumerate(records):
        try:
            post = validate_record(raw)
        except PostValidationError as exc:
            result.failures.append(IngestFailure(
                index=index,
                record_id=exc.record_id,
                kind=FailureKind.VALIDATION,
                reasons=exc.reasons,
            ))
            continue

        if post.id in existing_ids:
            result.failures.append(IngestFailure(
                index=index,
                record_id=post.id,
                kind=FailureKind.DUPLICATE_ID,
                reasons=[f"id: {post.id!r} already exists in the collection"],
            ))
            continue

        if post.id in seen:
            result.failures.append(IngestFailure(
                index=index,
                record_id=post.id,
                kind=FailureKind.DUPLICATE_ID,
                reasons=[
                    f"id: {post.id!r} repeats the record at batch index {seen[post.id]}"
                ],
            ))
            continue

        seen[post.id] = index
        result.accepted.append((index, post))

    for failure in result.failures:
        logger.warning(
            "Rejected record #%d (id=%s, %s): %s",
            failure.index,
            failure.record_id,
            failure.kind.value,
            "; ".join(failure.reasons),
        )

    return result
