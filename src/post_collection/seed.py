"""Process-wide post collection with an explicit init step.

The seed content is ingested once at startup instead of living in a module
constant. Call ``init_collection()`` before ``get_collection()``.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from src.common.config import settings

from .loader import load_records
from .store import PostCollection

logger = logging.getLogger(__name__)

_collection: PostCollection | None = None
_init_lock = threading.Lock()


def init_collection(
    records: Iterable[Any] | None = None,
    path: str | Path | None = None,
    force: bool = False,
) -> PostCollection:
    """Create the process-wide collection and ingest the seed records.

    Args:
        records: Raw records to seed with. Takes precedence over ``path``.
        path: Content file to read. Defaults to settings.collection.seed_path.
        force: Replace an existing collection instead of returning it.

    Returns:
        The initialised collection.
    """
    global _collection
    with _init_lock:
        if _collection is not None and not force:
            return _collection

        if records is None:
            source = Path(path) if path else settings.seed_abs_path
            records = load_records(source)

        collection = PostCollection()
        report = collection.ingest(records)
        collection.last_report = report
        if not report.ok:
            logger.warning(
                "Seed ingest rejected %d record(s): %s",
                report.failed_count,
                ", ".join(str(f.record_id or f"#{f.index}") for f in report.failures),
            )
        _collection = collection
        return collection


def get_collection() -> PostCollection:
    """Return the process-wide collection.

    Raises:
        RuntimeError: init_collection() has not been called.
    """
    if _collection is None:
        raise RuntimeError("post collection not initialised; call init_collection() first")
    return _collection


def reset_collection() -> None:
    """Drop the process-wide collection."""
    global _collection
    with _init_lock:
        _collection = None
