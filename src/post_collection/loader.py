"""Load raw post records from YAML or JSON content files.

The top level may be a list of records or a mapping with a ``posts`` list.
Records are returned unvalidated; validation happens at ingest.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)


def load_records(path: str | Path) -> list[dict]:
    """Read raw records from a content file.

    JSON is a subset of YAML, so both go through ``yaml.safe_load``.

    Raises:
        FileNotFoundError: The file does not exist.
        ValueError: The document does not parse, or is not a list or a
            ``posts`` mapping.
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"{path}: malformed content file: {e}") from e

    if data is None:
        logger.warning("Content file %s is empty", path)
        return []
    if isinstance(data, dict):
        data = data.get("posts")
    if not isinstance(data, list):
        raise ValueError(
            f"{path}: expected a list of posts or a mapping with a 'posts' list"
        )

    logger.info("Loaded %d raw records from %s", len(data), path)
    return data
