"""Shared test fixtures for the post collection."""

import sys
from pathlib import Path

import pytest

# Ensure src is importable
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from fixtures.sample_posts import get_react_guide_record, get_sample_records
from src.post_collection.seed import reset_collection
from src.post_collection.store import PostCollection


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def react_guide_record() -> dict:
    """Return the front-end's original post as a raw record."""
    return get_react_guide_record()


@pytest.fixture
def sample_records() -> list[dict]:
    """Return five valid raw records with overlapping tags and dates."""
    return get_sample_records()


@pytest.fixture
def collection(sample_records) -> PostCollection:
    """Provide a collection seeded with the sample records."""
    c = PostCollection(verify_on_write=True)
    report = c.ingest(sample_records)
    assert report.ok
    return c


@pytest.fixture(autouse=True)
def _clean_process_collection():
    """Keep the process-wide collection from leaking between tests."""
    reset_collection()
    yield
    reset_collection()
