# Post Collection: validated, indexed, queryable blog posts
"""
Content-collection query engine for blog posts.

Raw records are screened at the ingest boundary, held by a single owning
store, indexed by id/tag/date/author, and served by the query engine.
"""

from .errors import (
    CollectionError,
    DuplicateIdError,
    FailureKind,
    InternalConsistencyError,
    PostValidationError,
)
from .indexes import IndexSnapshot
from .models import Author, Post, validate_record
from .query import QueryEngine, QueryPage, QuerySpec, SortOrder
from .report import IngestFailure, IngestReport
from .seed import get_collection, init_collection, reset_collection
from .store import PostCollection

__all__ = [
    "Author",
    "CollectionError",
    "DuplicateIdError",
    "FailureKind",
    "IndexSnapshot",
    "IngestFailure",
    "IngestReport",
    "InternalConsistencyError",
    "Post",
    "PostCollection",
    "PostValidationError",
    "QueryEngine",
    "QueryPage",
    "QuerySpec",
    "SortOrder",
    "get_collection",
    "init_collection",
    "reset_collection",
    "validate_record",
]
