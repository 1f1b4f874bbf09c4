"""Ingest outcome reporting."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .errors import FailureKind


@dataclass
class IngestFailure:
    """A record that was not inserted, with every reason found."""
    index: int  # position in the submitted batch
    record_id: Optional[str]
    kind: FailureKind
    reasons: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "record_id": self.record_id,
            "kind": self.kind.value,
            "reasons": list(self.reasons),
        }


@dataclass
class IngestReport:
    """Outcome of a bulk validate-and-insert."""
    inserted_ids: list[str] = field(default_factory=list)
    failures: list[IngestFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def inserted_count(self) -> int:
        return len(self.inserted_ids)

    @property
    def failed_count(self) -> int:
        return len(self.failures)

    def failures_of(self, kind: FailureKind) -> list[IngestFailure]:
        return [f for f in self.failures if f.kind == kind]

    def to_dict(self) -> dict:
        return {
            "inserted_ids": list(self.inserted_ids),
            "failures": [f.to_dict() for f in self.failures],
        }
