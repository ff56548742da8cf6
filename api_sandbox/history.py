# api_sandbox/history.py
"""
Run history with replay.

A HistoryLog is a passive, in-memory, most-recent-first list of HistoryEntry
records. Each entry carries a structural copy of the RunOptions that produced
it, so editing the live options never rewrites history. Replay restores
options only; re-running is the caller's decision.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional

from api_sandbox.sandbox_types import (
    ExecutionResult,
    HistoryEntryNotFoundError,
    ResultSource,
    RunOptions,
)

logger = logging.getLogger(__name__)

_entry_ids = itertools.count(1)


def next_entry_id() -> int:
    """Monotonic, process-unique entry token."""
    return next(_entry_ids)


@dataclass(frozen=True)
class HistoryEntry:
    """One past execution and the options that produced it."""
    api_id: str
    status_code: int
    source: ResultSource
    duration_ms: int
    snapshot_options: RunOptions
    id: int = field(default_factory=next_entry_id)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_result(cls, api_id: str, result: ExecutionResult, options: RunOptions) -> HistoryEntry:
        """Build an entry, snapshotting ``options`` so later edits cannot leak in."""
        return cls(
            api_id=api_id,
            status_code=result.status_code,
            source=result.source,
            duration_ms=result.duration_ms,
            snapshot_options=options.copy(),
        )

    @property
    def success(self) -> bool:
        return 200 <= self.status_code <= 299

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "api_id": self.api_id,
            "timestamp": self.timestamp.isoformat(),
            "status_code": self.status_code,
            "source": self.source.value,
            "duration_ms": self.duration_ms,
            "options": self.snapshot_options.to_dict(),
        }


class HistoryLog:
    """
    Most-recent-first sequence of history entries.

    By default the log is unbounded and recording never drops or reorders
    earlier entries. With ``capacity`` set, the oldest entries are evicted
    once the log is full.
    """

    def __init__(self, capacity: Optional[int] = None):
        if capacity is not None and capacity < 1:
            raise ValueError("capacity must be a positive integer or None")
        self.capacity = capacity
        self._entries: List[HistoryEntry] = []

    def record(self, entry: HistoryEntry) -> None:
        """Prepend an entry."""
        self._entries.insert(0, entry)
        if self.capacity is not None and len(self._entries) > self.capacity:
            evicted = len(self._entries) - self.capacity
            del self._entries[self.capacity:]
            logger.debug("History at capacity %d, evicted %d entr%s", self.capacity, evicted, "y" if evicted == 1 else "ies")

    def clear(self) -> None:
        """Drop all entries."""
        self._entries.clear()

    def restore(self, entry: HistoryEntry) -> RunOptions:
        """Options to adopt for a replay: a fresh copy of the entry's snapshot."""
        return entry.snapshot_options.copy()

    def get(self, entry_id: int) -> HistoryEntry:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        raise HistoryEntryNotFoundError(entry_id)

    @property
    def entries(self) -> tuple:
        return tuple(self._entries)

    @property
    def latest(self) -> Optional[HistoryEntry]:
        return self._entries[0] if self._entries else None

    def to_list(self) -> List[Dict[str, Any]]:
        return [e.to_dict() for e in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(tuple(self._entries))

    def __repr__(self) -> str:
        return f"HistoryLog(entries={len(self._entries)}, capacity={self.capacity})"
