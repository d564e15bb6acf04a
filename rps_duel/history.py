"""Bounded, newest-first log of played rounds."""

from collections import deque
from dataclasses import dataclass
from datetime import datetime

from .engine import Move, Outcome

DEFAULT_HISTORY_SIZE = 10


@dataclass(frozen=True)
class RoundRecord:
    """One resolved round. Never modified after creation."""
    id: int
    player_move: Move
    opponent_move: Move
    outcome: Outcome
    timestamp: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "player_move": self.player_move.value,
            "opponent_move": self.opponent_move.value,
            "outcome": self.outcome.value,
            "timestamp": self.timestamp.strftime("%H:%M:%S"),
        }


class HistoryBuffer:
    """Keeps the most recent ``capacity`` rounds, newest first.

    Pushing onto a full buffer evicts the oldest record.
    """

    def __init__(self, capacity: int = DEFAULT_HISTORY_SIZE):
        if capacity < 1:
            raise ValueError(f"history capacity must be at least 1, got {capacity}")
        self._records: deque = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._records.maxlen

    def push(self, record: RoundRecord):
        self._records.appendleft(record)

    def clear(self):
        self._records.clear()

    def snapshot(self) -> tuple:
        return tuple(self._records)

    def __len__(self):
        return len(self._records)

    def __iter__(self):
        return iter(self.snapshot())

    def __bool__(self):
        return bool(self._records)

    def __repr__(self):
        return f"HistoryBuffer({list(self._records)!r}, capacity={self.capacity})"
