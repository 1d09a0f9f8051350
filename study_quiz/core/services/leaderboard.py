"""In-memory leaderboard of the latest result per identity."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from threading import Lock

from study_quiz.core.models import QuizResult


@dataclass(frozen=True, slots=True)
class LeaderboardRow:
    """Immutable snapshot returned to consumers."""

    identity: str
    score: float
    submitted_at: datetime


class Leaderboard:
    """Keeps the most recent result for each identity; last write wins."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._results: dict[str, tuple[QuizResult, datetime]] = {}

    def record(self, identity: str, result: QuizResult) -> None:
        with self._lock:
            self._results[identity] = (result, datetime.now(timezone.utc))

    def get(self, identity: str) -> QuizResult | None:
        with self._lock:
            entry = self._results.get(identity)
        return entry[0] if entry else None

    def get_top_scorers(self, limit: int = 3) -> list[LeaderboardRow]:
        """Return the top N identities by score, earliest submission first on ties."""
        with self._lock:
            snapshot = list(self._results.items())
        rows = sorted(
            (
                LeaderboardRow(identity=identity, score=result.score, submitted_at=submitted_at)
                for identity, (result, submitted_at) in snapshot
            ),
            key=lambda row: (-row.score, row.submitted_at),
        )
        return rows[:limit]

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)
