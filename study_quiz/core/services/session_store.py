"""Short-lived correlation between a quiz submission and an identity callback."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta
import logging
import re
import secrets
from threading import Lock, Thread
import time

from study_quiz.constants.quiz_constants import SESSION_SWEEP_INTERVAL, SESSION_TTL
from study_quiz.core.errors import MalformedSubmissionError, UnauthorizedError
from study_quiz.core.models import QuizResult

logger = logging.getLogger(__name__)

TOKEN_BITS = 128
_TOKEN_PATTERN = re.compile(r"[0-9A-Fa-f]{1,%d}" % (TOKEN_BITS // 4))


def format_token(token: int) -> str:
    return format(token, "X")


def parse_token(state: str) -> int:
    """Decode the hex ``state`` value of an identity callback."""
    if not _TOKEN_PATTERN.fullmatch(state):
        raise MalformedSubmissionError("State is not a 128-bit hexadecimal token.")
    return int(state, 16)


@dataclass(frozen=True, slots=True)
class PendingEntry:
    issued_at: float
    result: QuizResult


class SessionCorrelationStore:
    """Maps random tokens to pending results for at most ``ttl``.

    ``redeem`` removes the entry whatever the outcome, so each token is
    single-use. Expired entries are rejected on redemption and dropped by
    :meth:`sweep_expired`.
    """

    def __init__(
        self,
        ttl: timedelta = SESSION_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl_seconds = ttl.total_seconds()
        self._clock = clock
        self._lock = Lock()
        self._entries: dict[int, PendingEntry] = {}

    def issue(self, result: QuizResult) -> int:
        token = secrets.randbits(TOKEN_BITS)
        entry = PendingEntry(issued_at=self._clock(), result=result)
        with self._lock:
            self._entries[token] = entry
        logger.debug("Issued session token %s", format_token(token))
        return token

    def redeem(self, token: int) -> QuizResult:
        with self._lock:
            entry = self._entries.pop(token, None)
            now = self._clock()
        if entry is None:
            raise UnauthorizedError("Unknown or already redeemed session token.")
        if now - entry.issued_at > self._ttl_seconds:
            logger.debug("Session token %s expired before redemption", format_token(token))
            raise UnauthorizedError("Session token expired.")
        return entry.result

    def sweep_expired(self) -> int:
        """Drop entries older than the TTL and return how many were removed."""
        with self._lock:
            cutoff = self._clock() - self._ttl_seconds
            expired = [token for token, entry in self._entries.items() if entry.issued_at < cutoff]
            for token in expired:
                del self._entries[token]
        if expired:
            logger.info("Swept %d expired session token(s)", len(expired))
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, token: object) -> bool:
        with self._lock:
            return token in self._entries


def start_session_sweeper(
    store: SessionCorrelationStore,
    interval: timedelta = SESSION_SWEEP_INTERVAL,
) -> Thread:
    """Sweep ``store`` every ``interval`` in a daemon thread for the process lifetime."""

    def run_sweeper() -> None:
        while True:
            store.sweep_expired()
            time.sleep(interval.total_seconds())

    thread = Thread(target=run_sweeper, name="SessionSweeper", daemon=True)
    thread.start()
    return thread
