"""Best-effort dual write of finalized results.

A result goes to the in-memory leaderboard and to an append-only archive of
JSON files, one directory per identity. Both writes always run to completion;
a failure in one does not undo or cancel the other.
"""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
import logging
import os
from pathlib import Path
import re

from pydantic import TypeAdapter

from study_quiz.constants.quiz_constants import RECORD_TIMESTAMP_FORMAT
from study_quiz.core.errors import PersistenceError
from study_quiz.core.models import QuizResult
from study_quiz.core.services.leaderboard import Leaderboard

logger = logging.getLogger(__name__)

_RESULT_ADAPTER = TypeAdapter(QuizResult)
_SAFE_SEGMENT = re.compile(r"[A-Za-z0-9_.-]+")
_MAX_NAME_ATTEMPTS = 1000


def serialize_result(result: QuizResult) -> bytes:
    return _RESULT_ADAPTER.dump_json(result, indent=2)


class Sink(str, Enum):
    LEADERBOARD = "leaderboard"
    DURABLE_RECORD = "durable_record"


@dataclass(frozen=True, slots=True)
class FinalizeOutcome:
    """Per-sink result of :meth:`SubmissionPersister.finalize`."""

    leaderboard_error: BaseException | None = None
    record_error: BaseException | None = None
    record_path: Path | None = None

    @property
    def ok(self) -> bool:
        return self.leaderboard_error is None and self.record_error is None

    @property
    def failed_sink(self) -> Sink | None:
        """The sink to report; the durable record wins when both failed."""
        if self.record_error is not None:
            return Sink.DURABLE_RECORD
        if self.leaderboard_error is not None:
            return Sink.LEADERBOARD
        return None

    @property
    def failed_sinks(self) -> tuple[Sink, ...]:
        sinks = []
        if self.leaderboard_error is not None:
            sinks.append(Sink.LEADERBOARD)
        if self.record_error is not None:
            sinks.append(Sink.DURABLE_RECORD)
        return tuple(sinks)


class RecordArchive:
    """Append-only store of serialized results under ``root/<identity>/``."""

    def __init__(self, root: Path, clock: Callable[[], datetime] = datetime.now) -> None:
        self._root = root
        self._clock = clock

    def append(self, identity: str, result: QuizResult) -> Path:
        """Write ``result`` to a new file and fsync it; never overwrites."""
        payload = serialize_result(result)
        if not _SAFE_SEGMENT.fullmatch(identity) or identity in (".", ".."):
            logger.error(
                "Refusing to archive result for unsafe identity %r. Data is not saved: %s",
                identity,
                payload.decode("utf-8"),
            )
            raise PersistenceError(f"Identity {identity!r} is not a valid record directory name.")

        directory = self._root / identity
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error(
                "Unable to create submission directory at %s: %s. Data is not saved: %s",
                directory,
                exc,
                payload.decode("utf-8"),
            )
            raise PersistenceError(f"Unable to create {directory}") from exc

        stem = self._clock().strftime(RECORD_TIMESTAMP_FORMAT)
        for attempt in range(_MAX_NAME_ATTEMPTS):
            name = f"{stem}.json" if attempt == 0 else f"{stem}-{attempt}.json"
            file_path = directory / name
            try:
                self._write_new_file(file_path, payload)
            except FileExistsError:
                continue
            except OSError as exc:
                logger.error(
                    "Unable to save submission entry at %s: %s. Data is not saved: %s",
                    file_path,
                    exc,
                    payload.decode("utf-8"),
                )
                raise PersistenceError(f"Unable to write {file_path}") from exc
            return file_path
        raise PersistenceError(f"No free record name for {stem} in {directory}")

    @staticmethod
    def _write_new_file(file_path: Path, payload: bytes) -> None:
        with open(file_path, "xb") as handle:
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())


class SubmissionPersister:
    """Finalizes verified results into the leaderboard and the archive."""

    def __init__(self, leaderboard: Leaderboard, archive: RecordArchive, max_workers: int = 4) -> None:
        self._leaderboard = leaderboard
        self._archive = archive
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="persist")

    @property
    def leaderboard(self) -> Leaderboard:
        return self._leaderboard

    def finalize(self, identity: str, result: QuizResult) -> FinalizeOutcome:
        leaderboard_future = self._executor.submit(self._leaderboard.record, identity, result)
        record_future = self._executor.submit(self._archive.append, identity, result)

        leaderboard_error = _wait_for(leaderboard_future)
        record_error = _wait_for(record_future)
        outcome = FinalizeOutcome(
            leaderboard_error=leaderboard_error,
            record_error=record_error,
            record_path=None if record_error else record_future.result(),
        )
        if not outcome.ok:
            logger.error(
                "Finalizing result for %s failed in %s",
                identity,
                ", ".join(sink.value for sink in outcome.failed_sinks),
            )
        return outcome

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)


def _wait_for(future: Future) -> BaseException | None:
    try:
        future.result()
    except Exception as exc:
        return exc
    return None
