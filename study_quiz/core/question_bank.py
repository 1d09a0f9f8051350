"""Immutable, index-addressable collection of compiled questions."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
import logging
from pathlib import Path

from study_quiz.constants.quiz_constants import QUESTION_FILE_SUFFIX
from study_quiz.core.errors import QuestionBankError, QuestionParseError
from study_quiz.core.models import Question
from study_quiz.core.question_parser import load_question_file

logger = logging.getLogger(__name__)


class QuestionBank:
    """Read-only question table built once at startup.

    The bank never changes after construction, so it is shared between
    request handlers without locking.
    """

    __slots__ = ("_questions",)

    def __init__(self, questions: Iterable[Question]) -> None:
        self._questions: tuple[Question, ...] = tuple(questions)
        if not self._questions:
            raise QuestionBankError("Question bank must contain at least one question.")

    def by_index(self, index: int) -> Question:
        if not 0 <= index < len(self._questions):
            raise IndexError(f"Question index {index} out of range")
        return self._questions[index]

    def get(self, index: int) -> Question | None:
        if not 0 <= index < len(self._questions):
            return None
        return self._questions[index]

    def size(self) -> int:
        return len(self._questions)

    def all(self) -> Sequence[Question]:
        return self._questions

    def __len__(self) -> int:
        return len(self._questions)

    def __iter__(self):
        return iter(self._questions)


def discover_question_files(directory: Path) -> list[Path]:
    """Return quiz documents in ``directory`` sorted by file name."""
    if not directory.is_dir():
        raise QuestionBankError(f"Question directory not found: {directory}")
    return sorted(
        (path for path in directory.iterdir() if path.is_file() and path.suffix == QUESTION_FILE_SUFFIX),
        key=lambda path: path.name,
    )


def load_question_bank(directory: Path) -> QuestionBank:
    """Parse every document in ``directory``; any bad document aborts the build."""
    questions: list[Question] = []
    for file_path in discover_question_files(directory):
        try:
            questions.append(load_question_file(file_path))
        except QuestionParseError:
            logger.error("Refusing to build question bank: %s is invalid", file_path)
            raise
        except (OSError, UnicodeDecodeError) as exc:
            raise QuestionBankError(f"Unable to read question file {file_path}: {exc}") from exc

    bank = QuestionBank(questions)
    logger.info("Loaded %d question(s) from %s", bank.size(), directory)
    return bank
