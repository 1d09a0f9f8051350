"""Answer equivalence and submission grading."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import logging

from study_quiz.core.errors import MalformedSubmissionError
from study_quiz.core.models import (
    ChoiceAnswer,
    Choice,
    FixedChoice,
    OpenAnswer,
    OpenChoice,
    Question,
    QuizResult,
    SubmittedAnswer,
)
from study_quiz.core.question_bank import QuestionBank

logger = logging.getLogger(__name__)


def _same_text(left: str, right: str) -> bool:
    return left.strip().casefold() == right.strip().casefold()


def equivalent(canonical: Choice, submitted: SubmittedAnswer) -> bool:
    """Return True when ``submitted`` matches ``canonical``.

    Labels and values compare case-insensitively after trimming. A fixed
    choice never matches an open answer and vice versa.
    """
    match canonical, submitted:
        case FixedChoice(label=label), ChoiceAnswer(label=other_label):
            return _same_text(label, other_label)
        case OpenChoice(label=label, expected_value=value), OpenAnswer(label=other_label, value=other_value):
            return _same_text(label, other_label) and _same_text(value, other_value)
        case _:
            return False


def check_answer(question: Question, answer: SubmittedAnswer) -> bool:
    return equivalent(question.canonical_choice, answer)


def compute_score(correct: Sequence[bool]) -> float:
    """Fraction of ``True`` flags, in ``[0, 1]``."""
    if not correct:
        raise MalformedSubmissionError("Cannot score an empty submission.")
    return sum(1 for flag in correct if flag) / len(correct)


@dataclass(frozen=True, slots=True)
class GradedItem:
    question: Question
    resolved_text: str
    is_correct: bool


def grade_item(question: Question, raw: str) -> GradedItem:
    """Decode one raw answer string and grade it against ``question``.

    ``"<index>"`` selects a fixed choice; ``"<index> <value>"`` answers an
    open choice and everything after the first space is the resolved value.
    An empty string is an unanswered item.
    """
    if not raw:
        return GradedItem(question=question, resolved_text="", is_correct=False)

    prefix, space, value = raw.partition(" ")
    if space:
        answer = _decode_open_answer(question, prefix, value)
        is_correct = answer is not None and check_answer(question, answer)
        return GradedItem(question=question, resolved_text=value, is_correct=is_correct)

    choice = _choice_at(question, raw)
    if not isinstance(choice, FixedChoice):
        raise MalformedSubmissionError(
            f"Answer {raw!r} for question '{question.name}' does not select a fixed choice."
        )
    return GradedItem(
        question=question,
        resolved_text=choice.label,
        is_correct=check_answer(question, ChoiceAnswer(label=choice.label)),
    )


def _choice_at(question: Question, raw_index: str) -> Choice:
    try:
        index = int(raw_index)
    except ValueError as exc:
        raise MalformedSubmissionError(
            f"Answer {raw_index!r} for question '{question.name}' is not a choice index."
        ) from exc
    if not 0 <= index < len(question.choices):
        raise MalformedSubmissionError(
            f"Choice index {index} out of range for question '{question.name}'."
        )
    return question.choices[index]


def _decode_open_answer(question: Question, raw_index: str, value: str) -> OpenAnswer | None:
    try:
        index = int(raw_index)
    except ValueError:
        return None
    if not 0 <= index < len(question.choices):
        return None
    choice = question.choices[index]
    if not isinstance(choice, OpenChoice):
        return None
    return OpenAnswer(label=choice.label, value=value)


def grade_submission(
    bank: QuestionBank,
    sequence: Sequence[int],
    submitted: Sequence[str],
    correct: Sequence[bool],
) -> QuizResult:
    """Grade a whole batch; any malformed item rejects the batch.

    The client-reported ``correct`` flags are only checked for shape. The
    score is always recomputed from ``submitted`` against the bank.
    """
    if not (len(sequence) == len(submitted) == len(correct)):
        raise MalformedSubmissionError(
            "sequence, submitted and correct must have the same length "
            f"({len(sequence)}, {len(submitted)}, {len(correct)})."
        )
    if not sequence:
        raise MalformedSubmissionError("Submission contains no answers.")

    items: list[GradedItem] = []
    for index, raw in zip(sequence, submitted):
        question = bank.get(index)
        if question is None:
            raise MalformedSubmissionError(f"Question index {index} out of range.")
        items.append(grade_item(question, raw))

    flags = [item.is_correct for item in items]
    score = compute_score(flags)
    reported = compute_score(correct)
    if reported != score:
        logger.warning(
            "Client reported score %.3f but submission grades to %.3f; using %.3f",
            reported,
            score,
            score,
        )
    return QuizResult(
        answers=tuple((item.question.name, item.resolved_text) for item in items),
        score=score,
    )
