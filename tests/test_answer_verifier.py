from __future__ import annotations

import pytest

from study_quiz.core.answer_verifier import (
    compute_score,
    equivalent,
    grade_item,
    grade_submission,
)
from study_quiz.core.errors import MalformedSubmissionError
from study_quiz.core.models import ChoiceAnswer, FixedChoice, OpenAnswer, OpenChoice
from study_quiz.core.question_bank import QuestionBank


def test_fixed_choice_matches_case_insensitively_after_trimming() -> None:
    assert equivalent(FixedChoice("Paris"), ChoiceAnswer(" paris "))
    assert not equivalent(FixedChoice("Paris"), ChoiceAnswer("London"))


def test_variant_mismatch_is_never_equivalent() -> None:
    assert not equivalent(FixedChoice("x"), OpenAnswer("x", "y"))
    assert not equivalent(OpenChoice("x", "y"), ChoiceAnswer("x"))


def test_open_choice_needs_label_and_value() -> None:
    assert equivalent(OpenChoice("Year", "1989"), OpenAnswer("year", "1989"))
    assert equivalent(OpenChoice("Year", "1989"), OpenAnswer(" YEAR", " 1989 "))
    assert not equivalent(OpenChoice("Year", "1989"), OpenAnswer("year", "1990"))
    assert not equivalent(OpenChoice("Year", "1989"), OpenAnswer("Month", "1989"))


def test_score_is_fraction_of_true_flags() -> None:
    assert compute_score([True, False, True]) == pytest.approx(2 / 3)
    assert compute_score([False]) == 0.0
    assert compute_score([True, True]) == 1.0


def test_empty_score_is_malformed() -> None:
    with pytest.raises(MalformedSubmissionError):
        compute_score([])


def test_fixed_answer_resolves_to_choice_label(bank: QuestionBank) -> None:
    item = grade_item(bank.by_index(0), "1")

    assert item.resolved_text == "Paris"
    assert item.is_correct


def test_open_answer_resolves_to_text_after_first_space(bank: QuestionBank) -> None:
    item = grade_item(bank.by_index(1), "1 1989 AD")

    assert item.resolved_text == "1989 AD"
    assert not item.is_correct
    assert grade_item(bank.by_index(1), "1 1989").is_correct


def test_open_answer_with_unusable_index_is_wrong_but_not_malformed(bank: QuestionBank) -> None:
    item = grade_item(bank.by_index(1), "0 1989")

    assert item.resolved_text == "1989"
    assert not item.is_correct
    assert not grade_item(bank.by_index(1), "x 1989").is_correct
    assert not grade_item(bank.by_index(1), "\u00b2 1989").is_correct
    assert not grade_item(bank.by_index(1), "-1 1989").is_correct


def test_unanswered_item_is_wrong(bank: QuestionBank) -> None:
    item = grade_item(bank.by_index(0), "")

    assert item.resolved_text == ""
    assert not item.is_correct


@pytest.mark.parametrize("raw", ["3", "-1", "abc"])
def test_bad_fixed_index_is_malformed(bank: QuestionBank, raw: str) -> None:
    with pytest.raises(MalformedSubmissionError):
        grade_item(bank.by_index(0), raw)


def test_index_of_open_choice_without_value_is_malformed(bank: QuestionBank) -> None:
    with pytest.raises(MalformedSubmissionError):
        grade_item(bank.by_index(1), "1")


def test_submission_is_graded_server_side(bank: QuestionBank) -> None:
    result = grade_submission(
        bank,
        sequence=[2, 0, 1],
        submitted=["1", "0", "1 1989"],
        correct=[True, True, True],
    )

    assert result.answers == (("Arithmetic", "4"), ("Capital", "London"), ("Year", "1989"))
    assert result.score == pytest.approx(2 / 3)


@pytest.mark.parametrize(
    ("sequence", "submitted", "correct"),
    [
        ([0, 1], ["1"], [True, True]),
        ([0], ["1"], [True, False]),
        ([], [], []),
        ([7], ["1"], [True]),
        ([0, 1], ["1", "1"], [True, True]),
    ],
)
def test_malformed_batches_are_rejected(bank: QuestionBank, sequence, submitted, correct) -> None:
    with pytest.raises(MalformedSubmissionError):
        grade_submission(bank, sequence, submitted, correct)
