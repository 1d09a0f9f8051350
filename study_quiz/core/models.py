"""Domain models for the quiz service."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True, slots=True)
class FixedChoice:
    """Selectable option identified only by its label."""

    label: str


@dataclass(frozen=True, slots=True)
class OpenChoice:
    """Option that also requires a free-text value to match."""

    label: str
    expected_value: str


Choice = Union[FixedChoice, OpenChoice]


@dataclass(frozen=True, slots=True)
class ChoiceAnswer:
    """Learner picked a fixed choice."""

    label: str


@dataclass(frozen=True, slots=True)
class OpenAnswer:
    """Learner picked an open choice and typed a value."""

    label: str
    value: str


SubmittedAnswer = Union[ChoiceAnswer, OpenAnswer]


@dataclass(frozen=True, slots=True)
class Question:
    """One quiz question compiled from a markdown document."""

    name: str
    description: str
    code: str
    choices: tuple[Choice, ...]
    answer_index: int

    def __post_init__(self) -> None:
        if not self.choices:
            raise ValueError(f"Question '{self.name}' has no choices.")
        if not 0 <= self.answer_index < len(self.choices):
            raise ValueError(
                f"Answer index {self.answer_index} out of range for question '{self.name}'."
            )

    @property
    def canonical_choice(self) -> Choice:
        return self.choices[self.answer_index]


@dataclass(frozen=True, slots=True)
class QuizResult:
    """Graded submission, serialized verbatim into the durable record."""

    answers: tuple[tuple[str, str], ...]
    score: float
