"""Compile quiz documents written in a small markdown dialect.

Document format (one question per file):

    # Title of the question
    Free description text, any number of lines.

    ```rs
    verbatim code shown with the question (optional)
    ```

    - [ ] wrong fixed choice
    - [x] the correct choice
    - [ ] open choice label: [expected value]

Exactly one choice carries the ``[x]`` marker; its position among all choices
is the canonical answer. The parser is a single forward scan over the lines,
so a failure always points at the line that broke it.
"""

from __future__ import annotations

from enum import Enum, auto
from pathlib import Path

from study_quiz.constants.quiz_constants import (
    CHECKED_MARKER,
    CHOICE_LIST_PREFIX,
    CODE_FENCE_CLOSE,
    CODE_FENCE_OPEN,
    OPEN_VALUE_CLOSE,
    OPEN_VALUE_OPEN,
    TITLE_PREFIX,
    UNCHECKED_MARKER,
)
from study_quiz.core.errors import (
    AnswerMissingError,
    DuplicateAnswerError,
    InvalidChoiceLineError,
    TitleMissingError,
)
from study_quiz.core.models import Choice, FixedChoice, OpenChoice, Question


class ParseMode(Enum):
    TITLE = auto()
    DESCRIPTION = auto()
    CODE = auto()
    CHOICES = auto()


def load_question_file(file_path: Path) -> Question:
    text = file_path.read_text(encoding="utf-8")
    return parse_question(text, source=file_path.name)


def parse_question(text: str, source: str = "<string>") -> Question:
    """Parse one document into a :class:`Question`.

    Raises a :class:`~study_quiz.core.errors.QuestionParseError` subclass
    naming ``source`` and the offending line.
    """
    title: str | None = None
    mode = ParseMode.TITLE
    description: list[str] = []
    code: list[str] = []
    choices: list[Choice] = []
    answer_index: int | None = None

    for line_number, line in enumerate(text.split("\n"), start=1):
        line = line.removesuffix("\r")
        if mode is ParseMode.TITLE:
            if not line:
                continue
            if not line.startswith(TITLE_PREFIX) or not line[len(TITLE_PREFIX):].strip():
                raise TitleMissingError(source, line_number, line)
            title = line[len(TITLE_PREFIX):].strip()
            mode = ParseMode.DESCRIPTION
            continue

        if mode is ParseMode.DESCRIPTION:
            if not line:
                continue
            if line.startswith(CODE_FENCE_OPEN):
                mode = ParseMode.CODE
                continue
            if not line.startswith(CHOICE_LIST_PREFIX):
                description.append(line + "\n")
                continue
            # The first choice line is handled below in CHOICES mode.
            mode = ParseMode.CHOICES

        if mode is ParseMode.CODE:
            if line == CODE_FENCE_CLOSE:
                mode = ParseMode.CHOICES
            else:
                code.append(line + "\n")
            continue

        if not line:
            continue
        checked = line.startswith(CHECKED_MARKER)
        if checked:
            if answer_index is not None:
                raise DuplicateAnswerError(source, line_number, line)
            answer_index = len(choices)
        elif not line.startswith(UNCHECKED_MARKER):
            raise InvalidChoiceLineError(source, line_number, line)
        choices.append(_parse_choice(line, source, line_number))

    if title is None:
        raise TitleMissingError(source)
    if answer_index is None:
        raise AnswerMissingError(source)

    return Question(
        name=title,
        description="".join(description),
        code="".join(code),
        choices=tuple(choices),
        answer_index=answer_index,
    )


def _parse_choice(line: str, source: str, line_number: int) -> Choice:
    # Both markers have the same length, so the label always starts here.
    body = line[len(UNCHECKED_MARKER):]
    if not body.endswith(OPEN_VALUE_CLOSE):
        return FixedChoice(label=body)

    split_at = body.rfind(OPEN_VALUE_OPEN)
    if split_at < 0:
        raise InvalidChoiceLineError(source, line_number, line)
    label = body[:split_at]
    expected_value = body[split_at + len(OPEN_VALUE_OPEN):-len(OPEN_VALUE_CLOSE)]
    return OpenChoice(label=label, expected_value=expected_value)
