"""Exception hierarchy shared by the quiz core and the HTTP layer."""

from __future__ import annotations


class QuizError(Exception):
    """Base class for all quiz service failures."""


class QuestionParseError(QuizError):
    """Raised when a quiz document cannot be compiled into a question."""

    reason = "Invalid quiz document"

    def __init__(self, source: str, line_number: int | None = None, line: str | None = None) -> None:
        self.source = source
        self.line_number = line_number
        self.line = line
        message = f"{self.reason}: {source}"
        if line_number is not None:
            message += f" (line {line_number}: {line!r})"
        super().__init__(message)


class TitleMissingError(QuestionParseError):
    reason = "Document does not start with a '# <title>' line"


class AnswerMissingError(QuestionParseError):
    reason = "Document has no choice marked with [x]"


class DuplicateAnswerError(QuestionParseError):
    reason = "Document marks more than one choice with [x]"


class InvalidChoiceLineError(QuestionParseError):
    reason = "Document contains a line that is not a choice"


class QuestionBankError(QuizError):
    """Raised when the question source cannot produce a bank."""


class MalformedSubmissionError(QuizError, ValueError):
    """Raised when a submission batch does not fit the question bank."""


class UnauthorizedError(QuizError):
    """Raised when a correlation token is unknown, used, or expired."""


class IdentityExchangeError(QuizError):
    """Raised when the external identity provider fails or misbehaves."""


class PersistenceError(QuizError):
    """Raised when a single result sink cannot be written."""


class OfflineModeError(QuizError):
    """Raised when online submission is used without an identity provider."""
