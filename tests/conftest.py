import os
import sys

# Ensure project root is on sys.path for test imports
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

import pytest  # noqa: E402

from study_quiz.core.models import FixedChoice, OpenChoice, Question  # noqa: E402
from study_quiz.core.question_bank import QuestionBank  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_settings_cache() -> None:
    from study_quiz.utils.settings import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def bank() -> QuestionBank:
    return QuestionBank(
        [
            Question(
                name="Capital",
                description="Capital of France?\n",
                code="",
                choices=(FixedChoice("London"), FixedChoice("Paris"), FixedChoice("Rome")),
                answer_index=1,
            ),
            Question(
                name="Year",
                description="When did the wall fall?\n",
                code="",
                choices=(FixedChoice("Never"), OpenChoice("Year", "1989")),
                answer_index=1,
            ),
            Question(
                name="Arithmetic",
                description="What is 2+2?\n",
                code="",
                choices=(FixedChoice("3"), FixedChoice("4")),
                answer_index=1,
            ),
        ]
    )
