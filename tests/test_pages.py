from __future__ import annotations

from study_quiz.core.models import FixedChoice, OpenChoice, Question
from study_quiz.core.question_bank import QuestionBank
from study_quiz.server.pages import (
    RenderedPages,
    canonical_answer_string,
    render_question_page,
)


def test_canonical_answer_string_matches_submission_format(bank: QuestionBank) -> None:
    assert canonical_answer_string(bank.by_index(0)) == "1"
    assert canonical_answer_string(bank.by_index(1)) == "1 1989"


def test_question_page_escapes_text_and_renders_code() -> None:
    question = Question(
        name="<Generics>",
        description="Pick **one**.\nOr the other.\n",
        code="fn id<T>(t: T) -> T { t }\n",
        choices=(FixedChoice("Vec<T>"), OpenChoice("Type", "T")),
        answer_index=1,
    )

    html = render_question_page(question, index=0, total=4)

    assert "&lt;Generics&gt;" in html
    assert "<strong>one</strong>" in html
    assert "<br" in html
    assert "fn id&lt;T&gt;(t: T) -&gt; T { t }" in html
    assert "Vec&lt;T&gt;" in html
    assert 'id="option1text"' in html
    assert "1 / 4" in html
    assert 'const canonicalAnswer = "1 T";' in html


def test_rendered_pages_cover_every_question(bank: QuestionBank) -> None:
    pages = RenderedPages.build(bank, online=False)

    assert len(pages.questions) == bank.size()
    assert "Array.from({ length: 3 }" in pages.start
    assert "Online submission is disabled" in pages.finish


def test_placeholder_text_in_question_content_is_left_alone() -> None:
    question = Question(
        name="__QUESTION_ANSWER__",
        description="",
        code="let __QUESTION_ANSWER__ = 1;\n",
        choices=(FixedChoice("__CHOICE_INDEX__"), FixedChoice("b")),
        answer_index=1,
    )

    html = render_question_page(question, index=0, total=1)

    assert "<h1>__QUESTION_ANSWER__</h1>" in html
    assert "let __QUESTION_ANSWER__ = 1;" in html
    assert '<label for="option0">__CHOICE_INDEX__</label>' in html
    assert 'const canonicalAnswer = "1";' in html
