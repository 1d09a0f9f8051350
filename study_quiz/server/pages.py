"""HTML pages served to learners.

Pages are plain string templates with ``__PLACEHOLDER__`` markers, rendered
once at startup. Progress lives in three cookies shared by every page:
``testSequence`` (shuffled question indexes), ``testSubmitted`` (raw answer
strings) and ``testCorrect`` (client-side feedback flags).
"""

from __future__ import annotations

from dataclasses import dataclass
from html import escape
import json
import re

from study_quiz.core.markdown_renderer import renderer
from study_quiz.core.models import OpenChoice, Question
from study_quiz.core.question_bank import QuestionBank

_PAGE_TITLE = "Rust Study Quiz"
_PLACEHOLDER = re.compile(r"__([A-Z_]+?)__")

_PAGE_SHELL = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>__PAGE_TITLE__</title>
    <style>
      :root { font-family: system-ui, sans-serif; background: #1e1e1e; color: #f5f7ff; }
      body { margin: 0 auto; max-width: 48rem; padding: 1.5rem; }
      pre { background: #121212; border-radius: 0.75rem; padding: 1.5rem; overflow-x: auto; }
      input[type=text] { background: #121212; border: none; border-radius: 4px; color: #fff; width: 8rem; }
      .progress { color: #94a3b8; }
      .link { color: royalblue; cursor: pointer; }
      .correct { color: #4ade80; }
      .wrong { color: #f87171; }
    </style>
    <script>
      function readCookie(name) {
        const match = document.cookie.split('; ').find(row => row.startsWith(name + '='));
        return match ? JSON.parse(decodeURIComponent(match.split('=')[1])) : null;
      }
      function writeCookie(name, value) {
        document.cookie = name + '=' + encodeURIComponent(JSON.stringify(value)) + '; path=/';
      }
      function getProgress() {
        const sequence = readCookie('testSequence');
        const submitted = readCookie('testSubmitted');
        const correct = readCookie('testCorrect');
        if (sequence === null || submitted === null || correct === null) {
          return null;
        }
        return { sequence, submitted, correct };
      }
    </script>
  </head>
  <body>
__PAGE_BODY__
  </body>
</html>
"""

_QUESTION_BODY = """    <p class="progress">__QUESTION_NUMBER__ / __QUESTION_COUNT__</p>
    <h1>__QUESTION_NAME__</h1>
    <div>__QUESTION_DESCRIPTION__</div>
    __QUESTION_CODE__
    <form id="choices">
__QUESTION_CHOICES__
    </form>
    <p id="feedback"></p>
    <p class="link" onclick="nextQuestion()">Next</p>
    <script>
      const questionIndex = __QUESTION_INDEX__;
      const canonicalAnswer = __QUESTION_ANSWER__;
      let currentAnswer = '';

      function updateAnswer() {
        const selected = document.querySelector('input[name=option]:checked');
        if (!selected) {
          return;
        }
        const text = document.getElementById('option' + selected.value + 'text');
        currentAnswer = text ? selected.value + ' ' + text.value : selected.value;
      }

      function nextQuestion() {
        const progress = getProgress();
        if (progress === null) {
          document.location.href = './';
          return;
        }
        const position = progress.sequence.indexOf(questionIndex);
        if (position >= 0) {
          progress.submitted[position] = currentAnswer;
          progress.correct[position] =
            currentAnswer.trim().toLowerCase() === canonicalAnswer.trim().toLowerCase();
          writeCookie('testSubmitted', progress.submitted);
          writeCookie('testCorrect', progress.correct);
        }
        const next = progress.sequence[position + 1];
        document.location.href = next === undefined ? './finish' : './' + next;
      }
    </script>"""

_FIXED_OPTION = """      <input type="radio" id="option__CHOICE_INDEX__" name="option" value="__CHOICE_INDEX__" onchange="updateAnswer()">
      <label for="option__CHOICE_INDEX__">__CHOICE_LABEL__</label><br/>"""

_OPEN_OPTION = """      <input type="radio" id="option__CHOICE_INDEX__" name="option" value="__CHOICE_INDEX__" onchange="updateAnswer()">
      <label for="option__CHOICE_INDEX__">__CHOICE_LABEL__:</label>
      <input type="text" id="option__CHOICE_INDEX__text" onchange="updateAnswer()"><br/>"""

_START_BODY = """    <script>
      const sequence = Array.from({ length: __QUESTION_COUNT__ }, (_, index) => index);
      for (let i = sequence.length - 1; i > 0; i--) {
        const j = Math.floor(Math.random() * (i + 1));
        [sequence[i], sequence[j]] = [sequence[j], sequence[i]];
      }
      writeCookie('testSequence', sequence);
      writeCookie('testSubmitted', Array(__QUESTION_COUNT__).fill(''));
      writeCookie('testCorrect', Array(__QUESTION_COUNT__).fill(false));
      document.location.href = './' + sequence[0];
    </script>"""

_FINISH_BODY = """    <h1>Thank you for taking the quiz!</h1>
__FINISH_CONTENT__
    <script>
      if (getProgress() === null) {
        document.location.href = './';
      }
    </script>"""

_FINISH_OFFLINE = """    <p>Online submission is disabled. Your results:</p>
    <div id="results"></div>
    <script>
      const progress = getProgress();
      const results = document.getElementById('results');
      if (progress !== null) {
        progress.sequence.forEach((number, position) => {
          const link = document.createElement('a');
          link.textContent = number;
          link.href = './' + number;
          link.style.padding = '10px';
          link.className = progress.correct[position] ? 'correct' : 'wrong';
          results.appendChild(link);
        });
      }
    </script>"""

_FINISH_ONLINE = """    <p class="link" onclick="submitResult()">Submit</p>
    <p id="status"></p>
    <script>
      async function submitResult() {
        const progress = getProgress();
        const response = await fetch('./submit', {
          method: 'PUT',
          headers: { 'Content-Type': 'application/json' },
          body: JSON.stringify(progress),
        });
        const text = await response.text();
        if (response.ok) {
          window.location.href = text;
        } else {
          document.getElementById('status').textContent = 'Submission failed: ' + text;
        }
      }
    </script>"""


def _fill(template: str, **values: str) -> str:
    return _PLACEHOLDER.sub(lambda match: values.get(match.group(1), match.group(0)), template)


def _page(body: str) -> str:
    return _fill(_PAGE_SHELL, PAGE_TITLE=escape(_PAGE_TITLE), PAGE_BODY=body)


def _script_literal(value: object) -> str:
    return json.dumps(value).replace("</", "<\\/")


def canonical_answer_string(question: Question) -> str:
    """The raw answer a learner submits when answering ``question`` correctly."""
    choice = question.canonical_choice
    if isinstance(choice, OpenChoice):
        return f"{question.answer_index} {choice.expected_value}"
    return str(question.answer_index)


def render_question_page(question: Question, index: int, total: int) -> str:
    options = []
    for choice_index, choice in enumerate(question.choices):
        template = _OPEN_OPTION if isinstance(choice, OpenChoice) else _FIXED_OPTION
        options.append(
            _fill(template, CHOICE_INDEX=str(choice_index), CHOICE_LABEL=escape(choice.label))
        )
    body = _fill(
        _QUESTION_BODY,
        QUESTION_NUMBER=str(index + 1),
        QUESTION_COUNT=str(total),
        QUESTION_NAME=escape(question.name),
        QUESTION_DESCRIPTION=renderer.render_fragment(question.description),
        QUESTION_CODE=renderer.render_code(question.code),
        QUESTION_CHOICES="\n".join(options),
        QUESTION_INDEX=str(index),
        QUESTION_ANSWER=_script_literal(canonical_answer_string(question)),
    )
    return _page(body)


def render_start_page(count: int) -> str:
    return _page(_fill(_START_BODY, QUESTION_COUNT=str(count)))


def render_finish_page(online: bool) -> str:
    content = _FINISH_ONLINE if online else _FINISH_OFFLINE
    return _page(_fill(_FINISH_BODY, FINISH_CONTENT=content))


@dataclass(frozen=True, slots=True)
class RenderedPages:
    """Every page the server hands out, rendered once."""

    questions: tuple[str, ...]
    start: str
    finish: str

    @classmethod
    def build(cls, bank: QuestionBank, online: bool) -> "RenderedPages":
        total = bank.size()
        return cls(
            questions=tuple(
                render_question_page(question, index, total) for index, question in enumerate(bank)
            ),
            start=render_start_page(total),
            finish=render_finish_page(online),
        )
