"""Quiz-related constants shared across core and server layers."""

from datetime import timedelta

QUESTION_FILE_SUFFIX: str = ".md"

TITLE_PREFIX: str = "# "
CODE_FENCE_OPEN: str = "```rs"
CODE_FENCE_CLOSE: str = "```"
CHOICE_LIST_PREFIX: str = "- ["
UNCHECKED_MARKER: str = "- [ ] "
CHECKED_MARKER: str = "- [x] "
OPEN_VALUE_OPEN: str = ": ["
OPEN_VALUE_CLOSE: str = "]"

SESSION_TTL: timedelta = timedelta(minutes=5)
SESSION_SWEEP_INTERVAL: timedelta = timedelta(minutes=1)

RECORD_TIMESTAMP_FORMAT: str = "%Y-%m-%dT%H-%M-%S"
