"""Markdown rendering for question descriptions.

Descriptions are authored as plain lines; single line breaks are kept so a
question reads the same on the page as in its source document.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from html import escape

from markdown_it import MarkdownIt


@dataclass(slots=True)
class MarkdownRenderer:
    """Converts question markdown into HTML fragments."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html, "breaks": True})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str) -> str:
        """Render a markdown string into an HTML fragment."""
        sanitized = markdown_text.strip()
        if not sanitized:
            return ""
        return self._markdown.render(sanitized)

    @staticmethod
    def render_code(code: str, language: str = "rust") -> str:
        if not code:
            return ""
        return f'<pre><code class="{language}">{escape(code)}</code></pre>'


renderer = MarkdownRenderer()
