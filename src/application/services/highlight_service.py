"""
Syntax highlighting of snippet bodies (pygments).
"""
from __future__ import annotations

import html
import logging
from typing import List

from pygments import highlight
from pygments.formatters import HtmlFormatter, TerminalFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from src.domain.entities.snippet import Snippet

logger = logging.getLogger(__name__)


class HighlightService:
    def __init__(self, theme: str = "github-dark") -> None:
        self._theme = theme

    def _lexer(self, language: str):
        name = (language or "").strip().lower() or "text"
        try:
            return get_lexer_by_name(name, stripnl=False)
        except ClassNotFound:
            return get_lexer_by_name("text", stripnl=False)

    def highlight(self, code: str, language: str, output_format: str = "html") -> str:
        code = code or ""
        try:
            lexer = self._lexer(language)
            if output_format == "terminal":
                formatter = TerminalFormatter()
            else:
                formatter = HtmlFormatter(style=self._theme, cssclass="highlight", noclasses=True)
            return highlight(code, lexer, formatter)
        except Exception as e:
            logger.error("highlight failed for %s: %s", language, e)
            return f"<pre><code>{html.escape(code)}</code></pre>"

    def highlight_snippet(self, snippet: Snippet, output_format: str = "html") -> List[str]:
        """One rendered body per code block, or the primary body alone."""
        if snippet.snippets:
            return [
                self.highlight(block.code, block.language or snippet.language, output_format)
                for block in snippet.snippets
            ]
        return [self.highlight(snippet.code, snippet.language, output_format)]
