"""Markdown converters for Scribe.

A converter turns the rendered body of one document into HTML. Any callable
taking and returning a string will do; this module provides the two used by
the publisher.

Key classes:
- MarkdownConverter: In-process conversion with mistune and Pygments.
- CommandConverter: Pipes text through an external filter program.

Key functions:
- converter_for: Pick a converter from the site configuration.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Any

import mistune

from .html_utils import escape_html


class _HighlightRenderer(mistune.HTMLRenderer):
    """HTML renderer that keeps raw HTML and highlights fenced code blocks."""

    def __init__(self):
        super().__init__(escape=False)

    def block_code(self, code: str, info: str | None = None) -> str:
        """Render a code block with Pygments syntax highlighting.

        Args:
            code: The code content.
            info: Language identifier (e.g., 'python', 'sh').

        Returns:
            HTML string with highlighted code.
        """
        if info:
            try:
                from pygments import highlight
                from pygments.formatters import HtmlFormatter
                from pygments.lexers import get_lexer_by_name
                from pygments.util import ClassNotFound

                lexer = get_lexer_by_name(info.split()[0], stripall=True)
                formatter = HtmlFormatter(nowrap=False, cssclass="highlight")
                return highlight(code, lexer, formatter)
            except ClassNotFound:
                pass
        lang_class = f' class="language-{info}"' if info else ""
        return f"<pre><code{lang_class}>{escape_html(code)}</code></pre>\n"


class MarkdownConverter:
    """Converts Markdown to HTML in process using mistune."""

    def __init__(self, plugins: list[str] | None = None):
        self.plugins = plugins or ["strikethrough", "footnotes", "table", "url"]

    def __call__(self, text: str) -> str:
        markdown = mistune.create_markdown(
            renderer=_HighlightRenderer(), plugins=self.plugins
        )
        return markdown(text)


class CommandConverter:
    """Converts text with an external filter program.

    The text is written to the program's standard input and its standard
    output is the result. Standard error is discarded and the exit status is
    ignored, so a failing filter yields whatever it managed to print.

    Attributes:
        command: Shell command line of the filter (e.g. ``markdown``).
        cwd: Optional working directory for the filter.
    """

    def __init__(self, command: str, cwd: Path | None = None):
        self.command = command
        self.cwd = cwd

    def __call__(self, text: str) -> str:
        try:
            result = subprocess.run(
                self.command,
                shell=True,
                cwd=self.cwd,
                input=text,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except OSError:
            return ""
        return result.stdout or ""


def converter_for(config: dict[str, Any], cwd: Path | None = None):
    """Return the converter configured for a site.

    Args:
        config: Site configuration; a non-empty ``converter`` entry selects
            an external filter command.
        cwd: Working directory for an external filter.

    Returns:
        A CommandConverter or a MarkdownConverter.
    """
    command = str(config.get("converter") or "").strip()
    if command:
        return CommandConverter(command, cwd=cwd)
    return MarkdownConverter()
