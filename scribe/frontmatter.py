"""Front matter parsing for Scribe.

A document is a header section delimited by two lines that are exactly
``---``, followed by the body. Header lines are ``key: value`` pairs split on
the first colon. Values are plain strings; no YAML typing is applied.

Key functions:
- headers: Ordered ``(key, raw_value)`` pairs from the header section.
- header: A single trimmed value, empty string when absent.
- body: The body lines following the second delimiter.
- parse_document / load_document: Build a Document in one pass.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

DELIMITER = "---"


@dataclass
class Document:
    """A parsed source document.

    Attributes:
        path: Path the document was loaded from, if any.
        headers: Ordered list of (key, raw value) pairs.
        body: Body lines, each keeping its line ending.
        body_lineno: 1-based line number of the first body line in the file.
    """

    path: Path | None
    headers: list[tuple[str, str]] = field(default_factory=list)
    body: list[str] = field(default_factory=list)
    body_lineno: int = 1

    def header(self, name: str) -> str:
        """Return the trimmed value of header ``name`` or an empty string."""
        return _lookup(self.headers, name)


def _split(text: str) -> tuple[list[str], list[str], int]:
    """Split text into header lines, body lines and the body's line number."""
    lines = text.splitlines(keepends=True)
    marks = [i for i, line in enumerate(lines) if line.rstrip("\r\n") == DELIMITER]
    if len(marks) < 2:
        return [], lines, 1
    first, second = marks[0], marks[1]
    return lines[first + 1 : second], lines[second + 1 :], second + 2


def _parse_headers(lines: list[str]) -> list[tuple[str, str]]:
    pairs: list[tuple[str, str]] = []
    for line in lines:
        key, sep, value = line.rstrip("\r\n").partition(":")
        if not sep:
            continue
        pairs.append((key.strip(), value))
    return pairs


def _lookup(pairs: list[tuple[str, str]], name: str) -> str:
    found = ""
    for key, value in pairs:
        if key == name:
            found = value.strip(" ")
    return found


def headers(text: str) -> list[tuple[str, str]]:
    """Return the header fields of a document.

    Args:
        text: Raw document text.

    Returns:
        List of (key, raw value) pairs in file order. Documents with fewer
        than two delimiter lines have no headers.
    """
    header_lines, _, _ = _split(text)
    return _parse_headers(header_lines)


def header(source: str | Document, name: str) -> str:
    """Return one header value, space-trimmed.

    Args:
        source: Raw document text or an already parsed Document.
        name: Header key to look up.

    Returns:
        The value, or an empty string when the key is absent. When a key is
        repeated the last occurrence wins.
    """
    if isinstance(source, Document):
        return source.header(name)
    return _lookup(headers(source), name)


def body(text: str) -> list[str]:
    """Return the body lines of a document.

    Args:
        text: Raw document text.

    Returns:
        Lines after the second delimiter, or every line when the document
        has no complete header section.
    """
    _, body_lines, _ = _split(text)
    return body_lines


def parse_document(text: str, path: Path | None = None) -> Document:
    """Parse raw text into a Document.

    Args:
        text: Raw document text.
        path: Optional source path, kept for error reporting.

    Returns:
        Parsed Document.
    """
    header_lines, body_lines, body_lineno = _split(text)
    return Document(
        path=path,
        headers=_parse_headers(header_lines),
        body=body_lines,
        body_lineno=body_lineno,
    )


def load_document(path: Path) -> Document:
    """Read and parse the document at ``path``."""
    return parse_document(path.read_text(encoding="utf-8"), path)
