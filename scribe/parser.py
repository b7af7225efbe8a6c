"""Template parsing for Scribe.

Templates are line oriented. A directive occupies a whole line; every other
line is text in which ``{{ name }}`` placeholders are substituted.

Directives:
    @if name / @if !name      conditional block, closed by @end
    @for item in collection   loop over a pseudo-array, closed by @end
    @include name             assembled output of a layout document
    @cmd shell text           standard output of a shell command

Parsing produces a tree of nodes that is validated as a whole before any of
it is rendered, so a stray ``@end`` or a malformed directive fails the
document without running commands or producing output.

Key functions:
- scan_block: Locate the first top-level block in a run of lines.
- parse_line: Split a non-block line into nodes.
- parse: Build the node tree for a run of lines.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

IF_RE = re.compile(r"^@if (!?)([a-z_]+)$")
FOR_RE = re.compile(r"^@for ([a-z_]+) in ([a-z_]+)$")
INCLUDE_RE = re.compile(r"^@include (\S+)$")
VARIABLE_RE = re.compile(r"\{\{ ([a-z_]+) \}\}")

CMD_PREFIX = "@cmd "
END = "@end"
OPENERS = {"@if": "if", "@for": "for"}


class TemplateError(Exception):
    """Malformed template.

    Attributes:
        message: Human-readable description of the problem.
        lineno: 1-based line number in the source file, when known.
        path: Source file, filled in by the layout chain.
    """

    def __init__(
        self, message: str, lineno: int | None = None, path: Path | None = None
    ):
        self.message = message
        self.lineno = lineno
        self.path = path
        super().__init__(message)

    def __str__(self) -> str:
        where = ""
        if self.path is not None:
            where = f"{self.path}:"
        if self.lineno is not None:
            where = f"{where}{self.lineno}:"
        return f"{where} {self.message}" if where else self.message


@dataclass
class Block:
    """Position of a top-level block within a run of lines.

    Attributes:
        kind: "if" or "for".
        start: Index of the opening directive line.
        end: Index of the matching @end line.
    """

    kind: str
    start: int
    end: int


@dataclass
class Text:
    value: str


@dataclass
class Variable:
    name: str


@dataclass
class Include:
    name: str
    ending: str = ""


@dataclass
class Command:
    command: str
    ending: str = ""


@dataclass
class Conditional:
    name: str
    negate: bool = False
    body: list[Node] = field(default_factory=list)


@dataclass
class Loop:
    item: str
    collection: str
    body: list[Node] = field(default_factory=list)


Node = Union[Text, Variable, Include, Command, Conditional, Loop]


def _directive(line: str) -> str:
    return line.rstrip()


def _ending(line: str) -> str:
    return line[len(line.rstrip("\r\n")) :]


def _opener(line: str) -> str | None:
    word = _directive(line).split(" ", 1)[0]
    return OPENERS.get(word)


def scan_block(lines: list[str], first_lineno: int = 1) -> Block | None:
    """Find the first top-level block in ``lines``.

    Nesting is tracked with a counter, so inner blocks of either kind do not
    end the outer block early.

    Args:
        lines: Lines to scan.
        first_lineno: Source line number of ``lines[0]``, for errors.

    Returns:
        The Block, or None when the lines contain no block directive.

    Raises:
        TemplateError: On an @end with no open block, or a block left open.
    """
    depth = 0
    kind = ""
    start = 0
    for index, line in enumerate(lines):
        opener = _opener(line)
        if opener is not None:
            if depth == 0:
                kind, start = opener, index
            depth += 1
        elif _directive(line) == END:
            if depth == 0:
                raise TemplateError("@end without an open block", first_lineno + index)
            depth -= 1
            if depth == 0:
                return Block(kind, start, index)
    if depth:
        raise TemplateError(f"@{kind} block is never closed", first_lineno + start)
    return None


def parse_line(line: str) -> list[Node]:
    """Split one line that is not part of a block header into nodes."""
    directive = _directive(line)
    match = INCLUDE_RE.match(directive)
    if match:
        return [Include(match.group(1), _ending(line))]
    if directive.startswith(CMD_PREFIX):
        return [Command(directive[len(CMD_PREFIX) :], _ending(line))]

    nodes: list[Node] = []
    pos = 0
    for match in VARIABLE_RE.finditer(line):
        if match.start() > pos:
            nodes.append(Text(line[pos : match.start()]))
        nodes.append(Variable(match.group(1)))
        pos = match.end()
    if pos < len(line):
        nodes.append(Text(line[pos:]))
    return nodes


def _parse_block(kind: str, lines: list[str], lineno: int) -> Node:
    head = _directive(lines[0])
    if kind == "if":
        match = IF_RE.match(head)
        if not match:
            raise TemplateError(f"malformed directive {head!r}, expected '@if [!]name'", lineno)
        body = parse(lines[1:-1], lineno + 1)
        return Conditional(match.group(2), match.group(1) == "!", body)

    match = FOR_RE.match(head)
    if not match:
        raise TemplateError(
            f"malformed directive {head!r}, expected '@for item in collection'", lineno
        )
    body = parse(lines[1:-1], lineno + 1)
    return Loop(match.group(1), match.group(2), body)


def parse(lines: list[str] | str, first_lineno: int = 1) -> list[Node]:
    """Parse template lines into a node tree.

    Lines before the first top-level block become inline nodes, the block is
    parsed recursively, and parsing continues after its @end.

    Args:
        lines: Template lines (keeping their line endings) or raw text.
        first_lineno: Source line number of the first line, for errors.

    Returns:
        List of top-level nodes.

    Raises:
        TemplateError: If the template is malformed anywhere.
    """
    if isinstance(lines, str):
        lines = lines.splitlines(keepends=True)

    nodes: list[Node] = []
    offset = 0
    while True:
        rest = lines[offset:]
        block = scan_block(rest, first_lineno + offset)
        inline = rest if block is None else rest[: block.start]
        for line in inline:
            nodes.extend(parse_line(line))
        if block is None:
            return nodes
        nodes.append(
            _parse_block(
                block.kind,
                rest[block.start : block.end + 1],
                first_lineno + offset + block.start,
            )
        )
        offset += block.end + 1
