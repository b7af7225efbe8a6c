"""Template rendering for Scribe.

This module walks the node tree produced by the parser against a Context.
Rendering is strictly left to right, so loop bindings and other context
changes are visible to everything rendered after them.

Key classes:
- Renderer: Inline, conditional and loop rendering over one Context.

Key functions:
- run_shell: Default runner for ``@cmd`` lines.

``@cmd`` deliberately executes author-controlled shell text. Only standard
output is kept: standard error is discarded and a failing or missing program
renders as whatever it printed, usually nothing.
"""

from __future__ import annotations

import subprocess
from collections.abc import Callable
from pathlib import Path

from .context import ACCUMULATOR, Context
from .html_utils import escape_html
from .parser import (
    Command,
    Conditional,
    Include,
    Loop,
    Node,
    Text,
    Variable,
    parse,
)
from .protocols import CommandRunner


def run_shell(command: str, cwd: Path | None = None) -> str:
    """Run ``command`` through the shell and return its standard output.

    Args:
        command: Shell text to execute.
        cwd: Optional working directory.

    Returns:
        Captured standard output. The exit status is ignored.
    """
    try:
        result = subprocess.run(
            command,
            shell=True,
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except OSError:
        return ""
    return result.stdout or ""


def _with_ending(output: str, ending: str) -> str:
    if output and not output.endswith(("\n", "\r")):
        return output + ending
    return output


class Renderer:
    """Renders templates against a shared Context.

    Attributes:
        context: Variable environment read and written while rendering.
    """

    def __init__(
        self,
        context: Context,
        include: Callable[[str], str] | None = None,
        run_command: CommandRunner | None = None,
        accumulator_token: str | None = None,
    ):
        """Initialize the renderer.

        Args:
            context: Variable environment, shared by reference.
            include: Callback returning the assembled output of a named
                layout document. Includes render as nothing without one.
            run_command: Callback executing ``@cmd`` text; defaults to run_shell.
            accumulator_token: When set, ``{{ yield }}`` renders as this token
                so the caller can splice the child content in after conversion.
        """
        self.context = context
        self._include = include
        self._run_command = run_command or run_shell
        self.accumulator_token = accumulator_token

    def render(self, source: list[str] | str, first_lineno: int = 1) -> str:
        """Parse and render template source.

        Args:
            source: Template lines or raw template text.
            first_lineno: Source line number of the first line, for errors.

        Returns:
            Rendered text.

        Raises:
            TemplateError: If the template is malformed. Nothing is rendered
                in that case.
        """
        return self.render_nodes(parse(source, first_lineno))

    def render_nodes(self, nodes: list[Node]) -> str:
        parts: list[str] = []
        for node in nodes:
            parts.append(self.render_node(node))
        return "".join(parts)

    def render_node(self, node: Node) -> str:
        if isinstance(node, Text):
            return node.value
        if isinstance(node, Variable):
            return self.render_variable(node)
        if isinstance(node, Include):
            output = self._include(node.name) if self._include else ""
            return _with_ending(output, node.ending)
        if isinstance(node, Command):
            return _with_ending(self._run_command(node.command), node.ending)
        if isinstance(node, Conditional):
            return self.render_if(node)
        if isinstance(node, Loop):
            return self.render_for(node)
        raise TypeError(f"Unknown template node: {node!r}")

    def render_variable(self, node: Variable) -> str:
        if node.name == ACCUMULATOR and self.accumulator_token:
            return self.accumulator_token
        value = self.context.get(node.name) or ""
        # Child content is already HTML.
        if node.name == ACCUMULATOR:
            return value
        return escape_html(value)

    def render_if(self, node: Conditional) -> str:
        """Render the block body when the (possibly negated) variable is truthy."""
        holds = self.context.is_truthy(node.name)
        if node.negate:
            holds = not holds
        if not holds:
            return ""
        return self.render_nodes(node.body)

    def render_for(self, node: Loop) -> str:
        """Render the block body once per element of a pseudo-array.

        The loop variable keeps its last bound value after the loop ends.
        """
        parts: list[str] = []
        for value in self.context.sequence(node.collection):
            self.context.set(node.item, value)
            parts.append(self.render_nodes(node.body))
        return "".join(parts)
