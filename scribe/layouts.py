"""Layout chain assembly for Scribe.

A document names its parent with the ``layout`` header. Assembling a
document renders it, converts the result, stores it in the ``yield``
variable and moves on to the parent layout, until a document has no parent
or the parent does not exist. The last converted output is the page.

All documents on the chain share one Context, so a layout can read the
fields of the page it wraps unless it redefines them.

Key class:
- LayoutChain: Assembles documents and resolves ``@include`` lines.
"""

from __future__ import annotations

import re
import uuid
from collections.abc import Callable
from functools import partial
from pathlib import Path

from .context import ACCUMULATOR, Context
from .frontmatter import load_document
from .parser import TemplateError
from .protocols import CommandRunner, Converter
from .render import Renderer, run_shell


class LayoutChain:
    """Assembles documents through their chain of layouts.

    Attributes:
        layouts_dir: Directory holding layout documents (``<name>.md``).
        converter: Callable turning a rendered body into HTML.
        run_command: Callable executing ``@cmd`` lines.
    """

    def __init__(
        self,
        layouts_dir: Path,
        converter: Converter | Callable[[str], str],
        run_command: CommandRunner | None = None,
    ):
        self.layouts_dir = layouts_dir
        self.converter = converter
        self.run_command = run_command or run_shell
        self._including: list[Path] = []

    def layout_path(self, name: str) -> Path | None:
        """Return the path of layout ``name``, or None for an empty name."""
        name = name.strip()
        if not name:
            return None
        return self.layouts_dir / f"{name}.md"

    def assemble(self, path: Path | None, context: Context | None = None) -> str:
        """Render ``path`` and every layout above it.

        Args:
            path: Starting document. A missing file produces no output.
            context: Variable environment to use; a fresh one by default.

        Returns:
            The converted output of the last document on the chain.

        Raises:
            TemplateError: If any document on the chain is malformed, or the
                chain loops back onto a document it already rendered.
        """
        if context is None:
            context = Context()
        token = f"scribeyield{uuid.uuid4().hex}"
        renderer = Renderer(
            context,
            include=partial(self.include, context=context),
            run_command=self.run_command,
            accumulator_token=token,
        )

        accumulator = ""
        visited: set[Path] = set()
        current = path
        while current is not None and current.is_file():
            key = current.resolve()
            if key in visited:
                raise TemplateError(f"layout chain loops back to {current}", path=current)
            visited.add(key)

            document = load_document(current)
            context.load(document)
            try:
                rendered = renderer.render(document.body, document.body_lineno)
            except TemplateError as exc:
                if exc.path is None:
                    exc.path = current
                raise
            # Child content is already converted; it goes in after conversion.
            accumulator = _splice(
                self.converter(rendered), token, context.get(ACCUMULATOR) or ""
            )
            context.set(ACCUMULATOR, accumulator)
            current = self.layout_path(document.header("layout"))
        return accumulator

    def include(self, name: str, context: Context) -> str:
        """Assemble layout ``name`` for an ``@include`` line.

        The included chain shares ``context``; the accumulator of the
        including document is restored afterwards.
        """
        path = self.layout_path(name)
        if path is None:
            return ""
        key = path.resolve()
        if key in self._including:
            raise TemplateError(f"@include {name} includes itself")

        saved = context.get(ACCUMULATOR)
        self._including.append(key)
        try:
            return self.assemble(path, context)
        finally:
            self._including.pop()
            if saved is None:
                context.unset(ACCUMULATOR)
            else:
                context.set(ACCUMULATOR, saved)


def _splice(converted: str, token: str, child: str) -> str:
    """Replace ``token`` in converter output with the child content.

    A token left alone in a paragraph is replaced together with the
    paragraph tags. Matching ignores case so filters that change case keep
    the token recognisable.
    """
    pattern = re.compile(
        rf"<p>\s*{re.escape(token)}\s*</p>|{re.escape(token)}", re.IGNORECASE
    )
    return pattern.sub(lambda match: child, converted)
