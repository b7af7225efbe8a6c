"""Variable environment for Scribe templates.

A Context is the mutable name -> string mapping consulted by every render
stage. One Context lives for exactly one top-level layout chain: the header
fields of every document on the chain are loaded into it, so fields defined
by a page remain visible while its layouts render.

Key classes:
- Context: Variable storage with truthiness and pseudo-array helpers.
- PseudoArray: Ordered sequence stored as ``name_1``, ``name_2``, ... values.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .frontmatter import Document

# Variable holding the rendered child document while its layout renders.
ACCUMULATOR = "yield"


@dataclass(frozen=True)
class PseudoArray:
    """An ordered sequence realised as individually numbered variables.

    Attributes:
        name: Base name; element ``k`` lives in ``{name}_{k}``.
        items: Element values, in index order.
    """

    name: str
    items: tuple[str, ...]

    def __iter__(self) -> Iterator[str]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


def element_name(base: str, index: int) -> str:
    """Return the variable name holding element ``index`` (1-based) of ``base``."""
    return f"{base}_{index}"


class Context:
    """Mutable variable environment shared along one render.

    Values are always strings. Absent names read as None from ``get`` and
    render as empty strings.
    """

    def __init__(self, values: dict[str, str] | None = None):
        self._values: dict[str, str] = dict(values or {})

    def set(self, name: str, value: str) -> None:
        self._values[name] = value

    def get(self, name: str) -> str | None:
        return self._values.get(name)

    def unset(self, name: str) -> None:
        self._values.pop(name, None)

    def is_truthy(self, name: str) -> bool:
        """Return True when ``name`` is bound to a non-empty string."""
        return bool(self._values.get(name))

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def load(self, document: Document) -> None:
        """Copy every header field of ``document`` into the context.

        Existing values with the same name are overwritten.
        """
        for key, _ in document.headers:
            self.set(key, document.header(key))

    def sequence(self, base: str) -> PseudoArray:
        """Build the pseudo-array stored under ``base``.

        Elements are read from ``base_1`` upwards; the first absent index
        ends the sequence, so anything after a gap is ignored.
        """
        items: list[str] = []
        index = 1
        while True:
            value = self.get(element_name(base, index))
            if value is None:
                break
            items.append(value)
            index += 1
        return PseudoArray(base, tuple(items))
