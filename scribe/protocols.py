"""Protocol definitions for Scribe.

These protocols describe the two pluggable collaborators of the layout
chain, so tests and alternative implementations can be swapped in without
touching the engine.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol, runtime_checkable


@runtime_checkable
class Converter(Protocol):
    """Protocol for turning a rendered document body into HTML."""

    @abstractmethod
    def __call__(self, text: str) -> str:
        """Convert text.

        Args:
            text: Rendered body of one document.

        Returns:
            Converted output. Implementations must not raise for bad input.
        """
        ...


@runtime_checkable
class CommandRunner(Protocol):
    """Protocol for executing ``@cmd`` lines."""

    @abstractmethod
    def __call__(self, command: str) -> str:
        """Run a command and return its standard output."""
        ...
