"""Utility functions for Scribe.

Key functions:
    slugify: Convert a post title to a URL slug.
    draft_filename: Date-prefixed filename for a new post.
    draft_skeleton: Front matter for a new draft post.
    ensure_clean_dir: Ensure a directory exists and is empty.
"""

from __future__ import annotations

import re
import shutil
from datetime import datetime
from pathlib import Path


def slugify(title: str) -> str:
    """Convert a title to a slug.

    Args:
        title: Human-readable title.

    Returns:
        Lowercase slug with runs of other characters collapsed to hyphens.

    Examples:
        >>> slugify("Hello, World!")
        'hello-world'

        >>> slugify("???")
        'untitled'
    """
    cleaned = re.sub(r"[^a-zA-Z0-9]+", "-", title)
    cleaned = cleaned.strip("-").lower()
    return cleaned or "untitled"


def draft_filename(title: str, when: datetime) -> str:
    """Return the ``YYYY-MM-DD-slug.md`` filename for a new post."""
    return f"{when.strftime('%Y-%m-%d')}-{slugify(title)}.md"


def draft_skeleton(title: str, when: datetime, layout: str = "") -> str:
    """Return the initial text of a new draft post.

    Args:
        title: Post title.
        when: Creation time, written as the post date.
        layout: Layout name to wrap the post in; omitted when empty.

    Returns:
        Document text with a header section marked as a draft and an
        empty body.
    """
    lines = ["---", f"title: {title}", f"date: {when.strftime('%Y-%m-%d')}"]
    if layout:
        lines.append(f"layout: {layout}")
    lines.extend(["draft: true", "---", ""])
    return "\n".join(lines) + "\n"


def ensure_clean_dir(path: Path) -> None:
    """Ensure a directory exists and is empty.

    If the directory exists, removes all contents. Creates the
    directory if it doesn't exist.

    Args:
        path: Directory path to clean or create.
    """
    if path.exists():
        shutil.rmtree(str(path), ignore_errors=True)
        if path.exists():
            # Fallback for stubborn directories
            for item in path.rglob("*"):
                if item.is_file():
                    item.unlink()
            for item in sorted(
                [p for p in path.rglob("*") if p.is_dir()], reverse=True
            ):
                item.rmdir()
            path.rmdir()
    path.mkdir(parents=True, exist_ok=True)
