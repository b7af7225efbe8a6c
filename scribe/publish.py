"""Site publishing for Scribe.

This module loads the site configuration and publishes every post through
its layout chain into the output directory.

Key functions:
- load_config: Loads site configuration from scribe.yaml.
- publish_site: Renders all non-draft posts into a fresh output directory.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .context import Context
from .converters import converter_for
from .frontmatter import load_document
from .layouts import LayoutChain
from .parser import TemplateError
from .render import run_shell
from .utils import ensure_clean_dir


class PublishError(Exception):
    """Error during publishing with file context.

    Attributes:
        source_path: Path to the post that was being published.
        message: Human-readable error message.
        original_error: The original exception that was caught.
    """

    def __init__(
        self,
        source_path: Path,
        message: str,
        original_error: Exception | None = None,
    ):
        self.source_path = source_path
        self.message = message
        self.original_error = original_error
        super().__init__(f"{source_path}: {message}")


DEFAULT_CONFIG = {
    "posts_dir": "posts",
    "layouts_dir": "layouts",
    "output_dir": "public",
    "converter": "",
    "default_layout": "post",
    "editor": None,
}


@dataclass
class PublishResult:
    """Result of a publish run.

    Attributes:
        published: Output files written, in processing order.
        skipped: Draft posts left out.
        output_dir: Directory the site was published into.
    """

    output_dir: Path
    published: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)


def load_config(project_root: Path) -> dict[str, Any]:
    """Load site configuration from scribe.yaml.

    Args:
        project_root: Root directory of the project.

    Returns:
        Dictionary containing configuration values, with defaults applied.
    """
    config_path = project_root / "scribe.yaml"
    config = DEFAULT_CONFIG.copy()
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
            if isinstance(loaded, dict):
                config.update(loaded)
    return config


def iter_posts(posts_dir: Path) -> list[Path]:
    """Return the post sources in ``posts_dir`` in directory-listing order."""
    if not posts_dir.is_dir():
        return []
    return sorted(p for p in posts_dir.glob("*.md") if p.is_file())


def publish_site(
    project_root: Path,
    include_drafts: bool = False,
    output_dir_override: Path | None = None,
    converter=None,
) -> PublishResult:
    """Publish every post of a project.

    Posts are processed one at a time, each with a fresh Context. Every post
    is assembled before the output directory is recreated and written, so a
    failing post leaves the previous output untouched.

    Args:
        project_root: Root directory of the project.
        include_drafts: Whether to publish posts whose ``draft`` header is set.
        output_dir_override: Optional directory to publish into instead of
            the configured output_dir.
        converter: Optional converter replacing the configured one.

    Returns:
        PublishResult listing written and skipped files.

    Raises:
        PublishError: If any post fails to render. Nothing is written.
    """
    config = load_config(project_root)
    output_dir = output_dir_override or (project_root / config["output_dir"])
    posts_dir = project_root / config["posts_dir"]
    layouts_dir = project_root / config["layouts_dir"]

    chain = LayoutChain(
        layouts_dir,
        converter or converter_for(config, cwd=project_root),
        run_command=lambda command: run_shell(command, cwd=project_root),
    )
    result = PublishResult(output_dir=output_dir)
    pages: list[tuple[Path, str]] = []
    for path in iter_posts(posts_dir):
        try:
            if not include_drafts and load_document(path).header("draft"):
                result.skipped.append(path)
                continue
            rendered = chain.assemble(path, Context())
        except TemplateError as exc:
            raise PublishError(path, _format_template_error(exc, path), exc) from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise PublishError(path, f"{type(exc).__name__}: {exc}", exc) from exc
        pages.append((path, rendered))

    ensure_clean_dir(output_dir)
    for path, rendered in pages:
        result.published.append(_write_post(output_dir, path, rendered))
    return result


def _format_template_error(exc: TemplateError, post: Path) -> str:
    """Format a template error, naming the layout when it is not the post."""
    parts = []
    if exc.path is not None and exc.path != post:
        parts.append(f"in {exc.path.name}")
    if exc.lineno is not None:
        parts.append(f"on line {exc.lineno}")
    where = " ".join(parts)
    return f"Template error {where}: {exc.message}" if where else f"Template error: {exc.message}"


def _write_post(output_dir: Path, source: Path, rendered: str) -> Path:
    """Write one rendered post and return the output path."""
    target = output_dir / f"{source.stem}.html"
    with open(target, "w", encoding="utf-8") as f:
        f.write(rendered)
    return target
