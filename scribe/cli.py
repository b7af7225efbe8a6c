"""Command-line interface for Scribe.

This module defines the CLI commands using Click framework.

Commands:
- draft: Create a new draft post with a date-prefixed, slugified filename.
- publish: Publish every non-draft post into the output directory.

Running without a command, or with an unknown one, prints usage and exits
with a non-zero status.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import click
import questionary

from . import __version__
from .publish import PublishError, load_config, publish_site
from .utils import draft_filename, draft_skeleton


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="scribe")
@click.pass_context
def cli(ctx: click.Context):
    """Scribe blog publisher."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_usage(), err=True)
        ctx.exit(2)


@cli.command()
@click.argument("title", required=False)
@click.option("--edit", is_flag=True, help="Open the new post in an editor")
def draft(title: str | None, edit: bool):
    """Create a new draft post."""
    project_root = Path.cwd()
    config = load_config(project_root)

    if not title:
        title = questionary.text(
            "Post title:",
            validate=lambda x: len(x.strip()) > 0 or "Title cannot be empty",
            style=_questionary_style(),
        ).ask()
        if title is None:
            raise click.Abort()
    title = title.strip()
    if not title:
        raise click.UsageError("Title cannot be empty")

    now = datetime.now()
    posts_dir = project_root / config["posts_dir"]
    target_path = posts_dir / draft_filename(title, now)
    if target_path.exists():
        raise click.ClickException(
            f"File already exists: {_relative(target_path, project_root)}"
        )

    posts_dir.mkdir(parents=True, exist_ok=True)
    layout = str(config.get("default_layout") or "")
    target_path.write_text(draft_skeleton(title, now, layout), encoding="utf-8")
    click.echo(f"Created {_relative(target_path, project_root)}")

    if edit:
        click.edit(filename=str(target_path), editor=config.get("editor") or None)


@cli.command()
@click.option("--drafts", is_flag=True, help="Include draft posts")
@click.option(
    "--output",
    type=click.Path(file_okay=False, path_type=Path),
    required=False,
    help="Directory to publish into (overrides scribe.yaml output_dir)",
)
@click.pass_context
def publish(ctx: click.Context, drafts: bool, output: Path | None):
    """Publish every non-draft post into the output directory."""
    project_root = Path.cwd()
    try:
        result = publish_site(
            project_root, include_drafts=drafts, output_dir_override=output
        )
    except PublishError as exc:
        rel_path = _relative(exc.source_path, project_root)
        click.echo(click.style("Publish failed:", fg="red", bold=True), err=True)
        click.echo(click.style(f"  File: {rel_path}", fg="yellow"), err=True)
        click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)
        click.echo(ctx.find_root().get_usage(), err=True)
        raise SystemExit(1) from None

    click.echo(f"Published {len(result.published)} posts into {result.output_dir}")
    if result.skipped:
        click.echo(f"Skipped {len(result.skipped)} drafts")


def _relative(path: Path, root: Path) -> Path:
    """Return ``path`` relative to ``root`` when it lies inside it."""
    try:
        return path.relative_to(root)
    except ValueError:
        return path


def _questionary_style():
    """Return consistent questionary style."""
    return questionary.Style(
        [
            ("qmark", "fg:cyan bold"),
            ("question", "bold"),
            ("answer", "fg:cyan"),
        ]
    )


def main():
    """Entry point for the CLI application."""
    cli()
