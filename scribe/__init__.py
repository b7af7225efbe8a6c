"""Scribe blog publisher.

This package renders Markdown posts through a small line-oriented template
language and a chain of parent layouts, then writes the finished pages into
an output directory.

The main entry point is the CLI module, which provides commands for drafting
new posts and publishing every non-draft post.

Architecture, leaves first:
- frontmatter: splits a document into header fields and body lines
- context: the variable environment shared along one layout chain
- parser: block scanner and template tree
- render: walks the tree against a context
- layouts: assembles a document through its layout chain
- publish: configuration loading and the publish pipeline
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
