from pathlib import Path

import pytest

from scribe.context import Context
from scribe.converters import MarkdownConverter
from scribe.layouts import LayoutChain
from scribe.parser import TemplateError


def identity(text):
    return text


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def layouts(tmp_path):
    return tmp_path / "layouts"


def test_two_level_chain_embeds_child_output(tmp_path, layouts):
    write(layouts / "base.md", "---\n---\n<html>\n{{ yield }}</html>\n")
    post = write(tmp_path / "post.md", "---\nlayout: base\n---\nHello world\n")

    out = LayoutChain(layouts, identity).assemble(post)
    assert out == "<html>\nHello world\n</html>\n"


def test_child_fields_visible_to_layout_unless_redefined(tmp_path, layouts):
    write(
        layouts / "base.md",
        "---\nsite: Home\n---\n<title>{{ title }} | {{ site }}</title>\n{{ yield }}",
    )
    post = write(
        tmp_path / "post.md",
        "---\ntitle: First & Best\nsite: Ignored\nlayout: base\n---\nHi {{ title }}\n",
    )
    ctx = Context()
    out = LayoutChain(layouts, identity).assemble(post, ctx)
    assert out == "<title>First &amp; Best | Home</title>\nHi First &amp; Best\n"
    assert ctx.get("site") == "Home"
    assert ctx.get("yield") == out


def test_advancement_uses_the_processed_documents_layout(tmp_path, layouts):
    """The child's layout field stays in the context but must not re-enter base."""
    write(layouts / "base.md", "---\ntitle: Base\n---\n[{{ yield }}]")
    post = write(tmp_path / "post.md", "---\nlayout: base\n---\npost")
    assert LayoutChain(layouts, identity).assemble(post) == "[post]"


def test_three_level_chain_and_converter_per_step(tmp_path, layouts):
    write(layouts / "post.md", "---\nlayout: base\n---\n<article>{{ yield }}</article>")
    write(layouts / "base.md", "---\n---\n<body>{{ yield }}</body>")
    post = write(tmp_path / "entry.md", "---\nlayout: post\n---\ntext")

    steps = []

    def converter(text):
        steps.append(text)
        return text.upper()

    out = LayoutChain(layouts, converter).assemble(post)
    assert len(steps) == 3
    assert steps[0] == "text"
    # layouts are converted before the child content is put in
    assert all("TEXT" not in step for step in steps[1:])
    assert out == "<BODY><ARTICLE>TEXT</ARTICLE></BODY>"


def test_missing_layout_ends_chain(tmp_path, layouts):
    post = write(tmp_path / "post.md", "---\nlayout: nowhere\n---\nalone\n")
    assert LayoutChain(layouts, identity).assemble(post) == "alone\n"


def test_missing_start_document_renders_nothing(tmp_path, layouts):
    assert LayoutChain(layouts, identity).assemble(tmp_path / "nope.md") == ""
    assert LayoutChain(layouts, identity).assemble(None) == ""


def test_layout_cycle_is_an_error(tmp_path, layouts):
    write(layouts / "a.md", "---\nlayout: b\n---\na")
    write(layouts / "b.md", "---\nlayout: a\n---\nb")
    post = write(tmp_path / "post.md", "---\nlayout: a\n---\npost")
    with pytest.raises(TemplateError, match="loops back"):
        LayoutChain(layouts, identity).assemble(post)


def test_include_shares_context_and_restores_accumulator(tmp_path, layouts):
    write(layouts / "footer.md", "---\n---\nby {{ author }}\n")
    write(layouts / "base.md", "---\n---\n@include footer\n{{ yield }}")
    post = write(
        tmp_path / "post.md",
        "---\nauthor: Jane\nlayout: base\n---\nbody\n@include footer\n",
    )
    out = LayoutChain(layouts, identity).assemble(post)
    assert out == "by Jane\nbody\nby Jane\n"


def test_included_document_follows_its_own_layout(tmp_path, layouts):
    write(layouts / "box.md", "---\n---\n<div>{{ yield }}</div>")
    write(layouts / "note.md", "---\nlayout: box\n---\nnote")
    post = write(tmp_path / "post.md", "---\n---\n@include note\nend\n")
    assert LayoutChain(layouts, identity).assemble(post) == "<div>note</div>\nend\n"


def test_missing_include_renders_nothing(tmp_path, layouts):
    post = write(tmp_path / "post.md", "---\n---\nbefore\n@include ghost\nafter\n")
    assert LayoutChain(layouts, identity).assemble(post) == "before\nafter\n"


def test_recursive_include_is_an_error(tmp_path, layouts):
    write(layouts / "loop.md", "---\n---\n@include loop\n")
    post = write(tmp_path / "post.md", "---\n---\n@include loop\n")
    with pytest.raises(TemplateError, match="includes itself"):
        LayoutChain(layouts, identity).assemble(post)


def test_template_error_names_the_failing_layout(tmp_path, layouts):
    base = write(layouts / "base.md", "---\n---\nok\n@end\n")
    post = write(tmp_path / "post.md", "---\nlayout: base\n---\nfine\n")
    with pytest.raises(TemplateError) as excinfo:
        LayoutChain(layouts, identity).assemble(post)
    assert excinfo.value.path == base
    assert excinfo.value.lineno == 4


def test_commands_go_through_configured_runner(tmp_path, layouts):
    post = write(tmp_path / "post.md", "---\n---\n@cmd whoami\n")
    chain = LayoutChain(layouts, identity, run_command=lambda c: f"<{c}>")
    assert chain.assemble(post) == "<whoami>\n"


CODE_POST = "---\nlayout: base\n---\n```{lang}\ndef f():\n    x = 1\n\n    return x\n```\n"


@pytest.mark.parametrize("lang", ["", "python"])
def test_markdown_child_html_is_not_converted_twice(tmp_path, layouts, lang):
    write(layouts / "base.md", "---\n---\n<html>\n<body>\n{{ yield }}\n</body>\n</html>\n")
    post = write(tmp_path / "post.md", CODE_POST.format(lang=lang))
    converter = MarkdownConverter()

    child = converter("```{lang}\ndef f():\n    x = 1\n\n    return x\n```\n".format(lang=lang))
    out = LayoutChain(layouts, converter).assemble(post)

    assert child in out
    assert out.startswith("<html>\n<body>\n")
    assert out.count("<pre") == 1
    assert "<p></" not in out
    assert "&lt;" not in out


def test_markdown_layout_paragraph_around_child_is_dropped(tmp_path, layouts):
    write(layouts / "base.md", "---\n---\n# Site\n\n{{ yield }}\n\nFooter\n")
    post = write(tmp_path / "post.md", "---\nlayout: base\n---\n- one\n- two\n")
    converter = MarkdownConverter()

    out = LayoutChain(layouts, converter).assemble(post)
    assert "<h1>Site</h1>" in out
    assert converter("- one\n- two\n") in out
    assert "<p><ul>" not in out
    assert "<p>Footer</p>" in out
