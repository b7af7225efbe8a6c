from scribe.context import ACCUMULATOR, Context, PseudoArray, element_name
from scribe.frontmatter import parse_document


def test_set_get_and_truthiness():
    ctx = Context()
    assert ctx.get("title") is None
    assert not ctx.is_truthy("title")

    ctx.set("title", "")
    assert "title" in ctx
    assert not ctx.is_truthy("title")

    ctx.set("title", "0")
    assert ctx.is_truthy("title")
    assert ctx.get("title") == "0"


def test_load_overwrites_existing_values():
    ctx = Context({"title": "Old", "author": "Jane"})
    ctx.load(parse_document("---\ntitle:  New \ndraft:\n---\n"))
    assert ctx.get("title") == "New"
    assert ctx.get("author") == "Jane"
    assert ctx.get("draft") == ""


def test_sequence_stops_at_first_gap():
    ctx = Context({"tags_1": "a", "tags_2": "b", "tags_4": "d"})
    seq = ctx.sequence("tags")
    assert seq == PseudoArray("tags", ("a", "b"))
    assert list(seq) == ["a", "b"]
    assert len(seq) == 2
    assert len(ctx.sequence("missing")) == 0


def test_accumulator_name_is_a_valid_identifier():
    assert ACCUMULATOR == "yield"
    ctx = Context()
    ctx.set(ACCUMULATOR, "<p>child</p>")
    assert ctx.get("yield") == "<p>child</p>"
    assert ctx.is_truthy(ACCUMULATOR)
