import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest

from tiptap_migration.parsers.tiptap_schema import (
    doc,
    heading,
    image,
    link_mark,
    paragraph,
    table_cell,
    text_node,
    validate_tiptap,
)


@pytest.mark.parametrize("level", [0, 1, 5, 6])
def test_heading_rejects_levels_outside_range(level):
    with pytest.raises(ValueError):
        heading(level, [text_node("x")])


def test_builders_shape():
    assert paragraph() == {"type": "paragraph", "content": []}
    assert text_node("x") == {"type": "text", "text": "x"}
    assert text_node("x", []) == {"type": "text", "text": "x"}
    assert image("a.webp") == {"type": "image", "attrs": {"src": "a.webp", "alt": "", "title": ""}}
    assert table_cell([paragraph()], header=True)["type"] == "tableHeader"
    assert link_mark("/x") == {"type": "link", "attrs": {"href": "/x", "target": "_blank"}}
    assert doc() == {"type": "doc", "content": [{"type": "paragraph", "content": []}]}


def test_validate_wraps_inline_and_drops_garbage():
    raw = {
        "type": "doc",
        "content": [
            {"type": "text", "text": "x"},
            {"type": "text", "text": ""},
            "junk",
            {"type": "weird"},
            {"type": "paragraph", "content": [{"type": "text", "text": ""}, {"type": "text", "text": "y"}]},
        ],
    }
    assert validate_tiptap(raw) == {
        "type": "doc",
        "content": [
            {"type": "paragraph", "content": [{"type": "text", "text": "x"}]},
            {"type": "paragraph", "content": [{"type": "text", "text": "y"}]},
        ],
    }


def test_validate_removes_empty_text_deep_inside():
    raw = doc([
        {
            "type": "bulletList",
            "content": [{"type": "listItem", "content": [paragraph([text_node("")])]}],
        }
    ])
    fixed = validate_tiptap(raw)
    assert fixed["content"][0]["content"][0]["content"][0] == {"type": "paragraph", "content": []}


@pytest.mark.parametrize("bad", [None, "doc", {"type": "doc"}, {"type": "doc", "content": []}])
def test_validate_never_returns_empty_document(bad):
    assert validate_tiptap(bad) == doc([])
