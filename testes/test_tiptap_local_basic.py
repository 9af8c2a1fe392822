import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest

from tiptap_migration.parsers import POST_BLOCKS, convert_html_to_tiptap

EMPTY_DOC = {"type": "doc", "content": [{"type": "paragraph", "content": []}]}


def nodes_of_type(doc, t):
    return [n for n in doc.get("content", []) if n.get("type") == t]


def test_paragraph_with_bold():
    doc = convert_html_to_tiptap("<p>Hello <strong>world</strong></p>")
    assert doc == {
        "type": "doc",
        "content": [
            {
                "type": "paragraph",
                "content": [
                    {"type": "text", "text": "Hello "},
                    {"type": "text", "text": "world", "marks": [{"type": "bold"}]},
                ],
            }
        ],
    }


def test_marks_innermost_first():
    doc = convert_html_to_tiptap("<p><strong><em>x</em></strong></p>")
    text = doc["content"][0]["content"][0]
    assert text["marks"] == [{"type": "italic"}, {"type": "bold"}]


@pytest.mark.parametrize("html", ["", None, "   \n\n  ", "<!--more-->", "[gallery ids=\"1\"]"])
def test_empty_input_gives_one_empty_paragraph(html):
    assert convert_html_to_tiptap(html) == EMPTY_DOC


def test_explicit_empty_paragraph_is_kept():
    doc = convert_html_to_tiptap("<p>a</p><p></p><p>b</p>")
    assert [n["content"] for n in doc["content"]][1] == []
    assert len(doc["content"]) == 3


def test_blank_line_text_becomes_paragraphs():
    doc = convert_html_to_tiptap("Prvi red\n\nDrugi <b>red</b>")
    ps = nodes_of_type(doc, "paragraph")
    assert len(ps) == 2
    assert ps[0]["content"] == [{"type": "text", "text": "Prvi red"}]
    assert ps[1]["content"][1]["marks"] == [{"type": "bold"}]


@pytest.mark.parametrize("tag,level", [("h1", 2), ("h2", 2), ("h3", 3), ("h4", 4), ("h5", 4), ("h6", 4)])
def test_heading_levels_are_clamped(tag, level):
    doc = convert_html_to_tiptap(f"<{tag}>Naslov</{tag}>")
    h = doc["content"][0]
    assert h["type"] == "heading"
    assert h["attrs"] == {"level": level}
    assert h["content"] == [{"type": "text", "text": "Naslov"}]


def test_lists():
    doc = convert_html_to_tiptap('<ul><li>Jedan</li><li><a href="/x">Dva</a></li></ul><ol><li>1</li></ol>')
    bullet, ordered = doc["content"]
    assert bullet["type"] == "bulletList"
    assert ordered["type"] == "orderedList"
    assert [i["type"] for i in bullet["content"]] == ["listItem", "listItem"]
    second = bullet["content"][1]["content"][0]
    assert second["type"] == "paragraph"
    assert second["content"][0]["marks"][0]["type"] == "link"


def test_empty_list_is_omitted():
    doc = convert_html_to_tiptap("<ul>\n</ul><p>x</p>")
    assert [n["type"] for n in doc["content"]] == ["paragraph"]


def test_blockquote_is_flattened_to_text():
    doc = convert_html_to_tiptap("<blockquote><p>Citat <em>važan</em></p></blockquote>")
    assert doc["content"] == [
        {
            "type": "blockquote",
            "content": [{"type": "paragraph", "content": [{"type": "text", "text": "Citat važan"}]}],
        }
    ]


def test_links_are_rewritten_in_paragraphs():
    from tiptap_migration.parsers import UrlRewriteTable

    table = UrlRewriteTable({"https://velikibukovec.hr/?p=12": "/vijesti/novi-vrtic"})
    doc = convert_html_to_tiptap('<p>Vidi <a href="https://velikibukovec.hr/?p=12">ovdje</a></p>', table)
    link = doc["content"][0]["content"][1]["marks"][0]
    assert link == {"type": "link", "attrs": {"href": "/vijesti/novi-vrtic", "target": "_blank"}}


@pytest.mark.parametrize(
    "html",
    [
        "<<<>>> </p> <p <div",
        "<p>unclosed <strong>bold",
        "<ul><li>a<li>b</ul>",
        "<table><tr><td>x",
        "</a></b></i>",
        "<img>",
        "&#0; &#xZZ; &",
        "\x00\xff<\x01p>",
        "\ufffd\x1b[31m<p>\x7f</p>\x00",
        "<p" * 5000,
        "<a href='x'>" * 2000,
        "<strong><em>" * 500 + "x",
    ],
)
def test_conversion_never_fails_and_yields_blocks(html):
    doc = convert_html_to_tiptap(html)
    assert doc["type"] == "doc"
    assert doc["content"]
    for node in doc["content"]:
        assert isinstance(node, dict) and node["type"]


def test_post_blocks_keep_table_text_as_paragraph():
    html = "<table><tr><td><strong>Ured</strong></td></tr></table>"
    doc = convert_html_to_tiptap(html, blocks=POST_BLOCKS)
    assert not nodes_of_type(doc, "table")
    assert doc["content"][0]["type"] == "paragraph"
    assert doc["content"][0]["content"][0]["marks"] == [{"type": "bold"}]


def test_end_to_end_paragraph_and_list():
    from tiptap_migration.parsers import UrlRewriteTable

    html = (
        '<p>Tekst s <strong>podebljano</strong> i <a href="http://old.site/p">linkom</a>.</p>'
        "<ul><li>Prvo</li><li>Drugo</li></ul>"
    )
    doc = convert_html_to_tiptap(html, UrlRewriteTable({"http://old.site/p": "/new/p"}))
    paragraph, bullet = doc["content"]
    assert paragraph["content"] == [
        {"type": "text", "text": "Tekst s "},
        {"type": "text", "text": "podebljano", "marks": [{"type": "bold"}]},
        {"type": "text", "text": " i "},
        {"type": "text", "text": "linkom", "marks": [{"type": "link", "attrs": {"href": "/new/p", "target": "_blank"}}]},
        {"type": "text", "text": "."},
    ]
    assert bullet["type"] == "bulletList"
    assert [item["content"][0]["content"][0]["text"] for item in bullet["content"]] == ["Prvo", "Drugo"]


def test_image_link_becomes_single_image():
    doc = convert_html_to_tiptap('<a href="full.jpg"><img src="thumb.jpg" alt="x"></a>')
    assert doc["content"] == [{"type": "image", "attrs": {"src": "full.jpg", "alt": "x", "title": ""}}]


def test_table_without_cells_is_omitted():
    doc = convert_html_to_tiptap("<table><tr></tr></table>")
    assert not nodes_of_type(doc, "table")
    assert doc == EMPTY_DOC


def test_empty_list_item_keeps_empty_paragraph():
    doc = convert_html_to_tiptap("<ol><li></li><li>b</li></ol>")
    items = doc["content"][0]["content"]
    assert items[0] == {"type": "listItem", "content": [{"type": "paragraph", "content": []}]}


def test_words_around_formatting_stay_separated():
    doc = convert_html_to_tiptap(
        "<p>Hello <strong>world</strong> today</p><ul><li><em>Datum:</em> 5. svibnja</li></ul>"
    )
    paragraph, bullet = doc["content"]
    assert "".join(n["text"] for n in paragraph["content"]) == "Hello world today"
    item = bullet["content"][0]["content"][0]["content"]
    assert "".join(n["text"] for n in item) == "Datum: 5. svibnja"
