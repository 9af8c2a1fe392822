import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from tiptap_migration.parsers import UrlRewriteTable, convert_content, convert_html_to_tiptap, extract_images
from tiptap_migration.parsers.blocks import parse_image_tag
from tiptap_migration.parsers.urls import EMPTY_TABLE

UPLOADS = "https://velikibukovec.hr/wp-content/uploads"


def test_bare_image_with_rewritten_src():
    table = UrlRewriteTable({f"{UPLOADS}/2020/01/a.jpg": "https://cdn/a.webp"})
    doc = convert_html_to_tiptap(f'<img src="{UPLOADS}/2020/01/a.jpg" alt="Vrtić &amp; škola" title="T">', table)
    assert doc["content"] == [
        {"type": "image", "attrs": {"src": "https://cdn/a.webp", "alt": "Vrtić & škola", "title": "T"}}
    ]


def test_thumbnail_src_is_mapped_to_original():
    table = UrlRewriteTable({f"{UPLOADS}/2020/01/a.jpg": "https://cdn/a.webp"})
    doc = convert_html_to_tiptap(f'<p><img src="{UPLOADS}/2020/01/a-300x200.jpg"></p>', table)
    assert doc["content"][0]["attrs"]["src"] == "https://cdn/a.webp"


def test_link_to_full_size_image_replaces_thumbnail():
    html = '<a href="http://x/full.png"><img src="http://x/thumb.png" alt="A"></a>'
    doc = convert_html_to_tiptap(html)
    assert doc["content"] == [{"type": "image", "attrs": {"src": "http://x/full.png", "alt": "A", "title": ""}}]


def test_link_to_page_keeps_image_src():
    html = '<a href="https://example.com/page"><img src="http://x/thumb.png"></a>'
    doc = convert_html_to_tiptap(html)
    assert doc["content"][0]["attrs"]["src"] == "http://x/thumb.png"


def test_paragraph_is_split_around_images_in_order():
    doc = convert_html_to_tiptap('<p>Before <img src="http://x/a.png" alt="A"> after</p>')
    assert [n["type"] for n in doc["content"]] == ["paragraph", "image", "paragraph"]
    assert doc["content"][0]["content"] == [{"type": "text", "text": "Before"}]
    assert doc["content"][2]["content"] == [{"type": "text", "text": "after"}]


def test_paragraph_with_only_images():
    doc = convert_html_to_tiptap('<p><img src="http://x/a.png"> <img src="http://x/b.png"></p>')
    assert [n["attrs"]["src"] for n in doc["content"]] == ["http://x/a.png", "http://x/b.png"]


def test_image_without_src_is_dropped():
    doc = convert_html_to_tiptap('<p>Tekst</p><img alt="nothing">')
    assert [n["type"] for n in doc["content"]] == ["paragraph"]


def test_caption_shortcode_keeps_image_and_text():
    html = '[caption id="attachment_5" width="300"]<img src="http://x/a.png" alt="A"> Opis[/caption]'
    doc = convert_html_to_tiptap(html)
    assert [n["type"] for n in doc["content"]] == ["image", "paragraph"]
    assert doc["content"][1]["content"] == [{"type": "text", "text": "Opis"}]


def test_parse_image_tag_ignores_data_src():
    attrs = parse_image_tag('<img data-src="lazy.jpg" src="real.jpg">', EMPTY_TABLE)
    assert attrs["src"] == "real.jpg"
    assert parse_image_tag('<img data-src="lazy.jpg">', EMPTY_TABLE) is None


def test_convert_content_returns_image_manifest():
    html = '<p><img src="http://x/a.png" alt="Prvi"></p><ul><li>x</li></ul><img src="http://x/b.png">'
    doc, images = convert_content(html)
    assert images == [
        {"url": "http://x/a.png", "caption": "Prvi"},
        {"url": "http://x/b.png", "caption": ""},
    ]
    assert extract_images(doc) == images


def test_extract_images_walks_nested_nodes():
    doc = {
        "type": "doc",
        "content": [
            {"type": "blockquote", "content": [{"type": "image", "attrs": {"src": "a", "alt": "x"}}]},
            {"type": "image", "attrs": {"src": "b"}},
            {"type": "image", "attrs": {"src": "a", "alt": "x"}},
        ],
    }
    assert extract_images(doc) == [
        {"url": "a", "caption": "x"},
        {"url": "b", "caption": ""},
        {"url": "a", "caption": "x"},
    ]


def test_document_without_images_has_empty_manifest():
    assert convert_content("<p>bez slika</p>")[1] == []
