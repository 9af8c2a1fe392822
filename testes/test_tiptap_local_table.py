import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from tiptap_migration.parsers import PAGE_BLOCKS, convert_html_to_tiptap


def cell(kind, text):
    return {"type": kind, "content": [{"type": "paragraph", "content": [{"type": "text", "text": text}]}]}


def test_table_with_header_row():
    html = (
        "<table><thead><tr><th>Ime</th><th>Tel</th></tr></thead>"
        "<tbody><tr><td><strong>Ured</strong></td><td>042 &amp; 043</td></tr></tbody></table>"
    )
    doc = convert_html_to_tiptap(html, blocks=PAGE_BLOCKS)
    assert doc["content"] == [
        {
            "type": "table",
            "content": [
                {"type": "tableRow", "content": [cell("tableHeader", "Ime"), cell("tableHeader", "Tel")]},
                {"type": "tableRow", "content": [cell("tableCell", "Ured"), cell("tableCell", "042 & 043")]},
            ],
        }
    ]


def test_cell_markup_is_reduced_to_text():
    html = "<table><tr><td><p>Radno vrijeme:</p><p>8-16</p></td></tr></table>"
    doc = convert_html_to_tiptap(html, blocks=PAGE_BLOCKS)
    text = doc["content"][0]["content"][0]["content"][0]["content"][0]["content"][0]["text"]
    assert text == "Radno vrijeme:  8-16"


def test_table_without_rows_is_omitted():
    doc = convert_html_to_tiptap("<p>Prije</p><table>\n</table><p>Poslije</p>", blocks=PAGE_BLOCKS)
    assert [n["type"] for n in doc["content"]] == ["paragraph", "paragraph"]


def test_rows_without_cells_are_skipped():
    doc = convert_html_to_tiptap("<table><tr></tr><tr><td>x</td></tr></table>", blocks=PAGE_BLOCKS)
    assert len(doc["content"][0]["content"]) == 1


def test_text_around_table_is_kept_in_order():
    html = "Uvod\n\n<table><tr><td>x</td></tr></table>\n\nKraj"
    doc = convert_html_to_tiptap(html, blocks=PAGE_BLOCKS)
    assert [n["type"] for n in doc["content"]] == ["paragraph", "table", "paragraph"]
