"""
Block builders: one :class:`RawBlockSpan` in, zero or more TipTap block
nodes out.  Textual content is delegated to :func:`parse_inline`.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Dict, List, Optional

from .entities import decode_entities
from .inline import parse_inline
from .segmenter import BLOCKQUOTE, HEADING, IMAGE, LIST, PARAGRAPH, TABLE, RawBlockSpan
from .tiptap_schema import (
    HEADING_LEVELS,
    blockquote,
    heading,
    image,
    list_container,
    list_item,
    paragraph,
    table,
    table_cell,
    table_row,
)
from .urls import UrlRewriteTable, rewrite_urls


Node = Dict[str, Any]

_FLAGS = re.IGNORECASE | re.DOTALL

_TAG_RE = re.compile(r"<[^>]+>")
_IMG_TAG_RE = re.compile(r"<img\b[^>]*>", _FLAGS)
# Link-wrapped images first so the anchor is consumed with its image.
_IMAGE_PIECE_RE = re.compile(r"<a\b[^>]*>\s*<img\b[^>]*>\s*</a>|<img\b[^>]*>", _FLAGS)
_LINK_HREF_RE = re.compile(r"""<a\b[^>]*?(?<![\w-])href\s*=\s*["']([^"']+)["'][^>]*>""", _FLAGS)
_IMAGE_EXT_RE = re.compile(r"\.(jpg|jpeg|png|gif|webp|bmp)$", re.IGNORECASE)

_P_INNER_RE = re.compile(r"<p\b[^>]*>(.*?)</p>", _FLAGS)
_LI_RE = re.compile(r"<li\b[^>]*>(.*?)</li>", _FLAGS)
_HEADING_RE = re.compile(r"<h([1-6])\b[^>]*>(.*?)</h[1-6]>", _FLAGS)
_BLOCKQUOTE_RE = re.compile(r"<blockquote\b[^>]*>(.*?)</blockquote>", _FLAGS)
_TR_RE = re.compile(r"<tr\b[^>]*>(.*?)</tr>", _FLAGS)
_CELL_RE = re.compile(r"<(th|td)\b[^>]*>(.*?)</\1>", _FLAGS)


def _attr(tag: str, name: str) -> Optional[str]:
    m = re.search(r"""(?<![\w-])%s\s*=\s*["']([^"']*)["']""" % name, tag, re.IGNORECASE)
    return m.group(1) if m else None


def parse_image_tag(img_tag: str, table: UrlRewriteTable) -> Optional[Dict[str, str]]:
    """Extract ``src`` (rewritten), ``alt`` and ``title`` (decoded) from an
    ``<img>`` tag.  Returns ``None`` when there is no usable src."""
    src = _attr(img_tag, "src")
    if not src:
        return None
    return {
        "src": rewrite_urls(src, table),
        "alt": decode_entities(_attr(img_tag, "alt") or ""),
        "title": decode_entities(_attr(img_tag, "title") or ""),
    }


def _image_from_html(fragment: str, table: UrlRewriteTable) -> Optional[Node]:
    img = _IMG_TAG_RE.search(fragment)
    if img is None:
        return None
    attrs = parse_image_tag(img.group(0), table)
    if attrs is None:
        return None
    # A link around a thumbnail usually points at the full-size original.
    link = _LINK_HREF_RE.match(fragment.lstrip())
    if link:
        href = rewrite_urls(link.group(1), table)
        if _IMAGE_EXT_RE.search(href):
            attrs["src"] = href
    return image(attrs["src"], attrs["alt"], attrs["title"])


def _has_content(nodes: List[Node]) -> bool:
    return any(n.get("type") == "text" and n["text"].strip() for n in nodes)


def build_paragraph(span: RawBlockSpan, table: UrlRewriteTable) -> List[Node]:
    """Build a paragraph span.  A ``<p>`` mixing text and images yields
    several nodes: text paragraphs and image nodes interleaved in source
    order."""
    if span.implicit:
        inline = parse_inline(span.html, table)
        return [paragraph(inline)] if inline else []

    m = _P_INNER_RE.match(span.html)
    inner = m.group(1).strip() if m else ""
    if not _IMG_TAG_RE.search(inner):
        return [paragraph(parse_inline(inner, table))]

    nodes: List[Node] = []
    pos = 0
    for piece in _IMAGE_PIECE_RE.finditer(inner):
        inline = parse_inline(inner[pos:piece.start()].strip(), table)
        if _has_content(inline):
            nodes.append(paragraph(inline))
        node = _image_from_html(piece.group(0), table)
        if node is not None:
            nodes.append(node)
        pos = piece.end()
    inline = parse_inline(inner[pos:].strip(), table)
    if _has_content(inline):
        nodes.append(paragraph(inline))
    return nodes


def build_list(span: RawBlockSpan, table: UrlRewriteTable) -> List[Node]:
    ordered = span.html[1:3].lower() == "ol"
    items = [
        list_item([paragraph(parse_inline(li.group(1).strip(), table))])
        for li in _LI_RE.finditer(span.html)
    ]
    if not items:
        return []
    return [list_container(ordered, items)]


def build_heading(span: RawBlockSpan, table: UrlRewriteTable) -> List[Node]:
    m = _HEADING_RE.match(span.html)
    if m is None:
        return []
    level = min(max(int(m.group(1)), HEADING_LEVELS[0]), HEADING_LEVELS[-1])
    return [heading(level, parse_inline(m.group(2).strip(), table))]


def build_blockquote(span: RawBlockSpan, table: UrlRewriteTable) -> List[Node]:
    m = _BLOCKQUOTE_RE.match(span.html)
    inner = m.group(1) if m else ""
    # Quotes are flattened to plain text; inner formatting is not kept.
    plain = _TAG_RE.sub("", inner).strip()
    return [blockquote([paragraph(parse_inline(plain, table))])]


def build_table(span: RawBlockSpan, table_map: UrlRewriteTable) -> List[Node]:
    rows: List[Node] = []
    for tr in _TR_RE.finditer(span.html):
        cells: List[Node] = []
        for cell in _CELL_RE.finditer(tr.group(1)):
            text = _TAG_RE.sub(" ", cell.group(2)).strip()
            cells.append(
                table_cell(
                    [paragraph(parse_inline(text, table_map))],
                    header=cell.group(1).lower() == "th",
                )
            )
        if cells:
            rows.append(table_row(cells))
    if not rows:
        return []
    return [table(rows)]


def build_image(span: RawBlockSpan, table: UrlRewriteTable) -> List[Node]:
    node = _image_from_html(span.html, table)
    return [node] if node is not None else []


BUILDERS: Dict[str, Callable[[RawBlockSpan, UrlRewriteTable], List[Node]]] = {
    TABLE: build_table,
    PARAGRAPH: build_paragraph,
    LIST: build_list,
    HEADING: build_heading,
    BLOCKQUOTE: build_blockquote,
    IMAGE: build_image,
}


def build_block(span: RawBlockSpan, table: UrlRewriteTable) -> List[Node]:
    """Dispatch ``span`` to the builder for its kind."""
    return BUILDERS[span.kind](span, table)
