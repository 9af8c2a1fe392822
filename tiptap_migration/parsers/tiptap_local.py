from __future__ import annotations

from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from .assets import extract_images
from .blocks import build_block
from .segmenter import ALL_BLOCKS, normalize_html, segment
from .tiptap_schema import doc, validate_tiptap
from .urls import EMPTY_TABLE, UrlRewriteTable


def convert_html_to_tiptap(
    html: Optional[str],
    table: Optional[UrlRewriteTable] = None,
    *,
    blocks: FrozenSet[str] = ALL_BLOCKS,
) -> Dict[str, Any]:
    """
    Convert legacy WordPress HTML to a TipTap document without any I/O.

    Covered:
    - Paragraphs (explicit ``<p>`` and blank-line separated text), headings,
      bullet/ordered lists, blockquotes, tables (when ``TABLE`` is in
      ``blocks``), images and link-wrapped images.
    - Inline bold, italic, underline, links and line breaks.
    - URLs in ``src``/``href`` are rewritten through ``table``.

    The result always has at least one block; empty input gives one empty
    paragraph.
    """
    table = table if table is not None else EMPTY_TABLE
    normalized = normalize_html(html)
    if not normalized:
        return doc([])

    nodes: List[Dict[str, Any]] = []
    for span in segment(normalized, blocks):
        nodes.extend(build_block(span, table))
    return validate_tiptap(doc(nodes))


def convert_content(
    html: Optional[str],
    table: Optional[UrlRewriteTable] = None,
    *,
    blocks: FrozenSet[str] = ALL_BLOCKS,
) -> Tuple[Dict[str, Any], List[Dict[str, str]]]:
    """Convert ``html`` and return ``(document, image_manifest)``."""
    document = convert_html_to_tiptap(html, table, blocks=blocks)
    return document, extract_images(document)
