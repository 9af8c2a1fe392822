"""
Inline content parser.

Walks an HTML fragment tag by tag and returns a flat list of ``text`` and
``hardBreak`` nodes.  Formatting tags are resolved by recursion: the inner
fragment is parsed first and the tag's mark is then added to every text
node it produced, so nested tags accumulate marks.

The parser never fails.  Unknown tags and stray closing tags are dropped
while the text around them is kept; an opening tag without its closing tag
is dropped and parsing continues after it.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Pattern

from .entities import decode_entities
from .tiptap_schema import hard_break, link_mark, mark, text_node
from .urls import EMPTY_TABLE, UrlRewriteTable, rewrite_urls


Node = Dict[str, Any]

_NEXT_TAG_RE = re.compile(r"(.*?)<(/?)(\w+)([^>]*)>", re.DOTALL)
_HREF_RE = re.compile(r"""href=["']([^"']+)["']""", re.IGNORECASE)
_IMG_RE = re.compile(r"<img\b", re.IGNORECASE)

_CLOSERS: Dict[str, Pattern[str]] = {
    "a": re.compile(r"(.*?)</a\s*>", re.DOTALL | re.IGNORECASE),
    "strong": re.compile(r"(.*?)</(?:strong|b)\s*>", re.DOTALL | re.IGNORECASE),
    "b": re.compile(r"(.*?)</(?:strong|b)\s*>", re.DOTALL | re.IGNORECASE),
    "em": re.compile(r"(.*?)</(?:em|i)\s*>", re.DOTALL | re.IGNORECASE),
    "i": re.compile(r"(.*?)</(?:em|i)\s*>", re.DOTALL | re.IGNORECASE),
    "u": re.compile(r"(.*?)</u\s*>", re.DOTALL | re.IGNORECASE),
    "span": re.compile(r"(.*?)</span\s*>", re.DOTALL | re.IGNORECASE),
}

_TAG_MARKS: Dict[str, str] = {
    "strong": "bold",
    "b": "bold",
    "em": "italic",
    "i": "italic",
    "u": "underline",
}


def _with_mark(nodes: List[Node], new_mark: Dict[str, Any]) -> List[Node]:
    """Return ``nodes`` with ``new_mark`` appended to every text node that
    does not already carry a mark of that type."""
    out: List[Node] = []
    for node in nodes:
        if node.get("type") != "text":
            out.append(node)
            continue
        marks = list(node.get("marks") or [])
        if all(m.get("type") != new_mark["type"] for m in marks):
            marks.append(dict(new_mark))
        out.append(text_node(node["text"], marks))
    return out


def _push_text(nodes: List[Node], raw: str) -> None:
    text = decode_entities(raw)
    if text:
        nodes.append(text_node(text))


def parse_inline(html: Optional[str], table: UrlRewriteTable = EMPTY_TABLE) -> List[Node]:
    """Parse an inline HTML fragment into text/hardBreak nodes.

    Link hrefs are passed through :func:`rewrite_urls` with ``table``.
    Images are skipped here; the block builders turn them into image nodes.
    """
    nodes: List[Node] = []
    if not html or not html.strip():
        return nodes

    remaining = html
    while remaining:
        m = _NEXT_TAG_RE.match(remaining)
        if m is None:
            if remaining.strip():
                _push_text(nodes, remaining)
            break

        before, closing, tag, attrs = m.group(1), m.group(2), m.group(3).lower(), m.group(4)
        if before:
            _push_text(nodes, before)
        remaining = remaining[m.end():]

        if tag == "br":
            nodes.append(hard_break())
            continue
        if closing or tag not in _CLOSERS:
            # img, stray closing tags and unknown tags: drop the tag itself
            continue

        close = _CLOSERS[tag].match(remaining)
        if close is None:
            continue
        inner = close.group(1)
        remaining = remaining[close.end():]

        if tag == "a":
            if _IMG_RE.search(inner):
                continue
            href_match = _HREF_RE.search(attrs)
            href = rewrite_urls(href_match.group(1), table) if href_match else "#"
            nodes.extend(_with_mark(parse_inline(inner, table), link_mark(href)))
        elif tag == "span":
            nodes.extend(parse_inline(inner, table))
        else:
            nodes.extend(_with_mark(parse_inline(inner, table), mark(_TAG_MARKS[tag])))

    return nodes
