from __future__ import annotations

from typing import Any, Dict, List, Optional


HEADING_LEVELS = (2, 3, 4)

BLOCK_TYPES = frozenset(
    {"paragraph", "heading", "bulletList", "orderedList", "blockquote", "table", "image"}
)
INLINE_TYPES = frozenset({"text", "hardBreak"})


# --- Builders for TipTap (ProseMirror JSON) nodes ---

def doc(nodes: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    return {"type": "doc", "content": nodes or [paragraph()]}


def paragraph(inline_nodes: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    return {"type": "paragraph", "content": list(inline_nodes or [])}


def heading(level: int, inline_nodes: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    if level not in HEADING_LEVELS:
        raise ValueError(f"heading level must be one of {HEADING_LEVELS}, got {level!r}")
    return {"type": "heading", "attrs": {"level": level}, "content": list(inline_nodes or [])}


def blockquote(nodes: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"type": "blockquote", "content": nodes}


def list_container(ordered: bool, items: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"type": "orderedList" if ordered else "bulletList", "content": items}


def list_item(nodes: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"type": "listItem", "content": nodes}


def table(rows: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"type": "table", "content": rows}


def table_row(cells: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"type": "tableRow", "content": cells}


def table_cell(nodes: List[Dict[str, Any]], *, header: bool = False) -> Dict[str, Any]:
    return {"type": "tableHeader" if header else "tableCell", "content": nodes}


def image(src: str, alt: str = "", title: str = "") -> Dict[str, Any]:
    return {"type": "image", "attrs": {"src": src, "alt": alt or "", "title": title or ""}}


def text_node(text: str, marks: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    node: Dict[str, Any] = {"type": "text", "text": text or ""}
    if marks:
        node["marks"] = marks
    return node


def hard_break() -> Dict[str, Any]:
    return {"type": "hardBreak"}


def mark(mark_type: str, attrs: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    m: Dict[str, Any] = {"type": mark_type}
    if attrs:
        m["attrs"] = attrs
    return m


def link_mark(href: str, target: str = "_blank") -> Dict[str, Any]:
    return mark("link", {"href": href, "target": target})


# --- Minimal validator/normalizer ---

def validate_tiptap(document: Dict[str, Any]) -> Dict[str, Any]:
    """
    Ensure the document follows basic TipTap expectations.
    - Root is a ``doc`` with a non-empty ``content`` list.
    - Stray inline nodes at the root are wrapped in a paragraph.
    - Empty text nodes are removed (ProseMirror rejects them).
    """
    content = document.get("content") if isinstance(document, dict) else None
    if not isinstance(content, list):
        return doc([])

    fixed: List[Dict[str, Any]] = []
    for node in content:
        if not isinstance(node, dict):
            continue
        t = node.get("type")
        if t in INLINE_TYPES:
            if t == "text" and not node.get("text"):
                continue
            fixed.append(paragraph([node]))
        elif t in BLOCK_TYPES:
            fixed.append(_drop_empty_text(node))
    return doc(fixed)


def _drop_empty_text(node: Dict[str, Any]) -> Dict[str, Any]:
    children = node.get("content")
    if not isinstance(children, list):
        return node
    kept = [
        _drop_empty_text(c)
        for c in children
        if isinstance(c, dict) and not (c.get("type") == "text" and not c.get("text"))
    ]
    return {**node, "content": kept}
