from __future__ import annotations

from typing import Any, Dict, List


def extract_images(document: Dict[str, Any]) -> List[Dict[str, str]]:
    """
    Collect every image in ``document`` as ``{"url", "caption"}``.

    Depth-first, in document order.  Repeated images are listed once per
    occurrence.
    """
    images: List[Dict[str, str]] = []

    def walk(node: Dict[str, Any]) -> None:
        if node.get("type") == "image":
            attrs = node.get("attrs") or {}
            images.append({"url": attrs.get("src") or "", "caption": attrs.get("alt") or ""})
        for child in node.get("content") or []:
            if isinstance(child, dict):
                walk(child)

    for node in document.get("content") or []:
        if isinstance(node, dict):
            walk(node)
    return images
