"""
Inventory of HTML tags present in legacy content.

Counts every tag in the ``content`` field of the extracted posts/pages so
that tags the converter drops silently (anything it has no rule for) can be
spotted before a migration run.
"""

from __future__ import annotations

import csv
import os
from collections import Counter
from typing import Dict, Iterable, List, Tuple

from bs4 import BeautifulSoup

# Tags with an explicit rule in the block segmenter or the inline parser.
HANDLED_TAGS = frozenset(
    {
        "p", "ul", "ol", "li", "h1", "h2", "h3", "h4", "h5", "h6", "blockquote",
        "table", "thead", "tbody", "tr", "th", "td", "img", "a", "br",
        "strong", "b", "em", "i", "u", "span",
    }
)


def count_tags(html_iter: Iterable[str]) -> Counter:
    """Count tag names across all HTML strings."""
    counter: Counter = Counter()
    for html in html_iter:
        if not html or not html.strip():
            continue
        soup = BeautifulSoup(html, "html.parser")
        for tag in soup.find_all(True):
            if tag.name:
                counter[tag.name.lower()] += 1
    return counter


def unhandled_tags(counter: Counter) -> Dict[str, int]:
    """Tags the converter has no rule for, most frequent first."""
    return {name: n for name, n in counter.most_common() if name not in HANDLED_TAGS}


def items_with_tag(items: Iterable[Tuple[str, str]], tag_name: str) -> List[str]:
    """Slugs of ``(slug, html)`` items whose HTML contains ``tag_name``."""
    found: List[str] = []
    for slug, html in items:
        if html and BeautifulSoup(html, "html.parser").find(tag_name) is not None:
            found.append(slug)
    return found


def write_counts(counter: Counter, out_path: str) -> str:
    """Write ``tag,count,handled`` rows sorted by descending count."""
    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    with open(out_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["tag", "count", "handled"])
        for name, n in counter.most_common():
            writer.writerow([name, n, "yes" if name in HANDLED_TAGS else "no"])
    return out_path
