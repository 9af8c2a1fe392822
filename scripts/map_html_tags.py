#!/usr/bin/env python3
"""
Maps every HTML tag present in the extracted posts/pages and exports a
summary (tag, count, handled) to "reports/".  Tags the converter has no rule
for are listed together with the slugs of the items that use them.

Usage:
  python scripts/map_html_tags.py \\
    --input scripts/migration/output/posts.json \\
    --output reports/html_tags_counts.csv
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Iterable, Tuple

# Allow importing tiptap_migration when run as a script
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from tiptap_migration.auditors.tag_inventory import count_tags, items_with_tag, unhandled_tags, write_counts


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Map HTML tags in legacy content.")
    parser.add_argument(
        "--input",
        action="append",
        default=None,
        help="posts.json / pages.json to scan (repeatable)",
    )
    parser.add_argument(
        "--output",
        default="reports/html_tags_counts.csv",
        help="Path of the (tag,count,handled) CSV",
    )
    return parser.parse_args()


def iter_items(paths: Iterable[Path]) -> Iterable[Tuple[str, str]]:
    """Yield (slug, content) for every entry of the given JSON files."""
    for path in paths:
        with path.open("r", encoding="utf-8") as f:
            for entry in json.load(f):
                content = entry.get("content") or ""
                if content.strip():
                    yield entry.get("slug") or str(entry.get("id")), content


def main() -> None:
    args = parse_args()
    inputs = [Path(p) for p in (args.input or ["scripts/migration/output/posts.json"])]
    for path in inputs:
        if not path.exists():
            raise SystemExit(f"Input file not found: {path}")

    items = list(iter_items(inputs))
    counts = count_tags(html for _, html in items)
    write_counts(counts, args.output)

    unhandled = unhandled_tags(counts)
    print(f"Unique tags: {len(counts)}")
    for name, n in unhandled.items():
        slugs = items_with_tag(items, name)
        print(f"  <{name}> x{n} in {len(slugs)} items: {', '.join(slugs[:5])}")
    print(f"File written: {args.output}")


if __name__ == "__main__":
    main()
