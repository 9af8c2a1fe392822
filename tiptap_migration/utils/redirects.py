"""
Generation of redirect rules for the new site.

:func:`build_redirect_rules` turns the legacy URL map written by the
WordPress extractor (old permalink -> new path) into 301 rules.
:func:`write_redirects_file` writes them in the static host's ``_redirects``
format and :func:`generate_redirects_csv` writes the same mapping as CSV for
review.
"""

from __future__ import annotations

import csv
import os
from typing import Dict, List, Tuple
from urllib.parse import urlparse


def build_redirect_rules(url_map: Dict[str, str]) -> Tuple[List[Tuple[str, str]], int]:
    """Return ``([(old_path, new_path), ...], skipped_count)``.

    The homepage, empty paths and paths that already equal their target are
    skipped.  Trailing slashes are removed from the old path.
    """
    rules: List[Tuple[str, str]] = []
    skipped = 0
    for old_url, new_path in url_map.items():
        parsed = urlparse(old_url)
        old_path = parsed.path if parsed.scheme and parsed.netloc else old_url
        if old_path == "/":
            skipped += 1
            continue
        normalized = old_path[:-1] if old_path.endswith("/") else old_path
        if not normalized or normalized == new_path:
            skipped += 1
            continue
        rules.append((normalized, new_path))
    return rules, skipped


def write_redirects_file(url_map: Dict[str, str], out_path: str) -> int:
    """Write a ``_redirects`` file and return the number of rules written."""
    rules, _ = build_redirect_rules(url_map)
    lines = [
        "# WordPress URL Redirects",
        "# Generated automatically from url-map.json",
        "# Format: /old-path /new-path 301",
        "",
    ]
    lines.extend(f"{old} {new} 301" for old, new in rules)
    lines.append("")
    lines.append(f"# Total redirects: {len(rules)}")
    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        f.write("\n".join(lines) + "\n")
    return len(rules)


def generate_redirects_csv(
    url_map: Dict[str, str], *, new_base: str = "", out_path: str = "reports/redirect_map.csv"
) -> str:
    """Generate a CSV mapping old WordPress URLs to new site URLs.

    Parameters
    ----------
    url_map:
        Old permalink -> new path, as produced by the extractor.
    new_base:
        Base URL of the new site, prefixed to relative targets.  Leave empty
        to keep paths relative.
    out_path:
        Location of the CSV file to be written.  The parent directory is
        created automatically.

    Returns
    -------
    str
        The path of the generated CSV file.
    """
    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    with open(out_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["OldURL", "NewURL"])
        for old_url, new_path in url_map.items():
            new_url = f"{new_base.rstrip('/')}{new_path}" if new_base and new_path.startswith("/") else new_path
            writer.writerow([old_url, new_url])
    return out_path
