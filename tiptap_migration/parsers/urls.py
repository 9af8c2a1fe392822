"""
Legacy URL rewriting.

WordPress content points at ``/wp-content/uploads/...`` assets and old
permalinks.  The migration produced a JSON map from each legacy URL to its
new location; :class:`UrlRewriteTable` wraps that map and
:func:`rewrite_urls` applies it to a string.

WordPress also generates resized copies of every upload
(``photo-300x200.jpg``) that were never migrated.  Those are mapped back to
the original upload, or, when the original is not in the map either, to the
path the media migration would have given it.
"""

from __future__ import annotations

import json
import os
import re
from collections.abc import Mapping
from typing import Dict, Iterator, Optional, Tuple


DEFAULT_ASSET_BASE_URL = "https://pub-920c291ea0c74945936ae9819993768a.r2.dev/migration"

# Extensions WordPress generates resized variants for.
_THUMBNAIL_RE = re.compile(r"([^\"'\s<>()]+?)-\d+x\d+\.(jpg|jpeg|png|gif)\b", re.IGNORECASE)
_UPLOADS_RE = re.compile(r"/wp-content/uploads/(\d{4}/\d{2}/[^\"'\s]+)\.(?:jpg|jpeg|png|gif)$", re.IGNORECASE)


class UrlRewriteTable(Mapping):
    """
    Read-only mapping of legacy absolute URL -> migrated URL.

    ``http://`` and ``https://`` variants are distinct keys.  Keys are sorted
    once, longest first, so a short URL never shadows a longer one that
    contains it.  ``asset_base_url`` is the prefix the media migration
    uploaded originals under; it is used to synthesize URLs for uploads that
    are missing from the map.
    """

    def __init__(
        self,
        mapping: Optional[Mapping] = None,
        *,
        asset_base_url: Optional[str] = DEFAULT_ASSET_BASE_URL,
    ) -> None:
        self._map: Dict[str, str] = {
            str(k): str(v) for k, v in (mapping or {}).items() if k and v is not None
        }
        self._sorted_keys: Tuple[str, ...] = tuple(sorted(self._map, key=len, reverse=True))
        self.asset_base_url = (asset_base_url or "").rstrip("/")

    def __getitem__(self, key: str) -> str:
        return self._map[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._map)

    def __len__(self) -> int:
        return len(self._map)

    def __repr__(self) -> str:
        return f"UrlRewriteTable({len(self._map)} entries, asset_base_url={self.asset_base_url!r})"

    @property
    def sorted_keys(self) -> Tuple[str, ...]:
        return self._sorted_keys


EMPTY_TABLE = UrlRewriteTable()


def load_url_table(path: str, *, asset_base_url: Optional[str] = DEFAULT_ASSET_BASE_URL) -> UrlRewriteTable:
    """Load ``media-url-map.json`` (a flat JSON object) into a table.

    :raises FileNotFoundError: if ``path`` does not exist.
    :raises ValueError: if the file is not a JSON object.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(path)
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"URL map {path} must be a JSON object, got {type(data).__name__}")
    return UrlRewriteTable(data, asset_base_url=asset_base_url)


def _swap_scheme(url: str) -> str:
    if url.startswith("https://"):
        return "http://" + url[len("https://"):]
    if url.startswith("http://"):
        return "https://" + url[len("http://"):]
    return url


def _resolve_thumbnail(match: re.Match, table: UrlRewriteTable) -> str:
    base, ext = match.group(1), match.group(2)
    original = f"{base}.{ext}"
    for candidate in (original, _swap_scheme(original)):
        if candidate in table:
            return table[candidate]

    path_match = _UPLOADS_RE.search(original)
    if path_match and table.asset_base_url:
        return f"{table.asset_base_url}/{path_match.group(1)}.webp"
    return match.group(0)


def rewrite_urls(text: str, table: UrlRewriteTable) -> str:
    """
    Replace every legacy URL in ``text`` with its migrated counterpart.

    Exact keys are replaced first, longest key first.  Remaining resized
    upload URLs (``<base>-<W>x<H>.<ext>``) are then mapped to their original.
    """
    if not text:
        return text or ""
    result = text
    for old_url in table.sorted_keys:
        if old_url in result:
            result = result.replace(old_url, table[old_url])
    return _THUMBNAIL_RE.sub(lambda m: _resolve_thumbnail(m, table), result)
