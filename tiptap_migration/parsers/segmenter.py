"""
Block segmentation of legacy post/page HTML.

WordPress stores content as loosely formed HTML: explicit ``<p>`` blocks
mixed with bare text separated by blank lines, block comments from the
Gutenberg editor and shortcodes from plugins.  :func:`normalize_html`
removes the artifacts and :func:`segment` cuts the result into an ordered
list of :class:`RawBlockSpan` covering the whole input.
"""

from __future__ import annotations

import re
from typing import FrozenSet, List, NamedTuple, Optional, Pattern, Sequence, Tuple


TABLE = "table"
PARAGRAPH = "paragraph"
LIST = "list"
HEADING = "heading"
BLOCKQUOTE = "blockquote"
IMAGE = "image"

ALL_BLOCKS: FrozenSet[str] = frozenset({TABLE, PARAGRAPH, LIST, HEADING, BLOCKQUOTE, IMAGE})
# Posts never had tables in the legacy site; pages did.
POST_BLOCKS: FrozenSet[str] = ALL_BLOCKS - {TABLE}
PAGE_BLOCKS: FrozenSet[str] = ALL_BLOCKS

_FLAGS = re.IGNORECASE | re.DOTALL

# Order matters: on equal start positions the earlier rule wins.
BLOCK_RULES: Tuple[Tuple[str, Pattern[str]], ...] = (
    (TABLE, re.compile(r"<table\b[^>]*>.*?</table>", _FLAGS)),
    (PARAGRAPH, re.compile(r"<p\b[^>]*>.*?</p>", _FLAGS)),
    (LIST, re.compile(r"<(ul|ol)\b[^>]*>.*?</\1>", _FLAGS)),
    (HEADING, re.compile(r"<h[1-6]\b[^>]*>.*?</h[1-6]>", _FLAGS)),
    (BLOCKQUOTE, re.compile(r"<blockquote\b[^>]*>.*?</blockquote>", _FLAGS)),
    (IMAGE, re.compile(r"<a\b[^>]*>\s*<img\b[^>]*>\s*</a>", _FLAGS)),
    (IMAGE, re.compile(r"<img\b[^>]*>", _FLAGS)),
)

_GAP_SPLIT_RE = re.compile(r"\n\n+")

_ARTIFACTS: Tuple[Tuple[Pattern[str], str], ...] = (
    (re.compile(r"<!--more-->"), ""),
    (re.compile(r"<!-- wp:[^>]+-->"), ""),
    (re.compile(r"<!-- /wp:[^>]+-->"), ""),
    # [caption] wraps an image and its caption text; keep the inner HTML.
    (re.compile(r"\[caption[^\]]*\](.*?)\[/caption\]", _FLAGS), r"\1"),
    (re.compile(r"\[Best_Wordpress_Gallery[^\]]*\]", re.IGNORECASE), ""),
    (re.compile(r"\[gallery[^\]]*\]", re.IGNORECASE), ""),
    (re.compile(r"\[elementor[^\]]*\]", re.IGNORECASE), ""),
)


class RawBlockSpan(NamedTuple):
    """A slice of the normalized HTML classified as one block kind.

    ``implicit`` marks paragraph spans cut from the text between matched
    blocks; they carry bare inline HTML rather than a ``<p>`` element.
    """

    kind: str
    html: str
    start: int
    end: int
    implicit: bool = False


def normalize_html(html: Optional[str]) -> str:
    """Strip WordPress artifacts and normalize line endings.

    Idempotent: running it on its own output changes nothing.
    """
    text = (html or "").replace("\r\n", "\n").replace("\r", "\n")
    for pattern, replacement in _ARTIFACTS:
        text = pattern.sub(replacement, text)
    return text.strip()


def _gap_spans(text: str, offset: int) -> List[RawBlockSpan]:
    spans: List[RawBlockSpan] = []
    pos = 0
    for piece in _GAP_SPLIT_RE.split(text):
        start = text.find(piece, pos)
        pos = start + len(piece)
        stripped = piece.strip()
        if not stripped:
            continue
        lead = len(piece) - len(piece.lstrip())
        begin = offset + start + lead
        spans.append(RawBlockSpan(PARAGRAPH, stripped, begin, begin + len(stripped), True))
    return spans


def segment(html: str, blocks: FrozenSet[str] = ALL_BLOCKS) -> List[RawBlockSpan]:
    """
    Split already-normalized HTML into ordered block spans.

    At each scan position the earliest-starting match among the enabled
    rules is taken; ties go to the rule listed first in :data:`BLOCK_RULES`.
    Text between matches is split on blank lines into implicit paragraphs.
    """
    rules: Sequence[Tuple[str, Pattern[str]]] = [r for r in BLOCK_RULES if r[0] in blocks]
    spans: List[RawBlockSpan] = []
    # Next known match per rule; a rule is searched again only once the scan
    # has moved past its cached match.
    cached: List[Optional[re.Match]] = [None] * len(rules)
    exhausted = [False] * len(rules)
    pos = 0

    while True:
        best: Optional[re.Match] = None
        best_kind = ""
        for i, (kind, pattern) in enumerate(rules):
            if exhausted[i]:
                continue
            m = cached[i]
            if m is None or m.start() < pos:
                m = pattern.search(html, pos)
                cached[i] = m
                if m is None:
                    exhausted[i] = True
                    continue
            if best is None or m.start() < best.start():
                best, best_kind = m, kind
        if best is None:
            break
        spans.extend(_gap_spans(html[pos:best.start()], pos))
        spans.append(RawBlockSpan(best_kind, best.group(0), best.start(), best.end()))
        pos = best.end()

    spans.extend(_gap_spans(html[pos:], pos))
    return spans
