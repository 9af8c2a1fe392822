from __future__ import annotations

import re
from typing import Dict


# Named entities found in the legacy export. Anything else is left untouched.
_NAMED: Dict[str, str] = {
    "nbsp": " ",
    "amp": "&",
    "lt": "<",
    "gt": ">",
    "quot": '"',
    "#39": "'",
    "ndash": "-",
    "mdash": "-",
    "hellip": "...",
    "laquo": '"',
    "raquo": '"',
}

_ENTITY_RE = re.compile(r"&(nbsp|amp|lt|gt|quot|#39|ndash|mdash|hellip|laquo|raquo|#\d+);")


def _replace(match: re.Match) -> str:
    name = match.group(1)
    if name in _NAMED:
        return _NAMED[name]
    try:
        code = int(name[1:])
    except ValueError:
        return match.group(0)
    if code <= 0 or code > 0x10FFFF or 0xD800 <= code <= 0xDFFF:
        return match.group(0)
    return chr(code)


def decode_entities(text: str) -> str:
    """
    Decode the HTML entities used by the legacy WordPress content.

    Single left-to-right pass, so ``&amp;lt;`` becomes ``&lt;`` and is not
    decoded a second time. Unknown or malformed entities pass through.
    """
    if not text or "&" not in text:
        return text or ""
    return _ENTITY_RE.sub(_replace, text)
