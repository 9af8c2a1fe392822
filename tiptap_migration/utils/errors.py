"""
Structured logging helpers for conversion problems and successes.

The :mod:`tiptap_migration.utils.errors` module centralizes the writing of
log entries for both failed and successful operations during the migration.
Each entry is appended to a JSON Lines file under ``reports/migration`` so
that the information can be reviewed or parsed after a run.

Two public functions are provided:

``report_error``
    Record an error or warning for a post or page.  An optional exception
    can be supplied and will be serialized to the log.

``report_ok``
    Record a successful step for an item.  Additional key/value information
    can be attached to the entry via the ``extra`` parameter.

The ``ERRORS`` dictionary maps event codes to human readable messages.
Codes not present in the dictionary fall back to the code itself.
"""

from __future__ import annotations

import json
import os
import threading
from typing import Any, Dict, Optional

# Event codes used throughout the migration.  The same lookup serves
# :func:`report_error` and :func:`report_ok`.
ERRORS: Dict[str, str] = {
    "CONVERSION_FAILED": "Failed to convert HTML content",
    "NO_IMAGES": "Content has <img> tags but no images were extracted",
    "EMPTY_CONTENT": "Converted document has no text or images",
    "URL_MAP_MISSING": "Media URL map not found, URLs will not be replaced",
    "IMAGE_BROKEN": "Image URL returned an error status",
    "IMAGE_UNREACHABLE": "Image URL could not be reached",
    "CONVERTED": "Content converted successfully",
    "IMAGE_OK": "Image URL is reachable",
}

REPORT_DIR = os.path.join("reports", "migration")
_ERROR_LOG = "errors.jsonl"
_OK_LOG = "success.jsonl"

# Items are converted on a thread pool; appends must not interleave.
_lock = threading.Lock()


def _write_jsonl(name: str, data: Dict[str, Any]) -> None:
    """Append ``data`` as a JSON object followed by a newline to ``name``."""
    with _lock:
        os.makedirs(REPORT_DIR, exist_ok=True)
        with open(os.path.join(REPORT_DIR, name), "a", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
            f.write("\n")


def _entry(code: str, item: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "code": code,
        "message": ERRORS.get(code, code),
        "slug": item.get("slug"),
        "title": item.get("title"),
    }


def report_error(code: str, item: Dict[str, Any], exc: Optional[BaseException] = None) -> None:
    """Log an error event for ``item``.

    Parameters
    ----------
    code:
        A key identifying the type of error.  If ``code`` is present in
        :data:`ERRORS` its value will be used as the message.
    item:
        The post/page (or image) dictionary associated with the error.  Only
        the ``slug`` and ``title`` keys are referenced if present.
    exc:
        Optional exception instance that triggered the error.  The string
        representation of the exception will be included in the log entry.
    """
    entry = _entry(code, item)
    if exc is not None:
        entry["error"] = str(exc)
    print(f"[ERROR] {entry['message']} - {item.get('slug') or ''}")
    _write_jsonl(_ERROR_LOG, entry)


def report_ok(code: str, item: Dict[str, Any], extra: Optional[Dict[str, Any]] = None) -> None:
    """Log a successful event for ``item``.

    ``extra`` is merged into the log entry.
    """
    entry = _entry(code, item)
    if extra:
        entry.update(extra)
    _write_jsonl(_OK_LOG, entry)
