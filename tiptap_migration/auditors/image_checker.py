"""
Validation of migrated image URLs.

After conversion every post/page carries an image manifest.  This module
sends a ``HEAD`` request for each URL to confirm the migrated asset exists.
Requests are spaced by a simple rate limiter (the object store throttles
bursts, which would show up as false positives) and retried on 429/5xx
responses with exponential backoff.

Usage example::

    from tiptap_migration.auditors.image_checker import check_images

    results = check_images([("novi-vrtic", "https://cdn.example/a.webp")])
    broken = [r for r in results if r["status"] != "ok"]
"""

from __future__ import annotations

import json
import os
import time
from typing import Callable, Dict, Iterable, List, Optional, Tuple

import requests

###############################################################################
# Rate limiting and retry utilities
###############################################################################

class RateLimiter:
    """
    Simple time-based rate limiter.  Ensures that no more than ``rpm``
    requests are dispatched per minute.
    """

    def __init__(self, rpm: int = 600) -> None:
        self.rpm = max(1, rpm)
        self.interval = 60.0 / float(self.rpm)
        self._last = 0.0

    def wait(self, time_fn: Callable[[], float] = time.time, sleep_fn: Callable[[float], None] = time.sleep) -> None:
        now = time_fn()
        dt = now - self._last
        if dt < self.interval:
            sleep_fn(self.interval - dt)
        self._last = time_fn()


def with_retries(
    fn: Callable[[], requests.Response],
    *,
    max_attempts: int = 3,
    base_delay: float = 0.5,
    sleep_fn: Callable[[float], None] = time.sleep,
) -> requests.Response:
    """
    Execute a function returning a ``requests.Response``, retrying on
    transient errors.  Retries are attempted on status codes 429 and 5xx
    and on network errors, with exponential backoff (or ``Retry-After``).

    Unlike a plain ``raise_for_status`` wrapper, a final non-retryable
    error response (e.g. 404) is returned to the caller, which classifies it.

    :raises requests.RequestException: if every attempt failed at the
        network level.
    """
    attempt = 0
    while True:
        try:
            resp = fn()
        except requests.RequestException:
            if attempt >= max_attempts - 1:
                raise
            sleep_fn(base_delay * (2 ** attempt))
            attempt += 1
            continue
        if resp.status_code not in (429, 500, 502, 503, 504) or attempt >= max_attempts - 1:
            return resp
        retry_after = resp.headers.get("Retry-After")
        try:
            wait = float(retry_after) if retry_after else base_delay * (2 ** attempt)
        except ValueError:
            wait = base_delay * (2 ** attempt)
        sleep_fn(wait)
        attempt += 1


###############################################################################
# URL checks
###############################################################################

def check_image_url(
    url: str,
    *,
    session: Optional[requests.Session] = None,
    timeout: float = 10.0,
    limiter: Optional[RateLimiter] = None,
    sleep_fn: Callable[[float], None] = time.sleep,
) -> Dict[str, object]:
    """
    ``HEAD`` one URL.  Returns ``{"url", "status", "http_status", "error"}``
    where ``status`` is ``ok``, ``broken`` or ``unreachable``.
    """
    http = session or requests

    def do_request() -> requests.Response:
        if limiter is not None:
            limiter.wait()
        return http.head(url, timeout=timeout, allow_redirects=True)

    try:
        resp = with_retries(do_request, sleep_fn=sleep_fn)
    except requests.Timeout:
        return {"url": url, "status": "unreachable", "http_status": None, "error": "Timeout"}
    except requests.RequestException as e:
        return {"url": url, "status": "unreachable", "http_status": None, "error": str(e)}

    if resp.ok:
        return {"url": url, "status": "ok", "http_status": resp.status_code, "error": None}
    return {
        "url": url,
        "status": "broken",
        "http_status": resp.status_code,
        "error": f"HTTP {resp.status_code}",
    }


def check_images(
    entries: Iterable[Tuple[str, str]],
    *,
    rpm: int = 600,
    timeout: float = 10.0,
    session: Optional[requests.Session] = None,
    sleep_fn: Callable[[float], None] = time.sleep,
) -> List[Dict[str, object]]:
    """
    Check ``(source_slug, url)`` pairs.  Each URL is requested once even if
    it appears in several documents; the result is repeated per source.
    """
    limiter = RateLimiter(rpm)
    own_session = session is None
    http = session or requests.Session()
    cache: Dict[str, Dict[str, object]] = {}
    results: List[Dict[str, object]] = []
    try:
        for source, url in entries:
            if url not in cache:
                cache[url] = check_image_url(
                    url, session=http, timeout=timeout, limiter=limiter, sleep_fn=sleep_fn
                )
            results.append({**cache[url], "source": source})
    finally:
        if own_session:
            http.close()
    return results


def write_report(results: List[Dict[str, object]], out_path: str) -> str:
    """Write the results with a small summary header as JSON."""
    summary = {
        "total": len(results),
        "ok": sum(1 for r in results if r["status"] == "ok"),
        "broken": sum(1 for r in results if r["status"] == "broken"),
        "unreachable": sum(1 for r in results if r["status"] == "unreachable"),
    }
    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump({"summary": summary, "results": results}, f, ensure_ascii=False, indent=2)
    return out_path
