import json
import os
import sys

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest

requests = pytest.importorskip("requests")

from tiptap_migration.auditors.image_checker import (
    RateLimiter,
    check_image_url,
    check_images,
    with_retries,
    write_report,
)


class FakeResponse:
    def __init__(self, status_code, headers=None):
        self.status_code = status_code
        self.headers = headers or {}

    @property
    def ok(self):
        return self.status_code < 400


class FakeSession:
    """Returns queued responses (or raises queued exceptions) per URL."""

    def __init__(self, responses):
        self.responses = {url: list(queue) for url, queue in responses.items()}
        self.calls = []

    def head(self, url, timeout=None, allow_redirects=False):
        self.calls.append(url)
        outcome = self.responses[url].pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def test_ok_and_broken():
    session = FakeSession({"a": [FakeResponse(200)], "b": [FakeResponse(404)]})
    assert check_image_url("a", session=session)["status"] == "ok"
    broken = check_image_url("b", session=session)
    assert broken == {"url": "b", "status": "broken", "http_status": 404, "error": "HTTP 404"}
    assert session.calls == ["a", "b"]


def test_server_error_is_retried_with_backoff():
    sleeps = []
    session = FakeSession({"a": [FakeResponse(503), FakeResponse(429, {"Retry-After": "2"}), FakeResponse(200)]})
    result = check_image_url("a", session=session, sleep_fn=sleeps.append)
    assert result["status"] == "ok"
    assert sleeps == [0.5, 2.0]


def test_last_error_response_is_returned():
    session = FakeSession({"a": [FakeResponse(500)] * 3})
    result = check_image_url("a", session=session, sleep_fn=lambda s: None)
    assert result["status"] == "broken"
    assert result["http_status"] == 500
    assert len(session.calls) == 3


def test_timeout_is_unreachable():
    session = FakeSession({"a": [requests.Timeout("slow")] * 3})
    result = check_image_url("a", session=session, sleep_fn=lambda s: None)
    assert result == {"url": "a", "status": "unreachable", "http_status": None, "error": "Timeout"}


def test_network_errors_exhaust_retries():
    sleeps = []

    def fail():
        raise requests.ConnectionError("refused")

    with pytest.raises(requests.ConnectionError):
        with_retries(fail, sleep_fn=sleeps.append)
    assert sleeps == [0.5, 1.0]


def test_each_url_is_checked_once():
    session = FakeSession({"a": [FakeResponse(200)], "b": [FakeResponse(404)]})
    results = check_images(
        [("post-1", "a"), ("post-2", "a"), ("post-2", "b")],
        rpm=60000,
        session=session,
        sleep_fn=lambda s: None,
    )
    assert session.calls == ["a", "b"]
    assert [(r["source"], r["status"]) for r in results] == [
        ("post-1", "ok"),
        ("post-2", "ok"),
        ("post-2", "broken"),
    ]


def test_rate_limiter_sleeps_inside_interval():
    clock = iter([100.0, 100.0, 100.5, 101.0])
    sleeps = []
    limiter = RateLimiter(rpm=60)
    limiter.wait(time_fn=lambda: next(clock), sleep_fn=sleeps.append)
    limiter.wait(time_fn=lambda: next(clock), sleep_fn=sleeps.append)
    assert sleeps == [pytest.approx(0.5)]


def test_write_report(tmp_path):
    results = [
        {"url": "a", "status": "ok", "http_status": 200, "error": None, "source": "x"},
        {"url": "b", "status": "broken", "http_status": 404, "error": "HTTP 404", "source": "x"},
    ]
    out = write_report(results, str(tmp_path / "reports" / "image-validation.json"))
    data = json.loads(open(out, encoding="utf-8").read())
    assert data["summary"] == {"total": 2, "ok": 1, "broken": 1, "unreachable": 0}
    assert data["results"] == results
