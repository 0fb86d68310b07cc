from __future__ import annotations

import json

import pytest
import requests

from svckit.infrastructure.http_client import check_url, wait_for_url
from svckit.infrastructure.retry import RetryPolicy


def _make_response(status_code: int, payload: dict | None = None) -> requests.Response:
    r = requests.Response()
    r.status_code = status_code
    r.url = "http://example.test"
    if payload is None:
        payload = {}
    r._content = json.dumps(payload).encode("utf-8")  # type: ignore[attr-defined]
    r.headers["Content-Type"] = "application/json"
    return r


def test_check_url_ok(monkeypatch):
    monkeypatch.setattr(requests, "get", lambda *args, **kwargs: _make_response(200, {"ok": True}))

    result = check_url("http://example.test/health", timeout=1)

    assert result.is_ok
    assert result.value.json() == {"ok": True}


def test_check_url_error_status(monkeypatch):
    monkeypatch.setattr(requests, "get", lambda *args, **kwargs: _make_response(503))

    result = check_url("http://example.test/health", timeout=1)

    assert result.is_err
    assert "HTTP 503" in result.error


def test_check_url_network_error(monkeypatch):
    def fake_get(*args, **kwargs):
        raise requests.exceptions.ConnectionError("refused")

    monkeypatch.setattr(requests, "get", fake_get)

    result = check_url("http://example.test/health", timeout=1)

    assert result.is_err
    assert "unreachable" in result.error


def test_check_url_passes_timeout(monkeypatch):
    seen = {}

    def fake_get(url, timeout):
        seen["timeout"] = timeout
        return _make_response(204)

    monkeypatch.setattr(requests, "get", fake_get)

    assert check_url("http://example.test", timeout=2.5).is_ok
    assert seen["timeout"] == 2.5


def test_wait_for_url_retries_until_up(monkeypatch):
    calls = {"n": 0}
    sleeps = []

    def fake_get(*args, **kwargs):
        calls["n"] += 1
        if calls["n"] < 3:
            return _make_response(500, {"error": "boom"})
        return _make_response(200, {"ok": True})

    monkeypatch.setattr(requests, "get", fake_get)

    result = wait_for_url(
        "http://example.test",
        RetryPolicy(max_attempts=5, delay=0.25),
        timeout=1,
        sleep=sleeps.append,
    )

    assert result.is_ok
    assert calls["n"] == 3
    assert sleeps == pytest.approx([0.25, 0.25])


def test_wait_for_url_gives_up(monkeypatch, caplog):
    calls = {"n": 0}

    def fake_get(*args, **kwargs):
        calls["n"] += 1
        return _make_response(502)

    monkeypatch.setattr(requests, "get", fake_get)

    result = wait_for_url(
        "http://example.test",
        RetryPolicy(max_attempts=2, delay=0),
        timeout=1,
        sleep=lambda _: None,
    )

    assert result.is_err
    assert "HTTP 502" in result.error
    assert calls["n"] == 2
    assert "attempt 2/2" in caplog.text
