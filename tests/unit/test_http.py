from __future__ import annotations

import pytest
import requests

from spaceops.common.http import HttpClient, HttpRequestError, RetryConfig, RetryableHttpError


class FakeResponse:
    def __init__(self, status_code: int, payload=None, raises_json: bool = False):
        self.status_code = status_code
        self._payload = payload
        self._raises_json = raises_json

    def json(self):
        if self._raises_json:
            raise ValueError("bad json")
        return self._payload


def test_http_post_text_json_success(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=1))
    seen = {}

    def fake_request(**kwargs):
        seen.update(kwargs)
        return FakeResponse(200, {"ok": True})

    monkeypatch.setattr(client.session, "request", fake_request)
    payload = client.post_text_json("https://example.com/api", body="利用日\n", params={"a": "b"})

    assert payload == {"ok": True}
    assert seen["method"] == "POST"
    assert seen["data"] == "利用日\n".encode("utf-8")
    assert seen["headers"]["Content-Type"].startswith("text/plain")
    assert seen["params"] == {"a": "b"}


def test_http_retryable_status_raises_retryable_error(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=1))
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: FakeResponse(503, {"x": 1}))

    with pytest.raises(RetryableHttpError):
        client.request_json("GET", "https://example.com")


def test_http_retries_until_success(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=3, multiplier=0, max_wait=0))
    responses = iter([FakeResponse(502), FakeResponse(200, {"ok": 1})])
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: next(responses))

    assert client.request_json("GET", "https://example.com") == {"ok": 1}


def test_http_client_error_keeps_payload(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=1))
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: FakeResponse(400, {"error": "bad"}))

    with pytest.raises(HttpRequestError) as excinfo:
        client.request_json("GET", "https://example.com")
    assert excinfo.value.status_code == 400
    assert excinfo.value.payload == {"error": "bad"}
    assert not isinstance(excinfo.value, RetryableHttpError)


def test_http_connection_error_is_retryable(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=1))

    def boom(**_kwargs):
        raise requests.ConnectionError("down")

    monkeypatch.setattr(client.session, "request", boom)
    with pytest.raises(RetryableHttpError):
        client.request_json("GET", "https://example.com")


def test_http_invalid_json_raises(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=1))
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: FakeResponse(200, raises_json=True))

    with pytest.raises(HttpRequestError):
        client.request_json("GET", "https://example.com")


def test_http_read_timeout_is_retried_then_raised_as_retryable(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=3, multiplier=0, max_wait=0))
    calls = []

    def slow(**_kwargs):
        calls.append(1)
        raise requests.ReadTimeout("read timed out")

    monkeypatch.setattr(client.session, "request", slow)
    with pytest.raises(RetryableHttpError) as excinfo:
        client.request_json("GET", "https://example.com")

    assert len(calls) == 3
    assert isinstance(excinfo.value.__cause__, requests.ReadTimeout)


def test_http_timeout_then_success(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=2, multiplier=0, max_wait=0))
    outcomes = iter([requests.ConnectTimeout("slow"), FakeResponse(200, {"ok": 2})])

    def flaky(**_kwargs):
        outcome = next(outcomes)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    monkeypatch.setattr(client.session, "request", flaky)
    assert client.request_json("GET", "https://example.com") == {"ok": 2}
