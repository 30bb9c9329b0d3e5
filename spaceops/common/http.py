"""HTTP access to the import-commit endpoint.

Transient failures (connection drops, timeouts, 429 and 5xx gateway statuses) are
retried with jittered exponential backoff; anything else surfaces as
``HttpRequestError`` carrying the decoded error body when there is one.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import TracebackType
from typing import Any

import requests
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential_jitter

from spaceops.common.constants import USER_AGENT
from spaceops.common.errors import SpaceOpsError

RETRYABLE_STATUS_CODES = frozenset({408, 425, 429, 500, 502, 503, 504})


@dataclass(frozen=True)
class TimeoutConfig:
    connect: float = 10.0
    read: float = 120.0

    def as_tuple(self) -> tuple[float, float]:
        return (self.connect, self.read)


@dataclass(frozen=True)
class RetryConfig:
    max_attempts: int = 3
    multiplier: float = 1.0
    max_wait: float = 15.0


class HttpRequestError(SpaceOpsError):
    error_code = "HTTP_ERROR"

    def __init__(self, message: str, *, status_code: int | None = None, payload: Any = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class RetryableHttpError(HttpRequestError):
    pass


def _json_or_none(response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def check_status(response) -> None:
    status = response.status_code
    if status in RETRYABLE_STATUS_CODES:
        raise RetryableHttpError(f"Retryable HTTP status: {status}", status_code=status)
    if status >= 400:
        raise HttpRequestError(f"HTTP status {status}", status_code=status, payload=_json_or_none(response))


class HttpClient:
    def __init__(
        self,
        *,
        timeout: TimeoutConfig | None = None,
        retry: RetryConfig | None = None,
    ) -> None:
        self.timeout = timeout or TimeoutConfig()
        self.retry = retry or RetryConfig()
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT, "Accept": "application/json"})

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self.retry.max_attempts),
            wait=wait_exponential_jitter(initial=self.retry.multiplier, max=self.retry.max_wait, jitter=1.0),
            retry=retry_if_exception_type(RetryableHttpError),
            reraise=True,
        )

    def _send(self, method: str, url: str, timeout: TimeoutConfig, **kwargs: Any) -> Any:
        try:
            response = self.session.request(method=method, url=url, timeout=timeout.as_tuple(), **kwargs)
        except (requests.ConnectionError, requests.Timeout) as exc:
            raise RetryableHttpError(f"Transport failure for {url}: {exc.__class__.__name__}") from exc
        check_status(response)
        try:
            return response.json()
        except ValueError as exc:
            raise HttpRequestError(f"Invalid JSON payload from {url}", status_code=response.status_code) from exc

    def request_json(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        data: bytes | str | None = None,
        headers: dict[str, str] | None = None,
        timeout: TimeoutConfig | None = None,
    ) -> Any:
        for attempt in self._retrying():
            with attempt:
                return self._send(
                    method,
                    url,
                    timeout or self.timeout,
                    params=params,
                    data=data,
                    headers=headers,
                )

    def post_text_json(
        self,
        url: str,
        *,
        body: str,
        params: dict[str, Any] | None = None,
        timeout: TimeoutConfig | None = None,
    ) -> Any:
        return self.request_json(
            "POST",
            url,
            params=params,
            data=body.encode("utf-8"),
            headers={"Content-Type": "text/plain; charset=utf-8"},
            timeout=timeout,
        )
