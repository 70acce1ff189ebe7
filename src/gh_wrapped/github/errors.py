"""Error taxonomy for upstream API failures."""

from __future__ import annotations

import math
from collections.abc import Mapping
from enum import Enum
from typing import Any

import httpx

from .rate_limit import suggested_delay_ms


class ErrorKind(str, Enum):
    RATE_LIMIT = "rate_limit"
    NOT_FOUND = "not_found"
    SERVER_ERROR = "server_error"
    UNKNOWN = "unknown"

    @property
    def retryable(self) -> bool:
        return self in (ErrorKind.RATE_LIMIT, ErrorKind.SERVER_ERROR)


class GitHubAPIError(Exception):
    """A classified upstream failure."""

    def __init__(
        self,
        message: str,
        status: int | None,
        kind: ErrorKind,
        retry_after_ms: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.kind = kind
        self.retry_after_ms = retry_after_ms

    def __repr__(self) -> str:
        return (
            f"GitHubAPIError(kind={self.kind.value!r}, status={self.status!r}, "
            f"message={self.message!r})"
        )


def _rate_limit_message(retry_after_ms: int | None) -> str:
    if retry_after_ms:
        seconds = math.ceil(retry_after_ms / 1000)
        return f"GitHub API rate limit exceeded. Please try again in {seconds} seconds."
    return "GitHub API rate limit exceeded. Please try again later."


def classify_status(
    status: int,
    headers: Mapping[str, str] | None = None,
    message: str | None = None,
    now: float | None = None,
    retry_after_ms: int | None = None,
) -> GitHubAPIError:
    """Map an HTTP status (and rate limit headers) to a GitHubAPIError.

    403 and 429 are rate limits, 404 is not-found, anything >= 500 is a
    server error and every other status is unknown. ``retry_after_ms`` is
    the proxy's own hint, used when the headers carry no delay.
    """
    if status in (403, 429):
        delay = suggested_delay_ms(headers, now=now)
        if delay is None:
            delay = retry_after_ms
        return GitHubAPIError(
            message or _rate_limit_message(delay),
            status,
            ErrorKind.RATE_LIMIT,
            retry_after_ms=delay,
        )
    if status == 404:
        return GitHubAPIError(
            message
            or "User or resource not found. Please check the username and try again.",
            status,
            ErrorKind.NOT_FOUND,
        )
    if status >= 500:
        return GitHubAPIError(
            message or "GitHub API server error. Please try again later.",
            status,
            ErrorKind.SERVER_ERROR,
        )
    return GitHubAPIError(
        message or f"Request failed with status {status}",
        status,
        ErrorKind.UNKNOWN,
    )


def _error_body(response: httpx.Response) -> dict[str, Any]:
    """The proxy's JSON error body (``{error, message, retryAfter}``), if any."""
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _body_message(body: dict[str, Any]) -> str | None:
    message = body.get("message")
    return message if isinstance(message, str) and message else None


def _body_retry_after(body: dict[str, Any]) -> int | None:
    value = body.get("retryAfter")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return max(0, int(value))


def classify_exception(
    exc: BaseException, operation: str, use_headers: bool = True
) -> GitHubAPIError:
    """Turn any exception raised by a fetch into a GitHubAPIError.

    With ``use_headers`` off (upstreams without GitHub rate limit hints)
    neither the headers nor a body ``retryAfter`` are trusted.
    """
    if isinstance(exc, GitHubAPIError):
        return exc
    if isinstance(exc, httpx.HTTPStatusError):
        response = exc.response
        body = _error_body(response)
        return classify_status(
            response.status_code,
            headers=response.headers if use_headers else None,
            message=_body_message(body),
            retry_after_ms=_body_retry_after(body) if use_headers else None,
        )
    return GitHubAPIError(
        f"Failed to {operation}: {str(exc) or type(exc).__name__}",
        None,
        ErrorKind.UNKNOWN,
    )
