"""HTTP plumbing for the Mastodon REST API, built on top of httpx.

This module owns everything the instance endpoints need from the transport:
base URL resolution, bearer authentication, timeouts and the mapping
of httpx failures onto the client's error taxonomy.
"""

from __future__ import annotations

import json
import weakref
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Mapping

import httpx
from loguru import logger

__all__ = ["APIError", "DecodeError", "HttpCallError", "HttpClient", "TransportError", "decode_json"]

log = logger.bind(module="net.http")

_MAX_ERROR_TEXT_CHARS = 2048


class HttpCallError(RuntimeError):
    """Base error for a request that failed or could not be decoded."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = str(message)
        self.status_code = int(status_code) if status_code is not None else None

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.status_code is None:
            return self.message
        return f"{self.message} (status={self.status_code})"


class TransportError(HttpCallError):
    """Raised when the server cannot be reached or the request times out."""


class APIError(HttpCallError):
    """Raised when the server answers with a non-2xx status."""


class DecodeError(HttpCallError):
    """Raised when a 2xx body is not JSON or does not match the expected shape."""


def _truncate(text: str, *, limit: int) -> str:
    """Return a truncated string with an ellipsis when needed."""
    if limit <= 0:
        return ""
    if len(text) <= limit:
        return text
    head = text[: max(0, limit - 3)].rstrip()
    return f"{head}..."


def _safe_response_text(response: httpx.Response) -> str:
    """Best-effort extraction of response text for error messages."""
    try:
        text = (response.text or "").strip()
    except Exception:
        try:
            text = response.content.decode("utf-8", errors="replace").strip()
        except Exception:
            text = ""
    return _truncate(text, limit=_MAX_ERROR_TEXT_CHARS)


def _first_json_value(text: str) -> Any:
    """Decode the first JSON value in `text`; anything after it is ignored."""
    value, _ = json.JSONDecoder().raw_decode(text.lstrip())
    return value


def _status_line(response: httpx.Response) -> str:
    phrase = (response.reason_phrase or "").strip()
    if phrase:
        return f"{response.status_code} {phrase}"
    return str(response.status_code)


def _api_error_from_response(response: httpx.Response) -> APIError:
    """Build an APIError for a failed response.

    Mastodon reports failures as ``{"error": "..."}``; that text is preferred
    over the raw body when present.
    """
    message = f"bad request: {_status_line(response)}"
    detail = ""
    try:
        payload = _first_json_value(response.content.decode("utf-8", errors="replace"))
    except (ValueError, RecursionError):
        payload = None
    if isinstance(payload, dict) and payload.get("error"):
        detail = str(payload["error"]).strip()
    else:
        detail = _safe_response_text(response)
    if detail:
        message = f"{message}: {detail}"
    return APIError(message, status_code=int(response.status_code))


class HttpClient:
    """Small sync HTTP client with consistent defaults and error mapping.

    Notes:
        - By default, a short-lived `httpx.Client` is created per request.
        - When `reuse_connections=True`, an internal persistent `httpx.Client` is
          used to enable connection pooling. Call `close()` (or use this object
          as a context manager) to release resources deterministically.
        - Timeouts are passed to httpx as given; `None` disables them.
        - `access_token`, when given, is sent as a bearer token on every call.
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout_seconds: float | None = None,
        follow_redirects: bool = True,
        user_agent: str | None = None,
        access_token: str | None = None,
        headers: Mapping[str, str] | None = None,
        transport: httpx.BaseTransport | None = None,
        reuse_connections: bool = False,
    ) -> None:
        self.base_url = (base_url or "").rstrip("/") + "/" if base_url else None
        self.timeout_seconds = float(timeout_seconds) if timeout_seconds is not None else None
        self.follow_redirects = bool(follow_redirects)
        self.transport = transport
        self.reuse_connections = bool(reuse_connections)

        merged: dict[str, str] = dict(headers or {})
        if user_agent and "User-Agent" not in merged:
            merged["User-Agent"] = user_agent
        if access_token and "Authorization" not in merged:
            merged["Authorization"] = f"Bearer {access_token}"
        self.headers = merged
        self._client: httpx.Client | None = None
        self._finalizer: weakref.finalize | None = None

    def _resolve_timeout(self, timeout_seconds: float | None) -> float | None:
        # None here means no timeout at all.
        if timeout_seconds is not None:
            return float(timeout_seconds)
        return self.timeout_seconds

    def _build_client(self) -> httpx.Client:
        kwargs: dict[str, object] = {
            "timeout": self._resolve_timeout(None),
            "follow_redirects": self.follow_redirects,
            "headers": self.headers,
        }
        if self.base_url:
            kwargs["base_url"] = self.base_url
        if self.transport is not None:
            kwargs["transport"] = self.transport
        return httpx.Client(**kwargs)  # type: ignore[arg-type]

    def open(self) -> None:
        """Open an internal persistent `httpx.Client` when reuse is enabled."""
        if not self.reuse_connections:
            return
        if self._client is not None:
            return
        self._client = self._build_client()
        # Ensure we don't leak open pools if callers forget to close explicitly.
        self._finalizer = weakref.finalize(self, self._client.close)

    def close(self) -> None:
        """Close any internal persistent `httpx.Client`."""
        if self._finalizer is not None:
            self._finalizer.detach()
            self._finalizer = None
        if self._client is None:
            return
        self._client.close()
        self._client = None

    def __enter__(self) -> "HttpClient":
        self.open()
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.close()

    @contextmanager
    def _client_ctx(self) -> Iterator[httpx.Client]:
        if self.reuse_connections:
            self.open()
            assert self._client is not None
            yield self._client
            return
        with self._build_client() as client:
            yield client

    def request(
        self,
        method: str,
        url_or_path: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        json_body: Any | None = None,
        timeout_seconds: float | None = None,
    ) -> httpx.Response:
        """Send an HTTP request and return the response.

        Raises:
            APIError: When the server returns a non-2xx response.
            TransportError: When the request cannot be completed.
        """
        method = (method or "GET").strip().upper()
        target = (url_or_path or "").strip()
        if not target:
            raise ValueError("url_or_path must be non-empty.")

        log.debug("{} {}", method, target)
        try:
            with self._client_ctx() as client:
                response = client.request(
                    method,
                    target,
                    params=dict(params) if params else None,
                    headers=dict(headers) if headers else None,
                    json=json_body,
                    timeout=self._resolve_timeout(timeout_seconds),
                )
        except httpx.RequestError as exc:
            log.warning("{} {} failed: {}", method, target, exc)
            raise TransportError(f"HTTP request failed: {exc}") from exc

        if not response.is_success:
            error = _api_error_from_response(response)
            log.warning("{} {} -> {}", method, target, error.message)
            raise error
        log.debug("{} {} -> {}", method, target, response.status_code)
        return response


def decode_json(response: httpx.Response) -> Any:
    """Parse a response body as JSON.

    Raises:
        DecodeError: When the body is empty, not valid JSON, or nested too deeply.
    """
    try:
        return _first_json_value(response.content.decode("utf-8", errors="replace"))
    except (json.JSONDecodeError, RecursionError) as exc:
        raise DecodeError(
            f"Invalid JSON response: {exc}",
            status_code=int(response.status_code),
        ) from exc
