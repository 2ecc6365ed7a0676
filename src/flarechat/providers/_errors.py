"""Shared transport-side error helpers.

Transport failures are mapped into TransportError with status and
retry metadata attached, so callers that run their own retry policy can act on
structured fields instead of brittle substring matching.
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx

from flarechat._http import RETRYABLE_STATUS_CODES
from flarechat.errors import RateLimitError, TransportError, _walk_exception_chain

_AUTH_ERROR_CODES = frozenset({10000, 10001})


def extract_status_code(exc: BaseException) -> int | None:
    """Walk the exception chain to find an HTTP status code."""
    for e in _walk_exception_chain(exc):
        value = getattr(e, "status_code", None)
        if isinstance(value, int) and 100 <= value <= 599:
            return value
        response = getattr(e, "response", None)
        value = getattr(response, "status_code", None)
        if isinstance(value, int) and 100 <= value <= 599:
            return value
    return None


def parse_retry_after(headers: Any) -> float | None:
    """Return the ``Retry-After`` header in seconds, if present and numeric."""
    if headers is None:
        return None
    raw = headers.get("Retry-After")
    if not isinstance(raw, str) or not raw.strip():
        return None
    try:
        seconds = float(raw)
    except ValueError:
        return None
    return seconds if seconds >= 0 else None


def auth_hint(status_code: int | None = None, code: int | None = None) -> str | None:
    """Name the credential env vars when a failure looks like an auth problem."""
    if status_code in {401, 403} or code in _AUTH_ERROR_CODES:
        return (
            "Check credentials/permissions (set CLOUDFLARE_API_TOKEN and "
            "CLOUDFLARE_ACCOUNT_ID or pass Config(api_token=..., account_id=...))."
        )
    return None


def status_error(status_code: int, body: str, headers: Any = None) -> TransportError:
    """Build the error for a non-2xx reply, keeping the raw body text."""
    err_cls: type[TransportError] = (
        RateLimitError if status_code == 429 else TransportError
    )
    return err_cls(
        f"workersai request failed (status={status_code}): {body}",
        hint=auth_hint(status_code=status_code),
        status_code=status_code,
        body=body,
        retryable=status_code in RETRYABLE_STATUS_CODES,
        retry_after_s=parse_retry_after(headers),
    )


def wrap_transport_error(exc: BaseException) -> TransportError:
    """Map an HTTP client exception into TransportError.

    Cancellation is never wrapped: it is re-raised as-is.
    """
    if isinstance(exc, asyncio.CancelledError):
        raise exc

    if isinstance(exc, TransportError):
        return exc

    status_code = extract_status_code(exc)
    retryable = isinstance(status_code, int) and status_code in RETRYABLE_STATUS_CODES
    timed_out = False
    for e in _walk_exception_chain(exc):
        if isinstance(e, (httpx.TimeoutException, TimeoutError)):
            retryable = True
            timed_out = True
            break
        if isinstance(e, httpx.TransportError):
            retryable = True

    msg = "workersai request timed out" if timed_out else "workersai request failed"
    status_note = f" (status={status_code})" if isinstance(status_code, int) else ""
    cause = str(exc)
    return TransportError(
        f"{msg}{status_note}: {cause}" if cause else f"{msg}{status_note}",
        hint=auth_hint(status_code=status_code),
        status_code=status_code,
        retryable=retryable,
    )
