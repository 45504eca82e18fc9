"""Transport-side error helpers.

Transports map ``httpx`` failures and non-success statuses into the Cogito
taxonomy here so every provider classifies failures the same way.
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx

from cogito._http import AUTH_STATUS_CODES, RETRYABLE_STATUS_CODES
from cogito.errors import (
    AuthenticationError,
    CogitoError,
    TransportError,
    _walk_exception_chain,
)

# Environment variables worth naming in credential hints.
_API_KEY_ENV_VARS: dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "claude": "CLAUDE_API_KEY or ANTHROPIC_API_KEY",
}


def extract_retry_after_s(response: httpx.Response) -> float | None:
    """Parse a numeric ``Retry-After`` header into seconds."""
    raw: Any = response.headers.get("Retry-After")
    if not isinstance(raw, str) or not raw.strip():
        return None
    try:
        seconds = float(raw)
    except ValueError:
        return None
    return seconds if seconds >= 0 else None


def _auth_hint(provider: str) -> str:
    env_var = _API_KEY_ENV_VARS.get(provider, "API key")
    return f"Check credentials/permissions (try setting {env_var} or Auth(api_key=...))."


def _error_detail(response: httpx.Response) -> str:
    """Return the provider's error message when the body carries one."""
    try:
        body = response.json()
    except ValueError:
        return response.text.strip()
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
        if isinstance(error, str):
            return error
    return response.text.strip()


def error_for_status(response: httpx.Response, *, provider: str) -> TransportError:
    """Map a non-success HTTP response into a classified error."""
    status_code = response.status_code
    detail = _error_detail(response)
    msg = f"{provider} request failed (status={status_code})"
    if detail:
        msg = f"{msg}: {detail}"

    if status_code in AUTH_STATUS_CODES:
        return AuthenticationError(
            msg,
            hint=_auth_hint(provider),
            status_code=status_code,
            provider=provider,
        )

    retry_after_s = extract_retry_after_s(response)
    retryable = retry_after_s is not None or status_code in RETRYABLE_STATUS_CODES
    return TransportError(
        msg,
        retryable=retryable,
        status_code=status_code,
        retry_after_s=retry_after_s,
        provider=provider,
    )


def wrap_transport_error(exc: BaseException, *, provider: str) -> CogitoError:
    """Map a low-level exception raised during the exchange into TransportError."""
    if isinstance(exc, asyncio.CancelledError):
        raise exc

    # Already classified; fill in missing context only.
    if isinstance(exc, CogitoError):
        if isinstance(exc, TransportError) and exc.provider is None:
            exc.provider = provider
        return exc

    retryable = False
    hint = None
    for e in _walk_exception_chain(exc):
        if isinstance(e, httpx.TimeoutException):
            retryable = True
            hint = "The request timed out; raise the transport timeout or retry."
            break
        if isinstance(e, (httpx.RequestError, TimeoutError, ConnectionError)):
            retryable = True
            break

    cause = str(exc) or type(exc).__name__
    return TransportError(
        f"{provider} request failed: {cause}",
        hint=hint,
        retryable=retryable,
        provider=provider,
    )
