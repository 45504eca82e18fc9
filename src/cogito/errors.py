"""Exception hierarchy for Cogito."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator


class CogitoError(Exception):
    """Base exception for all Cogito errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(CogitoError):
    """Configuration validation or credential resolution failed."""


class TransportError(CogitoError):
    """The network exchange failed or returned a non-success status.

    Transports attach retry metadata so callers can decide on a retry policy
    without brittle substring matching. Cogito itself never retries.
    """

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        retryable: bool | None = None,
        status_code: int | None = None,
        retry_after_s: float | None = None,
        provider: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.retryable = retryable
        self.status_code = status_code
        self.retry_after_s = retry_after_s
        self.provider = provider


class AuthenticationError(TransportError):
    """The provider rejected the credentials (HTTP 401/403).

    Not retryable without refreshing credentials.
    """

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        status_code: int | None = None,
        provider: str | None = None,
    ) -> None:
        super().__init__(
            message,
            hint=hint,
            retryable=False,
            status_code=status_code,
            provider=provider,
        )


class MalformedResponse(CogitoError):
    """The exchange succeeded but the payload does not have the expected shape."""

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        provider: str | None = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.provider = provider
        self.payload = payload


def _walk_exception_chain(exc: BaseException) -> Iterator[BaseException]:
    """Yield *exc* and its ``__cause__``/``__context__`` chain, with cycle protection."""
    seen: set[int] = set()
    stack: list[BaseException] = [exc]
    while stack:
        cur = stack.pop()
        if id(cur) in seen:
            continue
        seen.add(id(cur))
        yield cur

        cause = cur.__cause__
        if isinstance(cause, BaseException):
            stack.append(cause)
        context = cur.__context__
        if isinstance(context, BaseException):
            stack.append(context)
