"""Transport protocol and the default HTTP transport.

A transport performs exactly one HTTP exchange per call and returns the
decoded JSON body, or raises a classified error. Clients receive their
transport by constructor injection, so tests can substitute any object
that satisfies :class:`HttpPost`.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
import logging
import os
from typing import TYPE_CHECKING, Any, Protocol, Self, runtime_checkable

import httpx

from cogito._errors import error_for_status, wrap_transport_error
from cogito.errors import ConfigurationError, MalformedResponse

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import TracebackType

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Auth:
    """API credentials handed to a transport on every call."""

    api_key: str = field(repr=False)

    def __post_init__(self) -> None:
        """Reject blank keys early."""
        if not isinstance(self.api_key, str) or not self.api_key.strip():
            raise ConfigurationError(
                "api_key must be a non-empty string",
                hint="Pass Auth('sk-...') or use Auth.from_env('OPENAI_API_KEY').",
            )

    @classmethod
    def from_env(cls, var: str) -> Auth:
        """Read the API key from environment variable *var*."""
        value = os.environ.get(var, "").strip()
        if not value:
            raise ConfigurationError(
                f"Environment variable {var} is not set",
                hint=f"Export {var} or pass the key to Auth() directly.",
            )
        return cls(value)

    def __repr__(self) -> str:
        """Return a redacted representation."""
        return "Auth(api_key='[REDACTED]')"


@dataclass(frozen=True)
class HttpClientFactory:
    """Builds the ``httpx`` client a transport uses for its connection pool."""

    package_name: str
    version: str
    timeout_s: float = 60.0

    @property
    def user_agent(self) -> str:
        """User-Agent header value sent with every request."""
        return f"{self.package_name}/{self.version}"

    def create(self) -> httpx.AsyncClient:
        """Create a new async HTTP client."""
        return httpx.AsyncClient(
            headers={"User-Agent": self.user_agent},
            timeout=self.timeout_s,
        )


@runtime_checkable
class HttpPost(Protocol):
    """Minimal transport protocol: POST a JSON payload, return the JSON reply."""

    async def post(
        self, uri: str, auth: Auth, data: Mapping[str, Any]
    ) -> dict[str, Any]:
        """Perform one exchange and return the decoded response body."""
        ...


async def post_json(
    client: httpx.AsyncClient,
    uri: str,
    *,
    headers: Mapping[str, str],
    data: Mapping[str, Any],
    provider: str,
) -> dict[str, Any]:
    """POST *data* as JSON and return the decoded object.

    Raises:
        AuthenticationError: The provider rejected the credentials.
        TransportError: Connectivity failure, timeout, or non-2xx status.
        MalformedResponse: A 2xx body that is not a JSON object.
    """
    try:
        response = await client.post(uri, headers=dict(headers), json=dict(data))
    except asyncio.CancelledError:
        raise
    except Exception as e:
        err = wrap_transport_error(e, provider=provider)
        log.debug("%s exchange with %s failed: %s", provider, uri, err)
        raise err from e

    log.debug("HTTP response is: %s %s", response.status_code, response.reason_phrase)

    if not response.is_success:
        err = error_for_status(response, provider=provider)
        log.debug("%s returned status %s", provider, response.status_code)
        raise err

    try:
        body = response.json()
    except ValueError as e:
        raise MalformedResponse(
            f"{provider} returned a body that is not valid JSON",
            provider=provider,
            payload=response.text,
        ) from e

    if not isinstance(body, dict):
        raise MalformedResponse(
            f"{provider} returned JSON {type(body).__name__}, expected an object",
            provider=provider,
            payload=body,
        )
    return body


class Service:
    """Default JSON-over-HTTPS transport using bearer-token authentication.

    ``provider`` labels errors raised by this transport; subclasses set a
    default and callers may override it per instance.
    """

    provider = "http"

    def __init__(
        self,
        factory: HttpClientFactory | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        provider: str | None = None,
    ) -> None:
        """Create the transport from a factory, or wrap an existing client."""
        if client is None:
            factory = factory or HttpClientFactory("cogito", "0.0.0")
            client = factory.create()
        self._client = client
        if provider is not None:
            self.provider = provider

    def headers(self, auth: Auth) -> dict[str, str]:
        """Headers for one request."""
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {auth.api_key}",
        }

    async def post(
        self, uri: str, auth: Auth, data: Mapping[str, Any]
    ) -> dict[str, Any]:
        """POST *data* to *uri* with bearer authentication."""
        return await post_json(
            self._client,
            uri,
            headers=self.headers(auth),
            data=data,
            provider=self.provider,
        )

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
