"""Build provider clients and requests from a :class:`Config`."""

from __future__ import annotations

from typing import TYPE_CHECKING

from cogito.errors import ConfigurationError
from cogito.providers.claude import ClaudeClient, ClaudeRequest, ClaudeService
from cogito.providers.openai import OpenAIClient, OpenAIRequest
from cogito.service import Auth, HttpClientFactory, Service

if TYPE_CHECKING:
    from cogito.config import Config


def build_client(config: Config) -> OpenAIClient | ClaudeClient:
    """Return the client for ``config.provider`` over its default transport.

    Extend by adding new provider clients and mapping here.
    """
    if not config.api_key:
        raise ConfigurationError(
            "api_key required to build a client",
            hint="Construct Config with api_key=... or set the provider env var.",
        )
    auth = Auth(config.api_key)
    factory = HttpClientFactory(
        config.package_name, config.package_version, timeout_s=config.timeout_s
    )

    if config.provider == "openai":
        return OpenAIClient(auth, Service(factory, provider="openai"))
    if config.provider == "claude":
        return ClaudeClient(auth, ClaudeService(factory))

    raise ConfigurationError(f"Unknown provider: {config.provider!r}")


def build_request(config: Config) -> OpenAIRequest | ClaudeRequest:
    """Return an empty request for ``config.provider`` targeting the configured model."""
    model = config.model_id()
    if config.provider == "openai":
        return OpenAIRequest().with_model(model)
    return ClaudeRequest().with_model(model)
