"""Cogito: a uniform async interface for LLM API clients.

Public API:
    - AIRequest / AIResponse / AIClient: provider-agnostic protocols
    - OpenAIClient, ClaudeClient: provider clients
    - Auth, HttpClientFactory, Service: transport building blocks
    - Config, build_client: configuration-driven construction
    - TransportError, AuthenticationError, MalformedResponse: failure kinds
"""

from __future__ import annotations

import logging

from cogito.client import AIClient, AIRequest, AIResponse, send_many
from cogito.config import Config
from cogito.errors import (
    AuthenticationError,
    CogitoError,
    ConfigurationError,
    MalformedResponse,
    TransportError,
)
from cogito.factory import build_client, build_request
from cogito.model import AIModel
from cogito.providers import (
    ClaudeClient,
    ClaudeModel,
    ClaudeRequest,
    ClaudeResponse,
    ClaudeService,
    OpenAIClient,
    OpenAIModel,
    OpenAIRequest,
    OpenAIResponse,
)
from cogito.retry import RetryPolicy, retry_async, retry_send
from cogito.service import Auth, HttpClientFactory, HttpPost, Service

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("cogito")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("cogito").addHandler(logging.NullHandler())

__all__ = [
    "AIClient",
    "AIModel",
    "AIRequest",
    "AIResponse",
    "Auth",
    "AuthenticationError",
    "ClaudeClient",
    "ClaudeModel",
    "ClaudeRequest",
    "ClaudeResponse",
    "ClaudeService",
    "CogitoError",
    "Config",
    "ConfigurationError",
    "HttpClientFactory",
    "HttpPost",
    "MalformedResponse",
    "OpenAIClient",
    "OpenAIModel",
    "OpenAIRequest",
    "OpenAIResponse",
    "RetryPolicy",
    "Service",
    "TransportError",
    "build_client",
    "build_request",
    "retry_async",
    "retry_send",
    "send_many",
]
