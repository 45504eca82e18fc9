"""Anthropic Claude Messages API provider.

When you create a request you pick a :class:`ClaudeModel`; the default is
the flagship model. You need your own Claude API key, passed to the client
through :class:`~cogito.service.Auth`. You are responsible for the costs of
any API usage.

Claude authenticates with an ``x-api-key`` header rather than a bearer
token, so it ships its own transport, :class:`ClaudeService`.
"""

from __future__ import annotations

from enum import StrEnum
import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Annotated, Any, Literal, Self

from pydantic import BaseModel, ConfigDict, Discriminator, Field, PrivateAttr, Tag

from cogito.providers._utils import coerce_model, parse_payload
from cogito.service import Service

if TYPE_CHECKING:
    from collections.abc import Mapping

    from cogito.service import Auth, HttpClientFactory, HttpPost

log = logging.getLogger(__name__)

_DEFAULT_MAX_TOKENS = 1024


class ClaudeModel(StrEnum):
    """Claude model identifiers."""

    SONNET_4_5 = "claude-sonnet-4-5"
    HAIKU_4_5 = "claude-haiku-4-5"
    OPUS_4_5 = "claude-opus-4-5"
    OPUS_4_1 = "claude-opus-4-1"

    @classmethod
    def default(cls) -> ClaudeModel:
        return cls.SONNET_4_5

    @classmethod
    def flagship(cls) -> ClaudeModel:
        return cls.default()

    @classmethod
    def best(cls) -> ClaudeModel:
        return cls.default()

    @classmethod
    def cheapest(cls) -> ClaudeModel:
        return cls.HAIKU_4_5

    @classmethod
    def fastest(cls) -> ClaudeModel:
        return cls.HAIKU_4_5


class ClaudeRole(StrEnum):
    USER = "user"
    ASSISTANT = "assistant"


class ClaudeMessage(BaseModel):
    """A single conversational turn."""

    model_config = ConfigDict(frozen=True)

    role: ClaudeRole = ClaudeRole.USER
    content: str


class ClaudeRequest(BaseModel):
    """Request body for ``POST /v1/messages``.

    ``with_input`` appends a user message rather than replacing the previous
    one, so a base request can be extended into several prompts.
    """

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model: ClaudeModel = Field(default_factory=ClaudeModel.default)
    max_tokens: int = _DEFAULT_MAX_TOKENS
    system: str | None = None
    messages: tuple[ClaudeMessage, ...] = ()
    temperature: float | None = None

    @property
    def instructions(self) -> str | None:
        return self.system

    @property
    def input(self) -> str | None:
        """Content of the most recent message, if any."""
        return self.messages[-1].content if self.messages else None

    def with_model(self, model: ClaudeModel | str) -> Self:
        return self.model_copy(
            update={"model": coerce_model(ClaudeModel, model, provider="claude")}
        )

    def with_instructions(self, instructions: str) -> Self:
        return self.model_copy(update={"system": instructions})

    def with_input(self, input: str) -> Self:  # noqa: A002
        message = ClaudeMessage(content=input)
        return self.model_copy(update={"messages": (*self.messages, message)})

    def with_temperature(self, temperature: float) -> Self:
        return self.model_copy(update={"temperature": temperature})

    def with_max_tokens(self, max_tokens: int) -> Self:
        return self.model_copy(update={"max_tokens": max_tokens})

    def to_payload(self) -> dict[str, Any]:
        """Serialize for the wire; unset optional fields are omitted."""
        return self.model_dump(mode="json", exclude_none=True)


class ClaudeTextContent(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["text"]
    text: str


class ClaudeOtherContent(BaseModel):
    """Non-text blocks such as ``tool_use``; they never contribute to the result."""

    model_config = ConfigDict(frozen=True, extra="allow")

    type: str


def _content_tag(block: Any) -> str:
    kind = block.get("type") if isinstance(block, dict) else getattr(block, "type", None)
    return "text" if kind == "text" else "other"


ClaudeContent = Annotated[
    Annotated[ClaudeTextContent, Tag("text")]
    | Annotated[ClaudeOtherContent, Tag("other")],
    Discriminator(_content_tag),
]


class ClaudeCacheCreation(BaseModel):
    model_config = ConfigDict(frozen=True)

    ephemeral_5m_input_tokens: int = 0
    ephemeral_1h_input_tokens: int = 0


class ClaudeUsage(BaseModel):
    """Token accounting; useful for debugging cost."""

    model_config = ConfigDict(frozen=True)

    input_tokens: int = 0
    output_tokens: int = 0
    cache_creation_input_tokens: int | None = None
    cache_read_input_tokens: int | None = None
    cache_creation: ClaudeCacheCreation | None = None


class ClaudeResponse(BaseModel):
    """Parsed reply from ``POST /v1/messages``."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    id: str
    type: str = "message"
    role: ClaudeRole
    content: tuple[ClaudeContent, ...]
    model: str | None = None
    stop_reason: str | None = None
    usage: ClaudeUsage | None = None

    _payload: dict[str, Any] = PrivateAttr(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> ClaudeResponse:
        """Validate a raw reply; raises ``MalformedResponse`` on shape mismatch."""
        return parse_payload(cls, payload, provider="claude")

    @property
    def payload(self) -> Mapping[str, Any]:
        """Read-only view of the raw reply."""
        return MappingProxyType(self._payload)

    def result(self) -> str:
        """Join the text blocks with newlines."""
        return "\n".join(
            c.text for c in self.content if isinstance(c, ClaudeTextContent)
        ).strip()


class ClaudeService(Service):
    """Transport for the Claude API: ``x-api-key`` plus a pinned API version."""

    provider = "claude"
    ANTHROPIC_VERSION = "2023-06-01"

    def headers(self, auth: Auth) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "anthropic-version": self.ANTHROPIC_VERSION,
            "x-api-key": auth.api_key,
        }


class ClaudeClient:
    """Anthropic Claude API client.

    The client holds no per-request state; one instance can serve many
    concurrent sends over a shared transport.
    """

    BASE_URI = "https://api.anthropic.com/v1/messages"

    def __init__(self, auth: Auth, service: HttpPost) -> None:
        """Bind credentials and a transport."""
        self._auth = auth
        self._service = service

    @classmethod
    def from_factory(cls, auth: Auth, factory: HttpClientFactory) -> ClaudeClient:
        """Create a client over a :class:`ClaudeService`."""
        return cls(auth, ClaudeService(factory))

    @property
    def service(self) -> HttpPost:
        return self._service

    async def send(self, request: ClaudeRequest) -> ClaudeResponse:
        """Send *request* and return the parsed response."""
        if not isinstance(request, ClaudeRequest):
            raise TypeError(
                f"ClaudeClient.send expects ClaudeRequest, got {type(request).__name__}"
            )
        log.debug(
            "Sending Claude request (model=%s, messages=%d)",
            request.model,
            len(request.messages),
        )
        payload = await self._service.post(self.BASE_URI, self._auth, request.to_payload())
        return ClaudeResponse.from_payload(payload)

    async def aclose(self) -> None:
        """Release the transport, when it holds resources."""
        aclose = getattr(self._service, "aclose", None)
        if callable(aclose):
            await aclose()
