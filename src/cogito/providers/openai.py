"""OpenAI Responses API provider.

When you create a request you pick an :class:`OpenAIModel`; the default is
the flagship model. You need your own OpenAI API key, passed to the client
through :class:`~cogito.service.Auth`. You are responsible for the costs of
any API usage.

Example:
    auth = Auth.from_env("OPENAI_API_KEY")
    client = OpenAIClient.from_factory(auth, HttpClientFactory("my-app", "1.0"))
    request = OpenAIRequest().with_model(OpenAIModel.GPT_4O).with_input("write a haiku")
    response = await client.send(request)
    print(response.result())
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


class OpenAIModel(StrEnum):
    """OpenAI model identifiers."""

    GPT_5 = "gpt-5"
    GPT_5_MINI = "gpt-5-mini"
    GPT_5_NANO = "gpt-5-nano"
    GPT_4O = "gpt-4o"
    GPT_4O_MINI = "gpt-4o-mini"
    GPT_4_1 = "gpt-4.1"
    GPT_4_1_MINI = "gpt-4.1-mini"
    GPT_4_1_NANO = "gpt-4.1-nano"
    O4_MINI = "o4-mini"
    O3 = "o3"
    O3_MINI = "o3-mini"
    O3_PRO = "o3-pro"
    O1 = "o1"
    O1_PRO = "o1-pro"

    @classmethod
    def default(cls) -> OpenAIModel:
        return cls.GPT_5

    @classmethod
    def flagship(cls) -> OpenAIModel:
        return cls.default()

    @classmethod
    def best(cls) -> OpenAIModel:
        return cls.default()

    @classmethod
    def cheapest(cls) -> OpenAIModel:
        return cls.GPT_5_NANO

    @classmethod
    def fastest(cls) -> OpenAIModel:
        # 4.1-nano is noticeably faster than 5-nano.
        return cls.GPT_4_1_NANO


class OpenAIRequest(BaseModel):
    """Request body for ``POST /v1/responses``."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model: OpenAIModel = Field(default_factory=OpenAIModel.default)
    instructions: str | None = None
    input: str = ""
    store: bool = False
    temperature: float | None = None
    max_output_tokens: int | None = None

    def with_model(self, model: OpenAIModel | str) -> Self:
        return self.model_copy(
            update={"model": coerce_model(OpenAIModel, model, provider="openai")}
        )

    def with_instructions(self, instructions: str) -> Self:
        return self.model_copy(update={"instructions": instructions})

    def with_input(self, input: str) -> Self:  # noqa: A002
        return self.model_copy(update={"input": input})

    def with_temperature(self, temperature: float) -> Self:
        return self.model_copy(update={"temperature": temperature})

    def with_max_tokens(self, max_tokens: int) -> Self:
        return self.model_copy(update={"max_output_tokens": max_tokens})

    def to_payload(self) -> dict[str, Any]:
        """Serialize for the wire; unset optional fields are omitted."""
        return self.model_dump(mode="json", exclude_none=True)


class OpenAIOutputText(BaseModel):
    """An ``output_text`` block: the only kind that contributes to the result."""

    model_config = ConfigDict(frozen=True)

    type: Literal["output_text"]
    text: str


class OpenAIOtherContent(BaseModel):
    """Any other block (``refusal`` and the like); kept but never read as text."""

    model_config = ConfigDict(frozen=True, extra="allow")

    type: str


def _content_tag(block: Any) -> str:
    kind = block.get("type") if isinstance(block, dict) else getattr(block, "type", None)
    return "output_text" if kind == "output_text" else "other"


OpenAIContent = Annotated[
    Annotated[OpenAIOutputText, Tag("output_text")]
    | Annotated[OpenAIOtherContent, Tag("other")],
    Discriminator(_content_tag),
]


class OpenAIMessageOutput(BaseModel):
    """A ``message`` output item carrying content blocks."""

    model_config = ConfigDict(frozen=True)

    type: Literal["message"]
    content: tuple[OpenAIContent, ...] = ()

    def concatenate(self) -> str:
        """Join the ``output_text`` blocks with newlines."""
        return "\n".join(
            c.text for c in self.content if isinstance(c, OpenAIOutputText)
        )


class OpenAIReasoningOutput(BaseModel):
    """A ``reasoning`` output item (GPT-5 and o-series).

    Reasoning items carry a summary instead of content; they never contribute
    to the result text.
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["reasoning"]
    summary: tuple[dict[str, Any], ...] = ()

    @property
    def content(self) -> tuple[OpenAIContent, ...]:
        return ()

    def concatenate(self) -> str:
        return ""


OpenAIOutput = Annotated[
    OpenAIMessageOutput | OpenAIReasoningOutput, Field(discriminator="type")
]


class OpenAIResponse(BaseModel):
    """Parsed reply from ``POST /v1/responses``."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    output: tuple[OpenAIOutput, ...]
    id: str | None = None
    model: str | None = None
    usage: dict[str, Any] | None = None

    _payload: dict[str, Any] = PrivateAttr(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> OpenAIResponse:
        """Validate a raw reply; raises ``MalformedResponse`` on shape mismatch."""
        return parse_payload(cls, payload, provider="openai")

    @property
    def payload(self) -> Mapping[str, Any]:
        """Read-only view of the raw reply."""
        return MappingProxyType(self._payload)

    def concatenate(self) -> str:
        return "\n".join(o.concatenate() for o in self.output).strip()

    def result(self) -> str:
        return self.concatenate()


class OpenAIClient:
    """OpenAI Responses API client.

    The client holds no per-request state; one instance can serve many
    concurrent sends over a shared transport.
    """

    BASE_URI = "https://api.openai.com/v1/responses"

    def __init__(self, auth: Auth, service: HttpPost) -> None:
        """Bind credentials and a transport."""
        self._auth = auth
        self._service = service

    @classmethod
    def from_factory(cls, auth: Auth, factory: HttpClientFactory) -> OpenAIClient:
        """Create a client over the default bearer-token :class:`Service`."""
        return cls(auth, Service(factory, provider="openai"))

    @property
    def service(self) -> HttpPost:
        return self._service

    async def send(self, request: OpenAIRequest) -> OpenAIResponse:
        """Send *request* and return the parsed response."""
        if not isinstance(request, OpenAIRequest):
            raise TypeError(
                f"OpenAIClient.send expects OpenAIRequest, got {type(request).__name__}"
            )
        log.debug("Sending OpenAI request (model=%s)", request.model)
        payload = await self._service.post(self.BASE_URI, self._auth, request.to_payload())
        return OpenAIResponse.from_payload(payload)

    async def aclose(self) -> None:
        """Release the transport, when it holds resources."""
        aclose = getattr(self._service, "aclose", None)
        if callable(aclose):
            await aclose()
