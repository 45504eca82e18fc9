"""Test helpers (small, reusable doubles).

Keep this file tiny and purpose-built: it exists to prevent test suites from
growing lots of one-off transport classes as coverage expands.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
import json
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Self

import httpx
from pydantic import BaseModel, ConfigDict, PrivateAttr

from cogito.providers._utils import parse_payload

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from cogito.service import Auth

DATA_DIR = Path(__file__).parent / "data"


def load_payload(name: str) -> dict[str, Any]:
    """Load a recorded provider reply from tests/data."""
    return json.loads((DATA_DIR / f"{name}.json").read_text(encoding="utf-8"))


def mock_http_client(
    handler: Callable[[httpx.Request], httpx.Response],
) -> httpx.AsyncClient:
    """Return an httpx client whose exchanges are answered by *handler*."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def claude_reply(text: str) -> dict[str, Any]:
    """Minimal well-formed Messages API reply."""
    return {
        "id": "msg_test",
        "type": "message",
        "role": "assistant",
        "content": [{"type": "text", "text": text}],
    }


def openai_reply(text: str) -> dict[str, Any]:
    """Minimal well-formed Responses API reply."""
    return {
        "output": [
            {
                "type": "message",
                "content": [{"type": "output_text", "text": text}],
            }
        ]
    }


@dataclass
class ScriptedService:
    """HttpPost double that returns a scripted sequence of payloads/exceptions.

    Records every call so tests can assert on what reached the transport.
    """

    script: list[dict[str, Any] | BaseException] = field(default_factory=list)
    calls: list[tuple[str, Auth, dict[str, Any]]] = field(default_factory=list)

    async def post(
        self, uri: str, auth: Auth, data: Mapping[str, Any]
    ) -> dict[str, Any]:
        self.calls.append((uri, auth, dict(data)))
        item = self.script.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item


@dataclass
class EchoService:
    """HttpPost double that echoes the prompt back after a per-prompt delay.

    ``reply`` shapes the echoed text into a provider payload.
    """

    reply: Callable[[str], dict[str, Any]]
    delays: dict[str, float] = field(default_factory=dict)
    in_flight: int = 0
    max_in_flight: int = 0

    async def post(
        self, uri: str, auth: Auth, data: Mapping[str, Any]
    ) -> dict[str, Any]:
        del uri, auth
        prompt = _prompt_of(data)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(prompt, 0))
        finally:
            self.in_flight -= 1
        return self.reply(f"echo: {prompt}")


@dataclass
class GateService:
    """HttpPost double that blocks until *expected* calls are in flight.

    Proves sends overlap: a sequential caller would deadlock and time out.
    """

    expected: int
    reply: Callable[[str], dict[str, Any]]
    _arrived: int = 0
    _gate: asyncio.Event = field(default_factory=asyncio.Event)

    async def post(
        self, uri: str, auth: Auth, data: Mapping[str, Any]
    ) -> dict[str, Any]:
        del uri, auth
        self._arrived += 1
        if self._arrived >= self.expected:
            self._gate.set()
        await asyncio.wait_for(self._gate.wait(), timeout=2)
        return self.reply(_prompt_of(data))


def _prompt_of(data: Mapping[str, Any]) -> str:
    if "messages" in data:
        return data["messages"][-1]["content"]
    if "prompt" in data:
        return data["prompt"]
    return data["input"]


# =============================================================================
# Minimal provider: proves the protocols are satisfiable without Cogito types
# =============================================================================


class TextRequest(BaseModel):
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model: str = "text-1"
    instructions: str | None = None
    prompt: str = ""

    def with_model(self, model: str) -> Self:
        return self.model_copy(update={"model": model})

    def with_instructions(self, instructions: str) -> Self:
        return self.model_copy(update={"instructions": instructions})

    def with_input(self, input: str) -> Self:  # noqa: A002
        return self.model_copy(update={"prompt": input})

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class TextResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    _payload: dict[str, Any] = PrivateAttr(default_factory=dict)

    @property
    def payload(self) -> Mapping[str, Any]:
        return MappingProxyType(self._payload)

    def result(self) -> str:
        return self.text


class TextClient:
    def __init__(self, auth: Auth, service: Any) -> None:
        self._auth = auth
        self._service = service

    async def send(self, request: TextRequest) -> TextResponse:
        payload = await self._service.post(
            "https://text.invalid/v1/generate", self._auth, request.to_payload()
        )
        return parse_payload(TextResponse, payload, provider="text")


def text_reply(text: str) -> dict[str, Any]:
    return {"text": text}
