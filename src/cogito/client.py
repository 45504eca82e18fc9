"""Client protocols: minimal contracts for requests, responses and clients.

Each provider defines its own request and response shapes. They satisfy
these protocols structurally, so provider-agnostic code can be written
against the shared subset without a common base class.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Protocol, Self, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from cogito.model import AIModel


@runtime_checkable
class AIRequest(Protocol):
    """An immutable description of one generation call.

    Builder methods return an updated copy and never mutate the receiver.
    """

    @property
    def model(self) -> AIModel: ...  # noqa: D102

    @property
    def instructions(self) -> str | None: ...  # noqa: D102

    def with_model(self, model: Any) -> Self:
        """Return a copy that targets *model*."""
        ...

    def with_instructions(self, instructions: str) -> Self:
        """Return a copy carrying system instructions."""
        ...

    def with_input(self, input: str) -> Self:  # noqa: A002
        """Return a copy carrying the primary input."""
        ...

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON-ready body handed to the transport."""
        ...


@runtime_checkable
class AIResponse(Protocol):
    """A fully materialized provider reply."""

    @property
    def payload(self) -> Mapping[str, Any]: ...  # noqa: D102

    def result(self) -> str:
        """Return the primary generated text."""
        ...


RequestT = TypeVar("RequestT", bound=AIRequest, contravariant=True)
ResponseT = TypeVar("ResponseT", bound=AIResponse, covariant=True)


@runtime_checkable
class AIClient(Protocol[RequestT, ResponseT]):
    """A reusable client bound to one provider and one transport."""

    async def send(self, request: RequestT) -> ResponseT:
        """Send *request* through the transport and return the parsed reply.

        Raises:
            TransportError: The exchange failed or returned a non-success status.
            AuthenticationError: The provider rejected the credentials.
            MalformedResponse: The reply did not match the expected shape.
        """
        ...


R = TypeVar("R", bound=AIResponse)


async def send_many(
    client: AIClient[Any, R],
    requests: Iterable[AIRequest],
    *,
    concurrency: int | None = None,
) -> list[R]:
    """Send several requests concurrently on one client.

    Results are aligned with *requests* regardless of completion order. All
    sends run to completion; the first failure (in request order) is then
    raised.

    Args:
        client: Any provider client.
        requests: Requests matching the client's provider.
        concurrency: Upper bound on in-flight sends; unbounded when ``None``.

    Returns:
        One response per request, in request order.
    """
    pending = list(requests)
    if not pending:
        return []
    if concurrency is not None and concurrency < 1:
        raise ValueError("concurrency must be >= 1 or None")

    sem = asyncio.Semaphore(concurrency or len(pending))

    async def _send(request: AIRequest) -> R:
        async with sem:
            return await client.send(request)

    results = await asyncio.gather(
        *(_send(r) for r in pending), return_exceptions=True
    )
    for item in results:
        if isinstance(item, BaseException):
            raise item
    return list(results)  # type: ignore[arg-type]
