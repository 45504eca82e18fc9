"""Model identifier protocol shared by provider enums."""

from __future__ import annotations

from typing import Protocol, Self, runtime_checkable


@runtime_checkable
class AIModel(Protocol):
    """A provider's enumeration of model identifiers.

    Implementations are ``str``-valued enums whose values are the wire
    identifiers, with selectors for common choices so callers can stay
    provider-agnostic.
    """

    @property
    def value(self) -> str: ...  # noqa: D102

    @classmethod
    def default(cls) -> Self:
        """The model used when a request does not pick one."""
        ...

    @classmethod
    def flagship(cls) -> Self:
        """The provider's flagship model."""
        ...

    @classmethod
    def best(cls) -> Self:
        """The most capable model."""
        ...

    @classmethod
    def cheapest(cls) -> Self:
        """The least expensive model."""
        ...

    @classmethod
    def fastest(cls) -> Self:
        """The lowest-latency model."""
        ...
