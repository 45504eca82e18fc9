"""Shared utilities for provider implementations."""

from __future__ import annotations

from copy import deepcopy
from enum import StrEnum
import logging
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel, ValidationError

from cogito.errors import ConfigurationError, MalformedResponse

if TYPE_CHECKING:
    from collections.abc import Mapping

log = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)
E = TypeVar("E", bound=StrEnum)


def coerce_model(enum_cls: type[E], model: E | str, *, provider: str) -> E:
    """Return *model* as a member of *enum_cls*, accepting wire identifiers.

    Raises:
        ConfigurationError: When *model* is not a known identifier.
    """
    if isinstance(model, enum_cls):
        return model
    try:
        return enum_cls(str(model).strip())
    except ValueError:
        known = ", ".join(m.value for m in enum_cls)
        raise ConfigurationError(
            f"Unknown {provider} model: {model!r}",
            hint=f"Known models: {known}",
        ) from None


def parse_payload(model_cls: type[M], payload: Mapping[str, Any], *, provider: str) -> M:
    """Validate a raw reply into *model_cls*, keeping a private copy of the payload.

    Raises:
        MalformedResponse: When the payload does not match the model.
    """
    try:
        parsed = model_cls.model_validate(payload)
    except ValidationError as e:
        first = e.errors()[0] if e.error_count() else {}
        location = ".".join(str(p) for p in first.get("loc", ())) or "<root>"
        log.debug("%s payload failed validation: %s", provider, e)
        raise MalformedResponse(
            f"{provider} response does not match {model_cls.__name__}: "
            f"{location}: {first.get('msg', 'invalid')}",
            hint="The provider API may have changed shape; inspect err.payload.",
            provider=provider,
            payload=payload,
        ) from e
    parsed._payload = deepcopy(dict(payload))  # type: ignore[attr-defined]
    return parsed
