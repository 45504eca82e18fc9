"""Configuration: frozen Config with explicit provider requirements."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Literal

from dotenv import load_dotenv

from cogito.errors import ConfigurationError
from cogito.providers._utils import coerce_model
from cogito.providers.claude import ClaudeModel
from cogito.providers.openai import OpenAIModel

load_dotenv()

ProviderName = Literal["openai", "claude"]

# Checked in order; the first non-empty variable wins.
_API_KEY_ENV_VARS: dict[ProviderName, tuple[str, ...]] = {
    "openai": ("OPENAI_API_KEY",),
    "claude": ("CLAUDE_API_KEY", "ANTHROPIC_API_KEY"),
}

_MODEL_ENUMS: dict[ProviderName, type[OpenAIModel] | type[ClaudeModel]] = {
    "openai": OpenAIModel,
    "claude": ClaudeModel,
}


@dataclass(frozen=True)
class Config:
    """Immutable client configuration.

    The provider is required. API keys are auto-resolved from the standard
    environment variables when not passed explicitly.

    Example:
        config = Config(provider="claude", model="claude-haiku-4-5")
        # API key is resolved from CLAUDE_API_KEY (or ANTHROPIC_API_KEY)
    """

    provider: ProviderName
    #: Provider default model when *None*.
    model: str | None = None
    api_key: str | None = None
    timeout_s: float = 60.0
    #: Reported in the User-Agent header.
    package_name: str = "cogito"
    package_version: str = "0.1.0"

    def __post_init__(self) -> None:
        """Auto-resolve the API key and validate configuration."""
        if self.provider not in _API_KEY_ENV_VARS:
            raise ConfigurationError(
                f"Unknown provider: {self.provider!r}",
                hint="Supported providers: 'openai', 'claude'",
            )

        if self.timeout_s <= 0:
            raise ConfigurationError(
                f"timeout_s must be > 0, got {self.timeout_s}",
                hint="This bounds each HTTP exchange, in seconds.",
            )

        # Fail at construction rather than on the first send.
        self.model_id()

        if self.api_key is None:
            for env_var in _API_KEY_ENV_VARS[self.provider]:
                resolved = os.environ.get(env_var, "").strip()
                if resolved:
                    object.__setattr__(self, "api_key", resolved)
                    break

        if not self.api_key:
            env_vars = " or ".join(_API_KEY_ENV_VARS[self.provider])
            raise ConfigurationError(
                f"API key required for {self.provider}",
                hint=f"Set {env_vars} environment variable or pass api_key=...",
            )

    def model_id(self) -> OpenAIModel | ClaudeModel:
        """Return the configured model as the provider's enum member."""
        enum_cls = _MODEL_ENUMS[self.provider]
        if self.model is None:
            return enum_cls.default()
        return coerce_model(enum_cls, self.model, provider=self.provider)

    def __str__(self) -> str:
        """Return a redacted, developer-friendly representation."""
        return (
            f"Config(provider={self.provider!r}, model={self.model!r}, "
            f"api_key={'[REDACTED]' if self.api_key else None}, "
            f"timeout_s={self.timeout_s})"
        )

    __repr__ = __str__
