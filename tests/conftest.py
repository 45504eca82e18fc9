"""Pytest configuration and fixtures.

Provides environment isolation, logging configuration, automatic API test
skipping, and recorded provider payloads. Fixtures here are autouse unless
noted.
"""

from __future__ import annotations

from contextlib import suppress
import logging
import os
from typing import Any

import pytest

from tests.helpers import load_payload

# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-out: @pytest.mark.allow_dotenv
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(Exception):
        monkeypatch.setattr(
            "dotenv.load_dotenv", lambda *_args, **_kwargs: False, raising=False
        )


@pytest.fixture(autouse=True)
def isolate_provider_env(request, monkeypatch):
    """Ensure a clean provider environment for each test.

    Clears OPENAI_*, CLAUDE_* and ANTHROPIC_* env vars to prevent test pollution.
    Opt-out: @pytest.mark.allow_env_pollution or @pytest.mark.api
    """
    if request.node.get_closest_marker("allow_env_pollution") or (
        "api" in request.node.keywords
    ):
        return

    for key in list(os.environ.keys()):
        if key.startswith(("OPENAI_", "CLAUDE_", "ANTHROPIC_")):
            monkeypatch.delenv(key, raising=False)


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def quiet_noisy_libraries():
    """Suppress noisy third-party loggers."""
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


# =============================================================================
# Pytest Hooks
# =============================================================================

API_TESTS_REASON = "API tests require ENABLE_API_TESTS=1"


def _api_tests_enabled() -> bool:
    return bool(os.getenv("ENABLE_API_TESTS"))


def pytest_collection_modifyitems(items):
    """Automatically skip API tests when not explicitly enabled."""
    if _api_tests_enabled():
        return
    skip_api = pytest.mark.skip(reason=API_TESTS_REASON)
    for item in items:
        if "api" in item.keywords:
            item.add_marker(skip_api)


# =============================================================================
# Recorded Payloads
# =============================================================================


@pytest.fixture
def openai_payload() -> dict[str, Any]:
    """A single-message Responses API reply."""
    return load_payload("responses")


@pytest.fixture
def claude_payload() -> dict[str, Any]:
    """A single-text-block Messages API reply."""
    return load_payload("messages")


# =============================================================================
# API Test Configuration
# =============================================================================

# Cheapest models for live API tests.
_OPENAI_TEST_MODEL = "gpt-5-nano"
_CLAUDE_TEST_MODEL = "claude-haiku-4-5"


@pytest.fixture
def openai_api_key():
    """Return OPENAI_API_KEY or skip the test if unavailable."""
    key = os.getenv("OPENAI_API_KEY")
    if not key:
        pytest.skip("OPENAI_API_KEY not set")
    return key


@pytest.fixture
def claude_api_key():
    """Return CLAUDE_API_KEY or skip the test if unavailable."""
    key = os.getenv("CLAUDE_API_KEY")
    if not key:
        pytest.skip("CLAUDE_API_KEY not set")
    return key


@pytest.fixture
def openai_test_model():
    return _OPENAI_TEST_MODEL


@pytest.fixture
def claude_test_model():
    return _CLAUDE_TEST_MODEL
