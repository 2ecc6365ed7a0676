"""Pytest configuration and fixtures.

Provides environment isolation, logging configuration, marker registration,
and automatic API test skipping. All fixtures here are autouse unless noted.
"""

from __future__ import annotations

from contextlib import suppress
from dataclasses import dataclass, field
import json
import logging
import os
from typing import Any

import pytest

# =============================================================================
# Test Doubles
# =============================================================================


@dataclass
class FakeTransport:
    """Transport test double for provider behavior verification.

    Records every request and returns configurable reply bodies. Use to test
    encode/decode behavior without making real API calls.
    """

    reply: dict[str, Any] | bytes | BaseException = field(
        default_factory=lambda: {"success": True, "result": {"response": "ok"}}
    )
    calls: list[dict[str, Any]] = field(default_factory=list)
    closed: bool = False

    async def post(
        self, url: str, *, headers: dict[str, str], body: dict[str, Any]
    ) -> bytes:
        self.calls.append({"url": url, "headers": headers, "body": body})
        if isinstance(self.reply, BaseException):
            raise self.reply
        if isinstance(self.reply, bytes):
            return self.reply
        return json.dumps(self.reply).encode("utf-8")

    async def aclose(self) -> None:
        self.closed = True

    @property
    def last_body(self) -> dict[str, Any]:
        return self.calls[-1]["body"]


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

    Clears CLOUDFLARE_* env vars to prevent test pollution.
    Opt-out: @pytest.mark.allow_env_pollution or @pytest.mark.api
    """
    if request.node.get_closest_marker("allow_env_pollution") or (
        "api" in request.node.keywords
    ):
        return

    for key in list(os.environ.keys()):
        if key.startswith("CLOUDFLARE_"):
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
# Shared Fixtures
# =============================================================================

#: A chat-capable model: structured messages and tools.
CHAT_MODEL = "@cf/meta/llama-3.3-70b-instruct-fp8-fast"
#: A model outside every chat family: flattened prompt only.
PROMPT_MODEL = "@cf/tiiuae/falcon-7b-instruct"

# Qwen handles tool calling reliably on Workers AI.
_LIVE_TEST_MODEL = "@cf/qwen/qwen3-30b-a3b-fp8"


@pytest.fixture
def chat_model() -> str:
    return CHAT_MODEL


@pytest.fixture
def prompt_model() -> str:
    return PROMPT_MODEL


@pytest.fixture
def fake_transport() -> FakeTransport:
    """Return a FakeTransport answering with a plain text reply."""
    return FakeTransport()


@pytest.fixture
def cloudflare_credentials() -> tuple[str, str]:
    """Return (account_id, api_token) or skip the test if unavailable."""
    account_id = os.getenv("CLOUDFLARE_ACCOUNT_ID")
    api_token = os.getenv("CLOUDFLARE_API_TOKEN")
    if not account_id or not api_token:
        pytest.skip("CLOUDFLARE_ACCOUNT_ID / CLOUDFLARE_API_TOKEN not set")
    return account_id, api_token


@pytest.fixture
def live_test_model() -> str:
    """Return the model to use for Workers AI API tests."""
    return _LIVE_TEST_MODEL
