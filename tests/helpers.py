"""Test helpers (small, reusable builders).

Keep this file tiny and purpose-built: it exists to prevent test suites from
growing lots of one-off reply dicts and provider constructions.
"""

from __future__ import annotations

import json
from typing import Any

from flarechat.providers.workersai import WorkersAIProvider
from tests.conftest import CHAT_MODEL, FakeTransport


def make_provider(
    transport: FakeTransport, *, model: str = CHAT_MODEL
) -> WorkersAIProvider:
    """Build a provider with fixed test credentials."""
    return WorkersAIProvider(
        model=model,
        account_id="acct-123",
        api_token="token-abc",
        transport=transport,
    )


def tool_call(call_id: str | None, name: str, arguments: Any) -> dict[str, Any]:
    """Return an OpenAI-style wire tool call; dict arguments are JSON-encoded."""
    if not isinstance(arguments, str):
        arguments = json.dumps(arguments)
    call: dict[str, Any] = {
        "type": "function",
        "function": {"name": name, "arguments": arguments},
    }
    if call_id is not None:
        call["id"] = call_id
    return call


def chat_reply(
    *,
    content: str | None = None,
    tool_calls: list[dict[str, Any]] | None = None,
    usage: dict[str, int] | None = None,
) -> dict[str, Any]:
    """Return a successful chat-completion-shaped reply envelope."""
    message: dict[str, Any] = {"role": "assistant", "content": content}
    if tool_calls is not None:
        message["tool_calls"] = tool_calls
    result: dict[str, Any] = {
        "object": "chat.completion",
        "choices": [{"index": 0, "message": message, "finish_reason": "stop"}],
    }
    if usage is not None:
        result["usage"] = usage
    return {"success": True, "result": result, "errors": [], "messages": []}
