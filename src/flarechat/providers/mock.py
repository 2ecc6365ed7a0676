"""Mock transport for offline use and tests."""

from __future__ import annotations

import json
from typing import Any


class MockTransport:
    """Answer every request with a deterministic Workers AI-shaped reply.

    Echo the last non-empty user message (or the flattened prompt) so callers
    can see what was sent without making API calls.
    """

    def __init__(self) -> None:
        self.requests: list[dict[str, Any]] = []

    async def post(
        self, url: str, *, headers: dict[str, str], body: dict[str, Any]
    ) -> bytes:
        """Record the request and return a canned success reply."""
        self.requests.append({"url": url, "headers": headers, "body": body})
        text = _last_user_text(body)
        reply = {
            "success": True,
            "result": {
                "response": f"echo: {text[:100]}",
                "usage": {"prompt_tokens": 10, "completion_tokens": 10, "total_tokens": 20},
            },
            "errors": [],
            "messages": [],
        }
        return json.dumps(reply).encode("utf-8")

    async def aclose(self) -> None:
        """Nothing to release."""


def _last_user_text(body: dict[str, Any]) -> str:
    for message in reversed(body.get("messages", [])):
        content = message.get("content")
        if message.get("role") == "user" and isinstance(content, str) and content.strip():
            return content
    prompt = body.get("prompt")
    return prompt if isinstance(prompt, str) else ""
