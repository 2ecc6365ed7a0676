"""Canonical, provider-agnostic conversation types.

These are the values a host orchestration layer hands to flarechat and gets
back from it. They are immutable; one turn's messages are owned by the caller
for the duration of that turn.

Example:
    ```python
    from flarechat.types import Message, ModelRequest, ToolDefinition

    request = ModelRequest(
        messages=(Message.user("What is the weather in Eindhoven?"),),
        tools=(ToolDefinition("get_weather", "Look up current weather."),),
    )
    ```
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Literal

Role = Literal["system", "user", "model", "tool"]
FinishReason = Literal["stop"]


@dataclass(frozen=True)
class TextPart:
    """Plain text content."""

    text: str


@dataclass(frozen=True)
class ToolRequestPart:
    """A tool invocation requested by the model.

    ``ref`` is the correlation identifier the matching ToolResponsePart must
    carry on the following turn.
    """

    ref: str
    name: str
    input: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ToolResponsePart:
    """The caller-supplied result of a tool invocation."""

    ref: str
    name: str
    output: Any = None


Part = TextPart | ToolRequestPart | ToolResponsePart


@dataclass(frozen=True)
class Message:
    """One conversation turn."""

    role: Role
    content: tuple[Part, ...] = ()

    def __post_init__(self) -> None:
        """Accept any iterable of parts but store a tuple."""
        if not isinstance(self.content, tuple):
            object.__setattr__(self, "content", tuple(self.content))

    @classmethod
    def system(cls, text: str) -> Message:
        return cls("system", (TextPart(text),))

    @classmethod
    def user(cls, text: str) -> Message:
        return cls("user", (TextPart(text),))

    @classmethod
    def model(cls, text: str) -> Message:
        return cls("model", (TextPart(text),))

    def text(self) -> str:
        """Concatenate all text parts in order."""
        return "".join(p.text for p in self.content if isinstance(p, TextPart))

    def tool_requests(self) -> list[ToolRequestPart]:
        return [p for p in self.content if isinstance(p, ToolRequestPart)]

    def tool_responses(self) -> list[ToolResponsePart]:
        return [p for p in self.content if isinstance(p, ToolResponsePart)]


@dataclass(frozen=True)
class ToolDefinition:
    """A tool the model may call, with a JSON-schema-like input schema."""

    name: str
    description: str = ""
    input_schema: dict[str, Any] | None = None


@dataclass(frozen=True)
class ModelRequest:
    """Everything needed for one conversation turn."""

    messages: tuple[Message, ...]
    tools: tuple[ToolDefinition, ...] = ()

    def __post_init__(self) -> None:
        """Normalize list inputs to tuples."""
        if not isinstance(self.messages, tuple):
            object.__setattr__(self, "messages", tuple(self.messages))
        if not isinstance(self.tools, tuple):
            object.__setattr__(self, "tools", tuple(self.tools))


@dataclass(frozen=True)
class Usage:
    """Token accounting. Always present; zero when the provider is silent."""

    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0


@dataclass(frozen=True)
class ModelResponse:
    """The canonical result of one turn."""

    message: Message
    finish_reason: FinishReason
    usage: Usage
    #: The request this response answers, echoed back unchanged.
    request: ModelRequest

    def text(self) -> str:
        return self.message.text()

    def tool_requests(self) -> list[ToolRequestPart]:
        return self.message.tool_requests()


@dataclass(frozen=True)
class ModelResponseChunk:
    """An incremental piece of a response (see ``ChunkCallback``)."""

    content: tuple[Part, ...]


#: Per-chunk delivery hook. Accepted for API compatibility; responses are
#: always decoded from the full buffered reply and chunks are never delivered.
ChunkCallback = Callable[[ModelResponseChunk], Awaitable[None]]

__all__ = [
    "ChunkCallback",
    "FinishReason",
    "Message",
    "ModelRequest",
    "ModelResponse",
    "ModelResponseChunk",
    "Part",
    "Role",
    "TextPart",
    "ToolDefinition",
    "ToolRequestPart",
    "ToolResponsePart",
    "Usage",
]
