"""Wire models for the Workers AI ``ai/run`` endpoint.

Outbound messages are plain frozen dataclasses with ``to_dict()``; inbound
replies are untrusted JSON and go through pydantic validation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

# =============================================================================
# Outbound
# =============================================================================


@dataclass(frozen=True)
class ToolCall:
    """A tool call replayed to the provider as conversation history."""

    id: str
    name: str
    #: JSON-encoded object string.
    arguments: str
    type: str = "function"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "function": {"name": self.name, "arguments": self.arguments},
        }


@dataclass(frozen=True)
class ChatMessage:
    """A plain system/user/assistant turn."""

    role: str
    content: str

    def to_dict(self) -> dict[str, Any]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class AssistantToolCallMessage:
    """An assistant turn that carries tool calls instead of text.

    ``content`` is always serialized, as an empty string by default: strict
    models (qwen) reject an assistant message with the field missing.
    """

    tool_calls: tuple[ToolCall, ...]
    content: str = ""
    role: str = "assistant"

    def to_dict(self) -> dict[str, Any]:
        return {
            "role": self.role,
            "content": self.content,
            "tool_calls": [tc.to_dict() for tc in self.tool_calls],
        }


@dataclass(frozen=True)
class ToolResultMessage:
    """A tool result, correlated to its call through ``tool_call_id``."""

    content: str
    tool_call_id: str
    role: str = "tool"

    def to_dict(self) -> dict[str, Any]:
        return {
            "role": self.role,
            "content": self.content,
            "tool_call_id": self.tool_call_id,
        }


WireMessage = ChatMessage | AssistantToolCallMessage | ToolResultMessage


# =============================================================================
# Inbound
# =============================================================================


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class WireError(_WireModel):
    """One entry of the reply's ``errors`` array."""

    code: int | None = None
    message: str = ""

    @field_validator("message", mode="before")
    @classmethod
    def _null_as_blank(cls, value: Any) -> Any:
        return "" if value is None else value


class WireUsage(_WireModel):
    prompt_tokens: int | None = None
    completion_tokens: int | None = None
    total_tokens: int | None = None


class WireToolCall(_WireModel):
    """A tool call returned by the model.

    Accepts both the OpenAI-style shape
    ``{"id", "type", "function": {"name", "arguments": "<json>"}}`` and the
    legacy flat shape ``{"name", "arguments": {...}}`` (no id).
    """

    id: str | None = None
    name: str = ""
    arguments: str | dict[str, Any] | None = None

    @model_validator(mode="before")
    @classmethod
    def _flatten_function(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("function"), dict):
            function = data["function"]
            return {
                "id": data.get("id"),
                "name": function.get("name", ""),
                "arguments": function.get("arguments"),
            }
        return data


class ChoiceMessage(_WireModel):
    role: str = "assistant"
    content: str | None = None
    tool_calls: list[WireToolCall] | None = None


class Choice(_WireModel):
    message: ChoiceMessage
    finish_reason: str | None = None


class ChatCompletionResult(_WireModel):
    """OpenAI-compatible result returned by newer chat models."""

    choices: list[Choice]
    usage: WireUsage | None = None


class LegacyResult(_WireModel):
    """Native Workers AI result: ``{"response", "tool_calls", "usage"}``."""

    response: Any = None
    tool_calls: list[WireToolCall] | None = None
    usage: WireUsage | None = None


class WireResponse(_WireModel):
    """The reply envelope: ``{"success", "result", "errors", "messages"}``."""

    success: bool
    #: Free-form: a string, a LegacyResult or a ChatCompletionResult payload.
    result: Any = None
    errors: list[WireError] = []
    messages: list[Any] = []

    @field_validator("errors", "messages", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value
