"""Canonical history -> Workers AI wire messages.

Chat-capable models get structured ``messages``; everything else gets the
whole history flattened into a single ``prompt`` string. Tool-call
correlation is carried by ``ref`` on the canonical side and by
``id``/``tool_call_id`` on the wire.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from flarechat.errors import EncodeError, InternalError
from flarechat.providers.models import (
    AssistantToolCallMessage,
    ChatMessage,
    ToolCall,
    ToolResultMessage,
    WireMessage,
)
from flarechat.roles import role_label, to_provider_role
from flarechat.types import TextPart, ToolRequestPart, ToolResponsePart

if TYPE_CHECKING:
    from collections.abc import Sequence

    from flarechat.types import Message

logger = logging.getLogger(__name__)

#: Model families that accept structured chat ``messages`` (substring match).
CHAT_MODEL_FAMILIES: tuple[str, ...] = (
    "llama",
    "mistral",
    "qwen",
    "gemma",
    "hermes",
    "deepseek",
    "openchat",
    "phi",
    "granite",
    "gpt-oss",
)


def supports_chat(model: str) -> bool:
    """Return True when *model* belongs to a known chat-capable family."""
    lowered = model.lower()
    return any(family in lowered for family in CHAT_MODEL_FAMILIES)


def encode_messages(messages: Sequence[Message]) -> list[WireMessage]:
    """Encode a canonical history as structured chat messages.

    A model turn carrying tool requests becomes a single assistant tool-call
    message; any text in that same turn is dropped.

    Raises:
        EncodeError: If a tool input or output cannot be JSON-encoded.
    """
    wire: list[WireMessage] = []
    for msg in messages:
        if msg.role == "model":
            encoded = _encode_model_turn(msg)
            if encoded is not None:
                wire.append(encoded)
        elif msg.role == "tool":
            wire.extend(_encode_tool_turn(msg))
        else:
            text = _joined_text(msg)
            if text:
                wire.append(ChatMessage(role=to_provider_role(msg.role), content=text))
    return wire


def flatten_prompt(messages: Sequence[Message]) -> str:
    """Render a history as ``"<Label>: <text>\\n"`` lines.

    Tool turns are skipped: prompt-only models never see tool traffic.
    """
    lines: list[str] = []
    for msg in messages:
        label = role_label(msg.role)
        if label is None:
            continue
        text = _joined_text(msg)
        if not text:
            continue
        lines.append(f"{label}: {text}\n")
    return "".join(lines)


def encode_conversation(messages: Sequence[Message], model: str) -> dict[str, Any]:
    """Build the conversation portion of a request body for *model*."""
    if supports_chat(model):
        wire = encode_messages(messages)
        logger.debug("Encoded %d wire messages for %s", len(wire), model)
        return {"messages": [m.to_dict() for m in wire]}

    logger.debug("Model %s is prompt-only; flattening %d messages", model, len(messages))
    return {"prompt": flatten_prompt(messages)}


def _joined_text(msg: Message) -> str:
    chunks: list[str] = []
    for part in msg.content:
        match part:
            case TextPart(text=text):
                chunks.append(text)
            case ToolRequestPart() | ToolResponsePart():
                pass
            case _:
                raise InternalError(f"Unknown part type: {type(part).__name__}")
    return "".join(chunks)


def _encode_model_turn(msg: Message) -> WireMessage | None:
    tool_calls: list[ToolCall] = []
    has_text = False
    for part in msg.content:
        match part:
            case ToolRequestPart(ref=ref, name=name, input=args):
                tool_calls.append(
                    ToolCall(id=ref, name=name, arguments=_dumps(args, name, "input"))
                )
            case TextPart(text=text):
                has_text = has_text or bool(text)
            case ToolResponsePart():
                pass
            case _:
                raise InternalError(f"Unknown part type: {type(part).__name__}")

    if tool_calls:
        if has_text:
            logger.debug(
                "Dropping assistant text alongside %d tool call(s)", len(tool_calls)
            )
        return AssistantToolCallMessage(tool_calls=tuple(tool_calls))

    text = _joined_text(msg)
    if not text:
        return None
    return ChatMessage(role=to_provider_role(msg.role), content=text)


def _encode_tool_turn(msg: Message) -> list[WireMessage]:
    return [
        ToolResultMessage(
            content=_dumps(part.output, part.name, "output"), tool_call_id=part.ref
        )
        for part in msg.tool_responses()
    ]


def _dumps(value: Any, name: str, what: str) -> str:
    try:
        return json.dumps(value, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        raise EncodeError(
            f"failed to marshal tool {what} for {name!r}: {e}",
            hint="Tool inputs and outputs must be JSON-serializable.",
            tool_name=name,
        ) from e
