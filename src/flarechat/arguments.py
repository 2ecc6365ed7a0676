"""Tool-call argument normalization.

Different Workers AI models emit tool-call arguments in two JSON shapes:

- simple: ``{"location": "Eindhoven, NL"}``
- verbose: ``{"location": {"type": "string", "value": "Eindhoven, NL"}}``

Both collapse onto the simple shape here. The rule is applied per key, so a
single call may mix the two.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any
import uuid

from flarechat.errors import DecodeError
from flarechat.types import ToolRequestPart

if TYPE_CHECKING:
    from collections.abc import Iterable

    from flarechat.providers.models import WireToolCall


def normalize_arguments(raw: dict[str, Any]) -> dict[str, Any]:
    """Unwrap verbose ``{"value": ...}`` members; keep everything else as-is."""
    normalized: dict[str, Any] = {}
    for key, value in raw.items():
        if isinstance(value, dict) and "value" in value:
            normalized[key] = value["value"]
        else:
            normalized[key] = value
    return normalized


def parse_arguments(arguments: str | dict[str, Any] | None, *, name: str) -> dict[str, Any]:
    """Decode and normalize one call's arguments.

    Raises:
        DecodeError: If the arguments are not valid JSON or not a JSON object.
    """
    if isinstance(arguments, dict):
        return normalize_arguments(arguments)
    if arguments is None:
        # Legacy calls may omit the key entirely.
        return {}

    try:
        raw = json.loads(arguments)
    except (TypeError, ValueError) as e:
        raise DecodeError(
            f"failed to unmarshal tool arguments for {name!r}: {e}",
            tool_name=name,
        ) from e

    if not isinstance(raw, dict):
        raise DecodeError(
            f"tool arguments for {name!r} must be a JSON object, "
            f"got {type(raw).__name__}",
            tool_name=name,
        )
    return normalize_arguments(raw)


def to_tool_request_parts(calls: Iterable[WireToolCall]) -> list[ToolRequestPart]:
    """Convert provider tool calls into canonical ToolRequestParts.

    Order is preserved. One malformed call fails the whole batch: a partial
    set of tool calls is not safe to execute.
    """
    parts: list[ToolRequestPart] = []
    for call in calls:
        name = call.name
        parts.append(
            ToolRequestPart(
                ref=call.id or _synthesize_call_id(),
                name=name,
                input=parse_arguments(call.arguments, name=name),
            )
        )
    return parts


def _synthesize_call_id() -> str:
    # Legacy-format replies omit ids; the ref still has to round-trip.
    return f"call_{uuid.uuid4().hex[:24]}"
