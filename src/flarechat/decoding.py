"""Workers AI reply -> canonical ModelResponse."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from flarechat.arguments import to_tool_request_parts
from flarechat.errors import DecodeError, ProviderError
from flarechat.providers._errors import auth_hint
from flarechat.providers.models import (
    ChatCompletionResult,
    LegacyResult,
    WireResponse,
    WireToolCall,
    WireUsage,
)
from flarechat.types import Message, ModelResponse, TextPart, Usage

if TYPE_CHECKING:
    from flarechat.types import ModelRequest, Part

logger = logging.getLogger(__name__)


def parse_wire_response(raw: bytes | str) -> WireResponse:
    """Parse a raw reply body into a WireResponse.

    Raises:
        DecodeError: If the body is not JSON or not a reply envelope.
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise DecodeError(f"failed to parse provider reply as JSON: {e}") from e
    try:
        return WireResponse.model_validate(data)
    except ValidationError as e:
        raise DecodeError(f"unexpected provider reply shape: {e}") from e


def decode_response(wire: WireResponse, request: ModelRequest) -> ModelResponse:
    """Collapse one reply onto exactly one canonical response.

    Decision order: provider failure, then tool calls, then plain text. The
    finish reason is always ``"stop"``, tool calls included.

    Raises:
        ProviderError: If the reply reports ``success: false``.
        DecodeError: If the result or any tool call's arguments are malformed.
    """
    if not wire.success:
        raise _provider_error(wire)

    text, calls, wire_usage = _unpack_result(wire.result)

    content: list[Part]
    if calls:
        content = list(to_tool_request_parts(calls))
        logger.debug("Decoded %d tool request(s)", len(content))
    else:
        content = [TextPart(text)]

    return ModelResponse(
        message=Message(role="model", content=tuple(content)),
        finish_reason="stop",
        usage=_usage(wire_usage),
        request=request,
    )


def _provider_error(wire: WireResponse) -> ProviderError:
    if wire.errors:
        first = wire.errors[0]
        return ProviderError(
            f"workersai API returned an error: {first.code}: {first.message}",
            hint=auth_hint(code=first.code),
            code=first.code,
            provider_message=first.message,
        )
    return ProviderError("workersai API reported failure without error details")


def _unpack_result(result: Any) -> tuple[str, list[WireToolCall], WireUsage | None]:
    if result is None:
        return "", [], None
    if isinstance(result, str):
        return result, [], None
    if not isinstance(result, dict):
        raise DecodeError(
            f"unexpected result type in provider reply: {type(result).__name__}"
        )

    try:
        if "choices" in result:
            chat = ChatCompletionResult.model_validate(result)
            if not chat.choices:
                return "", [], chat.usage
            message = chat.choices[0].message
            return message.content or "", message.tool_calls or [], chat.usage

        legacy = LegacyResult.model_validate(result)
    except ValidationError as e:
        raise DecodeError(f"unexpected result shape in provider reply: {e}") from e

    response = legacy.response
    if response is None:
        text = ""
    elif isinstance(response, str):
        text = response
    else:
        # JSON-mode models return the response as an object.
        text = json.dumps(response)
    return text, legacy.tool_calls or [], legacy.usage


def _usage(wire_usage: WireUsage | None) -> Usage:
    if wire_usage is None:
        return Usage()
    input_tokens = wire_usage.prompt_tokens or 0
    output_tokens = wire_usage.completion_tokens or 0
    total = wire_usage.total_tokens
    return Usage(
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        total_tokens=total if total is not None else input_tokens + output_tokens,
    )
