"""flarechat: a canonical-conversation adapter for Cloudflare Workers AI.

Public API:
    - generate(): Run one conversation turn
    - WorkersAIProvider: Reusable provider for concurrent turns
    - Message, ToolDefinition, ...: Canonical conversation types
    - Config: Configuration dataclass
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from flarechat.config import Config
from flarechat.errors import (
    ConfigurationError,
    DecodeError,
    EncodeError,
    FlarechatError,
    InternalError,
    ProviderError,
    RateLimitError,
    SchemaConversionError,
    TransportError,
)
from flarechat.providers.workersai import WorkersAIProvider
from flarechat.types import (
    Message,
    ModelRequest,
    ModelResponse,
    TextPart,
    ToolDefinition,
    ToolRequestPart,
    ToolResponsePart,
    Usage,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from flarechat.providers.base import Transport
    from flarechat.types import ChunkCallback

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("flarechat")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("flarechat").addHandler(logging.NullHandler())

logger = logging.getLogger(__name__)


async def generate(
    messages: Sequence[Message],
    *,
    config: Config,
    tools: Sequence[ToolDefinition] | None = None,
    on_chunk: ChunkCallback | None = None,
    transport: Transport | None = None,
) -> ModelResponse:
    """Run a single conversation turn.

    Args:
        messages: The canonical history, oldest first.
        config: Configuration specifying the model and credentials.
        tools: Optional tool definitions the model may call.
        on_chunk: Accepted for compatibility; never called (see
            ``WorkersAIProvider.generate``).
        transport: Optional transport; defaults to a fresh httpx client.

    Returns:
        ModelResponse with either one TextPart or the requested tool calls.

    Example:
        config = Config(model="@cf/meta/llama-3.3-70b-instruct-fp8-fast")
        response = await generate([Message.user("Hi")], config=config)
        print(response.text())
    """
    request = ModelRequest(messages=tuple(messages), tools=tuple(tools or ()))
    provider = WorkersAIProvider.from_config(config, transport=transport)
    try:
        return await provider.generate(request, on_chunk=on_chunk)
    finally:
        try:
            await provider.aclose()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            # Cleanup should never mask the primary failure.
            logger.warning("Provider cleanup failed: %s", exc)


__all__ = [
    "Config",
    "ConfigurationError",
    "DecodeError",
    "EncodeError",
    "FlarechatError",
    "InternalError",
    "Message",
    "ModelRequest",
    "ModelResponse",
    "ProviderError",
    "RateLimitError",
    "SchemaConversionError",
    "TextPart",
    "ToolDefinition",
    "ToolRequestPart",
    "ToolResponsePart",
    "TransportError",
    "Usage",
    "WorkersAIProvider",
    "generate",
]
