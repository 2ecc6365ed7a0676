"""Cloudflare Workers AI provider implementation."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from flarechat._http import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_S
from flarechat.conversation import encode_conversation, supports_chat
from flarechat.decoding import decode_response, parse_wire_response
from flarechat.errors import TransportError
from flarechat.providers._errors import wrap_transport_error
from flarechat.providers.transport import HttpxTransport
from flarechat.tool_schema import encode_tools

if TYPE_CHECKING:
    from flarechat.config import Config
    from flarechat.providers.base import Transport
    from flarechat.types import ChunkCallback, ModelRequest, ModelResponse

logger = logging.getLogger(__name__)


class WorkersAIProvider:
    """Workers AI ``ai/run`` provider.

    Holds only immutable per-model configuration plus a transport handle, so
    one instance can serve concurrent turns.
    """

    def __init__(
        self,
        *,
        model: str,
        account_id: str,
        api_token: str,
        base_url: str = DEFAULT_BASE_URL,
        transport: Transport | None = None,
        timeout_s: float = DEFAULT_TIMEOUT_S,
    ) -> None:
        """Initialize with model, credentials and an optional transport.

        A transport created here is owned and closed by ``aclose()``; one passed
        in belongs to the caller.
        """
        self._model = model
        self._account_id = account_id
        self._api_token = api_token
        self._base_url = base_url.rstrip("/")
        self._owns_transport = transport is None
        self._transport: Transport = transport or HttpxTransport(timeout_s=timeout_s)

    @classmethod
    def from_config(
        cls, config: Config, *, transport: Transport | None = None
    ) -> WorkersAIProvider:
        """Build a provider from a resolved Config."""
        if transport is None and config.use_mock:
            from flarechat.providers.mock import MockTransport

            transport = MockTransport()
        return cls(
            model=config.model,
            account_id=config.account_id or "mock",
            api_token=config.api_token or "mock",
            base_url=config.base_url,
            transport=transport,
            timeout_s=config.timeout_s,
        )

    @property
    def model(self) -> str:
        return self._model

    @property
    def url(self) -> str:
        return f"{self._base_url}/accounts/{self._account_id}/ai/run/{self._model}"

    def build_request(
        self, request: ModelRequest
    ) -> tuple[str, dict[str, str], dict[str, Any]]:
        """Return ``(url, headers, body)`` for one turn.

        Tools are only sent to chat-capable models, and the field is omitted
        entirely when there are none.
        """
        body = encode_conversation(request.messages, self._model)
        if supports_chat(self._model):
            tools = encode_tools(request.tools)
            if tools is not None:
                body["tools"] = tools
        elif request.tools:
            logger.debug(
                "Model %s is prompt-only; ignoring %d tool definition(s)",
                self._model,
                len(request.tools),
            )

        headers = {
            "Authorization": f"Bearer {self._api_token}",
            "Content-Type": "application/json",
        }
        return self.url, headers, body

    async def generate(
        self,
        request: ModelRequest,
        *,
        on_chunk: ChunkCallback | None = None,
    ) -> ModelResponse:
        """Run one turn: encode, call the transport once, decode.

        ``on_chunk`` is accepted for compatibility but never called: the reply
        is always buffered and decoded in full.

        Raises:
            EncodeError: If the request cannot be encoded.
            TransportError: If the call fails, times out or returns non-2xx.
            DecodeError: If the reply or a tool call's arguments are malformed.
            ProviderError: If the provider reports ``success: false``.
        """
        if on_chunk is not None:
            logger.debug("Streaming is not supported; returning a buffered response")

        url, headers, body = self.build_request(request)

        try:
            raw = await self._transport.post(url, headers=headers, body=body)
        except asyncio.CancelledError:
            raise
        except TransportError:
            raise
        except Exception as e:
            raise wrap_transport_error(e) from e

        wire = parse_wire_response(raw)
        return decode_response(wire, request)

    async def aclose(self) -> None:
        """Close the transport if this provider created it."""
        if self._owns_transport:
            await self._transport.aclose()
