"""Default httpx-based transport."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from flarechat._http import DEFAULT_TIMEOUT_S
from flarechat.providers._errors import status_error, wrap_transport_error

logger = logging.getLogger(__name__)


class HttpxTransport:
    """POST JSON over a pooled ``httpx.AsyncClient``.

    The client is created lazily and shared by every turn that uses this
    transport; httpx clients are safe for concurrent use. A client passed in by
    the caller is never closed here.
    """

    def __init__(
        self,
        *,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.timeout_s = timeout_s
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout_s),
                headers={"User-Agent": "flarechat"},
                limits=httpx.Limits(max_keepalive_connections=20, max_connections=100),
            )
        return self._client

    async def post(
        self, url: str, *, headers: dict[str, str], body: dict[str, Any]
    ) -> bytes:
        """POST *body* and return the raw reply bytes for a 2xx status.

        Raises:
            TransportError: On network failure, timeout, or a non-2xx status.
        """
        client = self._get_client()
        try:
            response = await client.post(url, headers=headers, json=body)
        except asyncio.CancelledError:
            raise
        except httpx.HTTPError as e:
            raise wrap_transport_error(e) from e

        if not response.is_success:
            logger.debug("workersai returned status %d", response.status_code)
            raise status_error(response.status_code, response.text, response.headers)
        return response.content

    async def aclose(self) -> None:
        """Close the underlying client if this transport created it."""
        client = self._client
        if client is None or not self._owns_client:
            return
        self._client = None
        await client.aclose()
