"""Transport and provider protocols: the seams flarechat is built around."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from flarechat.types import ChunkCallback, ModelRequest, ModelResponse


@runtime_checkable
class Transport(Protocol):
    """Performs one HTTP-shaped request.

    Implementations return the raw reply body for a 2xx status and raise
    TransportError otherwise. They must be safe for concurrent use; flarechat
    does no locking around them and never retries.
    """

    async def post(
        self, url: str, *, headers: dict[str, str], body: dict[str, Any]
    ) -> bytes:
        """POST *body* as JSON and return the raw reply bytes."""
        ...

    async def aclose(self) -> None:
        """Release pooled resources."""
        ...


@runtime_checkable
class Provider(Protocol):
    """Runs one conversation turn against a remote model."""

    async def generate(
        self,
        request: ModelRequest,
        *,
        on_chunk: ChunkCallback | None = None,
    ) -> ModelResponse:
        """Generate the model's next turn."""
        ...

    async def aclose(self) -> None:
        """Close underlying resources."""
        ...
