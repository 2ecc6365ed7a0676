"""Exception hierarchy for flarechat."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator


class FlarechatError(Exception):
    """Base exception for all flarechat errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(FlarechatError):
    """Configuration validation or resolution failed."""


class InternalError(FlarechatError):
    """A flarechat internal error (bug) or invariant violation."""


class EncodeError(FlarechatError):
    """Canonical input could not be encoded for the wire.

    Raised for non-serializable tool inputs or outputs; ``tool_name`` names
    the offending tool when one is involved.
    """

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        tool_name: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.tool_name = tool_name


class SchemaConversionError(EncodeError):
    """A tool input schema uses features the provider cannot represent."""


class DecodeError(FlarechatError):
    """A provider reply could not be decoded.

    Covers a malformed reply body as well as malformed tool-call arguments.
    For the latter, ``tool_name`` carries the function name of the bad call.
    """

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        tool_name: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.tool_name = tool_name


class ProviderError(FlarechatError):
    """The provider answered with ``success: false``."""

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        code: int | None = None,
        provider_message: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.code = code
        self.provider_message = provider_message


class TransportError(FlarechatError):
    """The request never produced a usable reply body.

    ``retryable`` is advisory metadata for callers that run their own retry
    policy; flarechat itself never retries.
    """

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        status_code: int | None = None,
        body: str | None = None,
        retryable: bool | None = None,
        retry_after_s: float | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.status_code = status_code
        self.body = body
        self.retryable = retryable
        self.retry_after_s = retry_after_s


class RateLimitError(TransportError):
    """Rate limit exceeded (HTTP 429)."""


def _walk_exception_chain(exc: BaseException) -> Iterator[BaseException]:
    """Yield *exc* and its ``__cause__``/``__context__`` chain, with cycle protection."""
    seen: set[int] = set()
    stack: list[BaseException] = [exc]
    while stack:
        cur = stack.pop()
        if id(cur) in seen:
            continue
        seen.add(id(cur))
        yield cur

        cause = cur.__cause__
        if isinstance(cause, BaseException):
            stack.append(cause)
        context = cur.__context__
        if isinstance(context, BaseException):
            stack.append(context)
