"""Canonical role <-> Workers AI role token mapping."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from flarechat.types import Role

logger = logging.getLogger(__name__)

#: Unknown canonical roles are sent as this token instead of failing.
UNKNOWN_ROLE_FALLBACK = "user"

_TO_PROVIDER: dict[str, str] = {
    "user": "user",
    "model": "assistant",
    "system": "system",
    "tool": "tool",
}
_FROM_PROVIDER: dict[str, Role] = {
    "user": "user",
    "assistant": "model",
    "system": "system",
    "tool": "tool",
}
_LABELS: dict[str, str] = {
    "system": "System",
    "user": "User",
    "model": "Assistant",
}


def to_provider_role(role: str) -> str:
    """Map a canonical role to its provider token.

    Fail-open: an unrecognized role maps to ``UNKNOWN_ROLE_FALLBACK`` and a
    warning is logged, so an unexpected role from a host never aborts a turn.
    """
    token = _TO_PROVIDER.get(role)
    if token is None:
        logger.warning(
            "Unknown role %r mapped to %r", role, UNKNOWN_ROLE_FALLBACK
        )
        return UNKNOWN_ROLE_FALLBACK
    return token


def from_provider_role(token: str) -> Role:
    """Map a provider role token back to a canonical role."""
    role = _FROM_PROVIDER.get(token)
    if role is None:
        logger.warning("Unknown provider role %r mapped to 'user'", token)
        return "user"
    return role


def role_label(role: str) -> str | None:
    """Return the flattened-prompt label for *role*, or None for tool turns."""
    if role == "tool":
        return None
    if role not in _LABELS:
        role = from_provider_role(to_provider_role(role))
    return _LABELS[role]
