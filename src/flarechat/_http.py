"""Small HTTP-related constants shared across flarechat.

This module is intentionally tiny to avoid circular imports and drift.
"""

from __future__ import annotations

DEFAULT_BASE_URL = "https://api.cloudflare.com/client/v4"
DEFAULT_TIMEOUT_S = 60.0

# Status codes a caller-side retry policy may reasonably retry.
RETRYABLE_STATUS_CODES: frozenset[int] = frozenset({408, 409, 429, 500, 502, 503, 504})
