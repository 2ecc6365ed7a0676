"""Configuration: Frozen Config with explicit model and resolved credentials."""

from __future__ import annotations

from dataclasses import dataclass
import os

from dotenv import load_dotenv

from flarechat._http import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_S
from flarechat.errors import ConfigurationError

load_dotenv()

_API_TOKEN_ENV_VAR = "CLOUDFLARE_API_TOKEN"
_ACCOUNT_ID_ENV_VAR = "CLOUDFLARE_ACCOUNT_ID"


@dataclass(frozen=True)
class Config:
    """Immutable configuration for one Workers AI model.

    The model is required. Credentials are auto-resolved from standard
    environment variables when not passed explicitly.

    Example:
        config = Config(model="@cf/meta/llama-3.3-70b-instruct-fp8-fast")
        # api_token and account_id come from CLOUDFLARE_API_TOKEN and
        # CLOUDFLARE_ACCOUNT_ID
    """

    model: str
    #: Auto-resolved from ``CLOUDFLARE_API_TOKEN`` when *None*.
    api_token: str | None = None
    #: Auto-resolved from ``CLOUDFLARE_ACCOUNT_ID`` when *None*.
    account_id: str | None = None
    base_url: str = DEFAULT_BASE_URL
    timeout_s: float = DEFAULT_TIMEOUT_S
    use_mock: bool = False

    def __post_init__(self) -> None:
        """Auto-resolve credentials and validate configuration."""
        if not isinstance(self.model, str) or not self.model.strip():
            raise ConfigurationError(
                "model must be a non-empty string",
                hint="Pass a Workers AI model id like '@cf/qwen/qwen3-30b-a3b-fp8'.",
            )
        if self.timeout_s <= 0:
            raise ConfigurationError(
                f"timeout_s must be > 0, got {self.timeout_s}",
                hint="This bounds a single request to the provider, in seconds.",
            )
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

        if self.use_mock:
            return

        if self.api_token is None:
            object.__setattr__(self, "api_token", os.environ.get(_API_TOKEN_ENV_VAR))
        if self.account_id is None:
            object.__setattr__(self, "account_id", os.environ.get(_ACCOUNT_ID_ENV_VAR))

        if not self.api_token:
            raise ConfigurationError(
                "API token required for Workers AI",
                hint=f"Set {_API_TOKEN_ENV_VAR} environment variable or pass api_token=...",
            )
        if not self.account_id:
            raise ConfigurationError(
                "Account id required for Workers AI",
                hint=f"Set {_ACCOUNT_ID_ENV_VAR} environment variable or pass account_id=...",
            )

    def __str__(self) -> str:
        """Return a redacted, developer-friendly representation."""
        return (
            f"Config(model={self.model!r}, account_id={self.account_id!r}, "
            f"api_token={'[REDACTED]' if self.api_token else None}, "
            f"use_mock={self.use_mock})"
        )

    __repr__ = __str__
