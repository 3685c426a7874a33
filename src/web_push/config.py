"""
Web Push Configuration

Delivery defaults and runtime configuration for the push service.
"""

from collections.abc import Mapping
from typing import Final

from web_push.types import ConfigurationError, StrictBaseModel

DEFAULT_TTL: Final = 2_419_200
"""Seconds a push service should keep an undelivered message. Four weeks."""

DEFAULT_TIMEOUT_SECS: Final = 30.0
"""Timeout for a single request to the push service."""

GCM_API_KEY_ENV: Final = "GCM_API_KEY"
"""Environment variable holding the legacy Google Cloud Messaging API key."""

TIMEOUT_ENV: Final = "WEB_PUSH_TIMEOUT_SECS"
"""Environment variable overriding the request timeout."""


class PushServiceConfig(StrictBaseModel):
    """Runtime configuration for the push service."""

    gcm_api_key: str | None = None
    """API key for the legacy GCM path. Encrypted notifications do not need it."""

    timeout_secs: float = DEFAULT_TIMEOUT_SECS
    """Timeout for one request to the push service."""

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> "PushServiceConfig":
        """
        Build a configuration from environment variables.

        Empty values are treated as unset.

        Raises:
            ConfigurationError: If the timeout is not a positive number.
        """
        api_key = environ.get(GCM_API_KEY_ENV, "").strip() or None
        raw_timeout = environ.get(TIMEOUT_ENV, "").strip()

        timeout = DEFAULT_TIMEOUT_SECS
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError as exc:
                raise ConfigurationError(
                    f"{TIMEOUT_ENV} must be a number of seconds, got {raw_timeout!r}"
                ) from exc
            if not timeout > 0:
                raise ConfigurationError(f"{TIMEOUT_ENV} must be positive, got {raw_timeout!r}")

        return cls(gcm_api_key=api_key, timeout_secs=timeout)
