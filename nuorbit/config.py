"""SDK configuration — env-driven defaults for the NuOrbit client.

Centralized config using pydantic-settings. Reads from a .env file and
NUORBIT_* environment variables. Explicit constructor arguments on the SDK
always win over these defaults.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(ValueError):
    """Raised for invalid or missing configuration, before any network activity."""


class SdkSettings(BaseSettings):
    """Client configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export NUORBIT_API_KEY=pk_live_123
        export NUORBIT_BASE_URL=https://galacticpools.io
        export NUORBIT_DEFAULT_PROVIDER_CALL_ID=registry-permit-v1

    Or via .env file::

        NUORBIT_API_KEY=pk_test_123
        NUORBIT_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="NUORBIT_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging (applied by the CLI)
    log_level: str = "INFO"

    # Remote session API
    api_key: str = ""
    base_url: str = ""
    default_provider_call_id: str | None = None
    request_timeout_seconds: float = 30.0

    # Flow pacing (milliseconds)
    step_delay_ms: int = 400
    proof_delay_ms: int = 900

    # Checkout popup
    checkout_path: str = "/demo/checkout"
    close_poll_interval_ms: int = 600


# Module-level singleton — import as `from nuorbit.config import config`
config = SdkSettings()
