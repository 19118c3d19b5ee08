"""Client settings loaded from environment variables."""
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings

from .client_config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_MS, DEFAULT_USER_AGENT, ClientConfig, RetryConfig


class AltitraceSettings(BaseSettings):
    """Altitrace client settings loaded from environment variables."""

    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="Base URL of the Altitrace API, including the version prefix",
        alias="ALTITRACE_BASE_URL"
    )

    timeout_ms: int = Field(
        default=DEFAULT_TIMEOUT_MS,
        description="Per-attempt request timeout in milliseconds",
        alias="ALTITRACE_TIMEOUT_MS"
    )

    max_attempts: int = Field(
        default=3,
        description="Total attempts per request, including the first",
        alias="ALTITRACE_MAX_ATTEMPTS"
    )

    base_delay_ms: int = Field(
        default=1000,
        description="Initial retry back-off in milliseconds",
        alias="ALTITRACE_BASE_DELAY_MS"
    )

    max_delay_ms: int = Field(
        default=30_000,
        description="Upper bound on retry back-off in milliseconds",
        alias="ALTITRACE_MAX_DELAY_MS"
    )

    backoff_multiplier: float = Field(
        default=2.0,
        description="Exponential back-off multiplier",
        alias="ALTITRACE_BACKOFF_MULTIPLIER"
    )

    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        description="User-Agent header sent with each request",
        alias="ALTITRACE_USER_AGENT"
    )

    debug: bool = Field(
        default=False,
        description="Log request and response details",
        alias="ALTITRACE_DEBUG"
    )

    api_key: Optional[str] = Field(
        default=None,
        description="Optional bearer token for hosted deployments",
        alias="ALTITRACE_API_KEY"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
        "populate_by_name": True,
    }

    def to_client_config(self) -> ClientConfig:
        """Build a validated ClientConfig from these settings."""
        headers = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        return ClientConfig(
            base_url=self.base_url,
            timeout_ms=self.timeout_ms,
            retry=RetryConfig(
                max_attempts=self.max_attempts,
                base_delay_ms=self.base_delay_ms,
                max_delay_ms=self.max_delay_ms,
                backoff_multiplier=self.backoff_multiplier,
            ),
            headers=headers,
            user_agent=self.user_agent,
            debug=self.debug,
        )
