"""Named client configurations for common environments."""
from dataclasses import replace
from typing import Any

from .client_config import ClientConfig, RetryConfig

PRODUCTION_BASE_URL = "https://altitrace.reachaltitude.xyz/v1"


def local_config(**overrides: Any) -> ClientConfig:
    """Local development server with debug logging enabled."""
    return replace(ClientConfig(debug=True), **overrides)


def production_config(**overrides: Any) -> ClientConfig:
    """Hosted service with a longer timeout and more retries."""
    config = ClientConfig(
        base_url=PRODUCTION_BASE_URL,
        timeout_ms=60_000,
        retry=RetryConfig(max_attempts=5),
    )
    return replace(config, **overrides)


def testing_config(**overrides: Any) -> ClientConfig:
    """Fail fast: single attempt and a short timeout."""
    config = ClientConfig(
        timeout_ms=10_000,
        retry=RetryConfig(max_attempts=1),
    )
    return replace(config, **overrides)
