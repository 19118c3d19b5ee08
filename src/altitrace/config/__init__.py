"""Configuration package for the Altitrace client."""
from .client_config import (
    DEFAULT_BASE_URL,
    DEFAULT_RETRYABLE_STATUS_CODES,
    ClientConfig,
    RequestOptions,
    RetryConfig,
)
from .presets import local_config, production_config, testing_config
from .settings import AltitraceSettings

__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_RETRYABLE_STATUS_CODES",
    "ClientConfig",
    "RequestOptions",
    "RetryConfig",
    "AltitraceSettings",
    "local_config",
    "production_config",
    "testing_config",
]
