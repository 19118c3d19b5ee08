"""Client, retry and per-request configuration."""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, Optional

from ..core.errors import ConfigurationError

DEFAULT_BASE_URL = "http://localhost:8080/v1"
DEFAULT_TIMEOUT_MS = 30_000
DEFAULT_USER_AGENT = "altitrace-python/0.1.0"
DEFAULT_RETRYABLE_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})

# should_retry(error, attempt, status_code) -> bool
RetryPredicate = Callable[[Exception, int, Optional[int]], bool]


@dataclass(frozen=True)
class RetryConfig:
    """Retry policy for the transport layer.

    ``max_attempts`` counts total attempts including the first one.
    """
    max_attempts: int = 3
    base_delay_ms: int = 1000
    max_delay_ms: int = 30_000
    backoff_multiplier: float = 2.0
    retryable_status_codes: FrozenSet[int] = DEFAULT_RETRYABLE_STATUS_CODES
    should_retry: Optional[RetryPredicate] = None

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ConfigurationError("max_attempts must be at least 1", config_key="retry.max_attempts")
        if self.base_delay_ms < 0:
            raise ConfigurationError("base_delay_ms must not be negative", config_key="retry.base_delay_ms")
        if self.max_delay_ms < self.base_delay_ms:
            raise ConfigurationError(
                "max_delay_ms must be greater than or equal to base_delay_ms",
                config_key="retry.max_delay_ms",
            )
        if self.backoff_multiplier < 1:
            raise ConfigurationError(
                "backoff_multiplier must be at least 1", config_key="retry.backoff_multiplier"
            )

    def delay_for(self, retry_index: int) -> float:
        """Back-off in seconds before retry ``retry_index`` (0-based)."""
        delay_ms = min(self.base_delay_ms * (self.backoff_multiplier ** retry_index), self.max_delay_ms)
        return delay_ms / 1000.0


@dataclass(frozen=True)
class ClientConfig:
    """Configuration shared by every request a client issues."""
    base_url: str = DEFAULT_BASE_URL
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    retry: RetryConfig = field(default_factory=RetryConfig)
    headers: Dict[str, str] = field(default_factory=dict)
    user_agent: str = DEFAULT_USER_AGENT
    debug: bool = False

    def __post_init__(self):
        if not self.base_url:
            raise ConfigurationError("base_url is required", config_key="base_url")
        if not self.base_url.startswith(("http://", "https://")):
            raise ConfigurationError(
                f"base_url must start with http:// or https://, got {self.base_url!r}",
                config_key="base_url",
            )
        if self.timeout_ms <= 0:
            raise ConfigurationError("timeout_ms must be positive", config_key="timeout_ms")

    def default_headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }
        headers.update(self.headers)
        return headers

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "base_url": self.base_url,
            "timeout_ms": self.timeout_ms,
            "max_attempts": self.retry.max_attempts,
            "base_delay_ms": self.retry.base_delay_ms,
            "max_delay_ms": self.retry.max_delay_ms,
            "debug": self.debug,
        }


@dataclass(frozen=True)
class RequestOptions:
    """Per-request overrides. ``retry=False`` limits the request to one attempt."""
    timeout_ms: Optional[int] = None
    headers: Dict[str, str] = field(default_factory=dict)
    retry: bool = True

    def __post_init__(self):
        if self.timeout_ms is not None and self.timeout_ms <= 0:
            raise ConfigurationError("timeout_ms must be positive", config_key="timeout_ms")

    def merge(self, other: Optional["RequestOptions"]) -> "RequestOptions":
        """Overlay ``other`` on top of these options."""
        if other is None:
            return self
        headers = dict(self.headers)
        headers.update(other.headers)
        return RequestOptions(
            timeout_ms=other.timeout_ms if other.timeout_ms is not None else self.timeout_ms,
            headers=headers,
            retry=other.retry,
        )
