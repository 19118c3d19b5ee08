"""Exception hierarchy for the Altitrace client."""
from enum import Enum
from typing import Any, Dict, Optional


class NetworkErrorKind(str, Enum):
    """Classification of transport-level failures."""
    TIMEOUT = "timeout"
    CONNECTION = "connection"
    MALFORMED_RESPONSE = "malformed_response"
    UNKNOWN = "unknown"


class AltitraceError(Exception):
    """Base exception for Altitrace-related errors."""

    code = "ALTITRACE_ERROR"

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging and result payloads."""
        return {
            "type": type(self).__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class ValidationError(AltitraceError):
    """Request failed local validation before any network call."""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, details=details)


class ConfigurationError(AltitraceError):
    """Client configuration is invalid."""

    code = "CONFIGURATION_ERROR"

    def __init__(self, message: str, config_key: Optional[str] = None):
        super().__init__(message, details={"config_key": config_key} if config_key else None)
        self.config_key = config_key


class NetworkError(AltitraceError):
    """Transport failure: timeout, connection loss or an unparseable response."""

    code = "NETWORK_ERROR"

    def __init__(
        self,
        message: str,
        kind: NetworkErrorKind = NetworkErrorKind.UNKNOWN,
        status_code: Optional[int] = None,
        attempts: int = 1,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, details={"kind": kind.value, "status_code": status_code})
        self.kind = kind
        self.status_code = status_code
        self.attempts = attempts
        self.cause = cause

    @property
    def is_timeout(self) -> bool:
        return self.kind == NetworkErrorKind.TIMEOUT

    @property
    def is_retryable(self) -> bool:
        """Malformed responses are deterministic and never retried."""
        return self.kind != NetworkErrorKind.MALFORMED_RESPONSE


class AltitraceApiError(AltitraceError):
    """The service answered with an error envelope or a non-2xx status."""

    code = "API_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        suggestion: Optional[str] = None,
        details: Optional[Any] = None,
        request_id: Optional[str] = None,
        attempts: int = 1,
    ):
        super().__init__(message, code=code, details=details)
        self.status_code = status_code
        self.suggestion = suggestion
        self.request_id = request_id
        self.attempts = attempts

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "status_code": self.status_code,
            "suggestion": self.suggestion,
            "request_id": self.request_id,
        })
        return data
