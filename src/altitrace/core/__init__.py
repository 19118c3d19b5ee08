"""Core transport, validation and error types."""
from .errors import (
    AltitraceApiError,
    AltitraceError,
    ConfigurationError,
    NetworkError,
    NetworkErrorKind,
    ValidationError,
)
from .http_client import HttpClient
from .validation import (
    BLOCK_TAGS,
    hex_to_int,
    is_address,
    is_block_tag,
    is_hex_data,
    is_hex_quantity,
    is_transaction_hash,
    to_hex,
)

__all__ = [
    # Errors
    "AltitraceApiError",
    "AltitraceError",
    "ConfigurationError",
    "NetworkError",
    "NetworkErrorKind",
    "ValidationError",

    # Transport
    "HttpClient",

    # Validation
    "BLOCK_TAGS",
    "hex_to_int",
    "is_address",
    "is_block_tag",
    "is_hex_data",
    "is_hex_quantity",
    "is_transaction_hash",
    "to_hex",
]
