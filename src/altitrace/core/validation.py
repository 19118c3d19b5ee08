"""Validation and hex conversion helpers shared by builders and processors."""
import re
from typing import Optional, Union

from eth_utils import is_hex_address

from .errors import ValidationError

BLOCK_TAGS = ("latest", "earliest", "safe", "finalized")

_HEX_DATA_RE = re.compile(r"^0x[0-9a-fA-F]*$")
_HEX_QUANTITY_RE = re.compile(r"^0x[0-9a-fA-F]+$")
_HASH_RE = re.compile(r"^0x[0-9a-fA-F]{64}$")


def is_address(value: object) -> bool:
    """Check for a 0x-prefixed 20-byte hex address (any casing)."""
    return isinstance(value, str) and value.startswith("0x") and is_hex_address(value)


def is_hex_data(value: object) -> bool:
    return isinstance(value, str) and _HEX_DATA_RE.match(value) is not None


def is_hex_quantity(value: object) -> bool:
    return isinstance(value, str) and _HEX_QUANTITY_RE.match(value) is not None


def is_transaction_hash(value: object) -> bool:
    return isinstance(value, str) and _HASH_RE.match(value) is not None


def is_block_tag(value: object) -> bool:
    return value in BLOCK_TAGS


def validate_address(value: object, field: str = "address") -> str:
    if not is_address(value):
        raise ValidationError(f"Invalid {field}: {value!r}", details={"field": field})
    return value


def validate_hex_data(value: object, field: str = "data") -> str:
    if not is_hex_data(value):
        raise ValidationError(f"Invalid hex string for {field}: {value!r}", details={"field": field})
    return value


def validate_hex_quantity(value: object, field: str) -> str:
    if not is_hex_quantity(value):
        raise ValidationError(f"Invalid hex quantity for {field}: {value!r}", details={"field": field})
    return value


def validate_transaction_hash(value: object) -> str:
    if not is_transaction_hash(value):
        raise ValidationError("Invalid transaction hash format", details={"value": value})
    return value


def validate_block(value: object) -> str:
    """Accept a block tag or a hex block number."""
    if is_block_tag(value) or is_hex_quantity(value):
        return value
    raise ValidationError(
        f"Invalid block: {value!r} (expected hex number or one of {', '.join(BLOCK_TAGS)})",
        details={"value": value},
    )


def to_hex(value: Union[int, str]) -> str:
    """Normalize an int or hex string to a 0x-prefixed hex quantity."""
    if isinstance(value, bool):
        raise ValidationError(f"Expected integer or hex string, got {value!r}")
    if isinstance(value, int):
        if value < 0:
            raise ValidationError(f"Negative quantity not allowed: {value}")
        return hex(value)
    return value


def hex_to_int(value: Optional[str], default: int = 0) -> int:
    """Parse a hex quantity into an int. Empty and missing values give ``default``."""
    if value is None or value in ("", "0x"):
        return default
    return int(value, 16)
