"""Shared builder plumbing: execution options and invariant checks."""
from typing import Any, Callable, Dict, Iterable, Optional, TypeVar, Union

from ..config.client_config import RequestOptions
from ..core.errors import ValidationError
from ..core.validation import is_address, is_hex_data, is_hex_quantity
from ..models.common import TransactionCall

B = TypeVar("B", bound="RequestBuilderBase")

# A check inspects builder state and returns an error message, or None if satisfied.
Check = Callable[[Any], Optional[str]]


def normalize_block(block: Union[int, str]) -> str:
    """Hex-encode non-negative ints; anything else is kept for ``build()`` to report."""
    if isinstance(block, int) and not isinstance(block, bool) and block >= 0:
        return hex(block)
    return block if isinstance(block, str) else str(block)


def run_checks(state: Any, checks: Iterable[Check]) -> None:
    """Apply ``checks`` in order and raise on the first violation."""
    for check in checks:
        message = check(state)
        if message is not None:
            raise ValidationError(message)


def check_transaction_call(call: TransactionCall, label: str) -> Optional[str]:
    """Format checks for one call; ``label`` names it in the message."""
    if call.to is not None and not is_address(call.to):
        return f'Invalid "to" address in {label}: {call.to}'
    if call.from_ is not None and not is_address(call.from_):
        return f'Invalid "from" address in {label}: {call.from_}'
    if call.data is not None and not is_hex_data(call.data):
        return f'Invalid "data" hex string in {label}'
    if call.value is not None and not is_hex_quantity(call.value):
        return f'Invalid "value" hex string in {label}: {call.value}'
    if call.gas is not None and not is_hex_quantity(call.gas):
        return f'Invalid "gas" hex string in {label}: {call.gas}'
    for item in call.access_list or []:
        if not is_address(item.address):
            return f"Invalid access list address in {label}: {item.address}"
    return None


class RequestBuilderBase:
    """Per-request execution options common to every builder."""

    def __init__(self):
        self._options = RequestOptions()
        self._requested_timeout_ms: Optional[int] = None

    def with_execution_options(self: B, options: RequestOptions) -> B:
        self._options = self._options.merge(options)
        return self

    def with_timeout(self: B, timeout_ms: int) -> B:
        """Per-request timeout; a non-positive value is reported by ``build()``."""
        self._requested_timeout_ms = timeout_ms
        if timeout_ms > 0:
            self._options = RequestOptions(
                timeout_ms=timeout_ms,
                headers=dict(self._options.headers),
                retry=self._options.retry,
            )
        return self

    def with_headers(self: B, headers: Dict[str, str]) -> B:
        merged = dict(self._options.headers)
        merged.update(headers)
        self._options = RequestOptions(
            timeout_ms=self._options.timeout_ms,
            headers=merged,
            retry=self._options.retry,
        )
        return self

    def with_retry(self: B, enabled: bool = True) -> B:
        self._options = RequestOptions(
            timeout_ms=self._options.timeout_ms,
            headers=dict(self._options.headers),
            retry=enabled,
        )
        return self

    @property
    def execution_options(self) -> RequestOptions:
        return self._options


def check_execution_options(builder: RequestBuilderBase) -> Optional[str]:
    timeout_ms = builder._requested_timeout_ms
    if timeout_ms is not None and timeout_ms <= 0:
        return f"Timeout must be positive, got {timeout_ms}ms"
    return None
