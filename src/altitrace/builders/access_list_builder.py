"""Fluent builders for access-list generation and comparison."""
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Union

from ..core.errors import ValidationError
from ..core.validation import is_block_tag, is_hex_quantity
from ..models.access_list import AccessListRequest
from ..models.common import TransactionCall, TransactionCallInput, coerce_model
from .base import (
    RequestBuilderBase,
    check_execution_options,
    check_transaction_call,
    normalize_block,
    run_checks,
)

if TYPE_CHECKING:
    from ..client.access_list_client import AccessListClient, AccessListComparisonResult
    from ..processors.access_list_processor import ExtendedAccessListResponse


def _check_transaction(builder: "AccessListBuilder") -> Optional[str]:
    if builder._call is None:
        return "Transaction call is required"
    return check_transaction_call(builder._call, "transaction")


def _check_block(builder: "AccessListBuilder") -> Optional[str]:
    block = builder._block
    if block is None or is_block_tag(block) or is_hex_quantity(block):
        return None
    return f"Invalid block: {block}"


class AccessListBuilder(RequestBuilderBase):
    """Build and run a ``POST /simulate/access-list`` request."""

    def __init__(self, client: Optional["AccessListClient"] = None):
        super().__init__()
        self._client = client
        self._call: Optional[TransactionCall] = None
        self._block: Optional[str] = None

    def with_transaction(self, call: TransactionCallInput) -> "AccessListBuilder":
        self._call = coerce_model(TransactionCall, call, "transaction")
        return self

    def at_block(self, block: Union[int, str]) -> "AccessListBuilder":
        self._block = normalize_block(block)
        return self

    def build(self) -> AccessListRequest:
        run_checks(self, (_check_transaction, _check_block, check_execution_options))
        return AccessListRequest(params=self._call, block=self._block)

    async def execute(self) -> "ExtendedAccessListResponse":
        request = self.build()
        if self._client is None:
            raise ValidationError("AccessListBuilder is not bound to a client")
        return await self._client.execute_access_list(request, self._options)


@dataclass(frozen=True)
class AccessListComparisonParams:
    """Validated input of an access-list comparison run."""
    call: TransactionCall
    block: Optional[str]
    account: Optional[str]
    validation: bool
    trace_asset_changes: bool
    trace_transfers: bool


class AccessListComparisonBuilder(RequestBuilderBase):
    """
    Compare a call's gas with and without its generated access list.

    ``execute()`` runs a baseline simulation, generates the access list, then
    simulates again with the list attached. Failures at any step are recorded
    in the result rather than raised.
    """

    def __init__(self, client: Optional["AccessListClient"] = None):
        super().__init__()
        self._client = client
        self._call: Optional[TransactionCall] = None
        self._block: Optional[str] = None
        self._account: Optional[str] = None
        self._validation = True
        self._trace_asset_changes = False
        self._trace_transfers = False

    def call(self, call: TransactionCallInput) -> "AccessListComparisonBuilder":
        self._call = coerce_model(TransactionCall, call, "call")
        return self

    def at_block(self, block: Union[int, str]) -> "AccessListComparisonBuilder":
        self._block = normalize_block(block)
        return self

    def for_account(self, account: str) -> "AccessListComparisonBuilder":
        self._account = account
        return self

    def with_validation(self, enabled: bool = True) -> "AccessListComparisonBuilder":
        self._validation = enabled
        return self

    def with_asset_changes(self, enabled: bool = True) -> "AccessListComparisonBuilder":
        self._trace_asset_changes = enabled
        return self

    def with_transfers(self, enabled: bool = True) -> "AccessListComparisonBuilder":
        self._trace_transfers = enabled
        return self

    def build(self) -> AccessListComparisonParams:
        run_checks(self, (_check_transaction, _check_block, check_execution_options))
        return AccessListComparisonParams(
            call=self._call,
            block=self._block,
            account=self._account or self._call.from_,
            validation=self._validation,
            trace_asset_changes=self._trace_asset_changes,
            trace_transfers=self._trace_transfers,
        )

    async def execute(self) -> "AccessListComparisonResult":
        params = self.build()
        if self._client is None:
            raise ValidationError("AccessListComparisonBuilder is not bound to a client")
        return await self._client.compare(params, self._options)
