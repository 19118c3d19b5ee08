"""Fluent builders for transaction, call and call-many traces."""
from typing import TYPE_CHECKING, Dict, List, Mapping, Optional, Sequence, TypeVar, Union

from ..core.errors import ValidationError
from ..core.validation import is_address, is_block_tag, is_hex_data, is_hex_quantity, is_transaction_hash
from ..models.common import (
    BlockOverrides,
    BlockOverridesInput,
    StateOverride,
    StateOverrideInput,
    TransactionCall,
    TransactionCallInput,
    coerce_model,
)
from ..models.trace import (
    Bundle,
    CallTracerConfig,
    PrestateTracerConfig,
    StateContext,
    StructLoggerConfig,
    TraceCallManyRequest,
    TraceCallRequest,
    TraceConfig,
    TraceTransactionRequest,
    TransactionIndex,
)
from .base import (
    RequestBuilderBase,
    check_execution_options,
    check_transaction_call,
    normalize_block,
    run_checks,
)

if TYPE_CHECKING:
    from ..client.trace_client import TraceClient
    from ..processors.trace_processor import ExtendedTracerResponse

T = TypeVar("T", bound="_TracerConfigBuilder")

BlockInput = Union[int, str]


def _check_block(block: str) -> Optional[str]:
    if is_block_tag(block) or is_hex_quantity(block):
        return None
    return f"Invalid block: {block}"


def _check_state_overrides(overrides: Mapping[str, StateOverride]) -> Optional[str]:
    for address, override in overrides.items():
        if not is_address(address):
            return f"Invalid state override address: {address}"
        if override.balance is not None and not is_hex_quantity(override.balance):
            return f"Invalid state override balance for {address}: {override.balance}"
        if override.code is not None and not is_hex_data(override.code):
            return f"Invalid state override code for {address}"
    return None


class _TracerConfigBuilder(RequestBuilderBase):
    """Tracer selection shared by every trace mode."""

    def __init__(self, client: Optional["TraceClient"] = None, tracers: Optional[TraceConfig] = None):
        super().__init__()
        self._client = client
        self._tracers = tracers or TraceConfig()

    def with_tracers(self: T, config: Union[TraceConfig, dict]) -> T:
        self._tracers = coerce_model(TraceConfig, config, "tracer config")
        return self

    def with_call_tracer(self: T, only_top_call: bool = False, with_logs: bool = True) -> T:
        self._tracers = self._tracers.model_copy(update={
            "call_tracer": CallTracerConfig(only_top_call=only_top_call, with_logs=with_logs),
        })
        return self

    def without_call_tracer(self: T) -> T:
        self._tracers = self._tracers.model_copy(update={"call_tracer": None})
        return self

    def with_prestate_tracer(
        self: T,
        diff_mode: bool = False,
        disable_code: bool = False,
        disable_storage: bool = False,
    ) -> T:
        self._tracers = self._tracers.model_copy(update={
            "prestate_tracer": PrestateTracerConfig(
                diff_mode=diff_mode,
                disable_code=disable_code,
                disable_storage=disable_storage,
            ),
        })
        return self

    def with_struct_logger(
        self: T,
        clean_struct_logs: bool = True,
        disable_memory: bool = True,
        disable_return_data: bool = False,
        disable_stack: bool = False,
        disable_storage: bool = False,
    ) -> T:
        self._tracers = self._tracers.model_copy(update={
            "struct_logger": StructLoggerConfig(
                clean_struct_logs=clean_struct_logs,
                disable_memory=disable_memory,
                disable_return_data=disable_return_data,
                disable_stack=disable_stack,
                disable_storage=disable_storage,
            ),
        })
        return self

    def with_4byte_tracer(self: T, enabled: bool = True) -> T:
        self._tracers = self._tracers.model_copy(update={"four_byte_tracer": enabled})
        return self

    def _require_client(self) -> "TraceClient":
        if self._client is None:
            raise ValidationError(f"{type(self).__name__} is not bound to a client")
        return self._client


class TraceTransactionBuilder(_TracerConfigBuilder):
    """Trace an already mined transaction."""

    def __init__(self, transaction_hash: str, client=None, tracers: Optional[TraceConfig] = None):
        super().__init__(client, tracers)
        self._transaction_hash = transaction_hash

    def build(self) -> TraceTransactionRequest:
        run_checks(self, (
            lambda b: None if is_transaction_hash(b._transaction_hash) else "Invalid transaction hash format",
            check_execution_options,
        ))
        return TraceTransactionRequest(
            transaction_hash=self._transaction_hash,
            tracer_config=self._tracers,
        )

    async def execute(self) -> "ExtendedTracerResponse":
        request = self.build()
        return await self._require_client().execute_trace_transaction(request, self._options)


class TraceCallBuilder(_TracerConfigBuilder):
    """Trace a call against a historical or current block."""

    def __init__(self, call: TransactionCall, client=None, tracers: Optional[TraceConfig] = None):
        super().__init__(client, tracers)
        self._call = call
        self._block = "latest"
        self._state_overrides: Dict[str, StateOverride] = {}
        self._block_overrides: Optional[BlockOverrides] = None

    def at_block(self, block: BlockInput) -> "TraceCallBuilder":
        self._block = normalize_block(block)
        return self

    def at_latest(self) -> "TraceCallBuilder":
        self._block = "latest"
        return self

    def with_state_override(self, address: str, override: StateOverrideInput) -> "TraceCallBuilder":
        """Override one account; repeated overrides for the same address merge."""
        override = coerce_model(StateOverride, override, "state override")
        key = address.lower()
        existing = self._state_overrides.get(key)
        self._state_overrides[key] = existing.merged_with(override) if existing else override
        return self

    def with_state_overrides(self, overrides: Mapping[str, StateOverrideInput]) -> "TraceCallBuilder":
        for address, override in overrides.items():
            self.with_state_override(address, override)
        return self

    def with_block_overrides(self, overrides: BlockOverridesInput) -> "TraceCallBuilder":
        overrides = coerce_model(BlockOverrides, overrides, "block overrides")
        current = self._block_overrides
        self._block_overrides = current.merged_with(overrides) if current else overrides
        return self

    def build(self) -> TraceCallRequest:
        run_checks(self, (
            lambda b: check_transaction_call(b._call, "call"),
            lambda b: _check_block(b._block),
            lambda b: _check_state_overrides(b._state_overrides),
            check_execution_options,
        ))
        return TraceCallRequest(
            call=self._call,
            block=self._block,
            tracer_config=self._tracers,
            state_overrides=dict(self._state_overrides) or None,
            block_overrides=self._block_overrides,
        )

    async def execute(self) -> "ExtendedTracerResponse":
        request = self.build()
        return await self._require_client().execute_trace_call(request, self._options)


class TraceCallManyBuilder(_TracerConfigBuilder):
    """Trace bundles of calls executed in sequence on shared state."""

    def __init__(self, bundles: List[Bundle], client=None, tracers: Optional[TraceConfig] = None):
        super().__init__(client, tracers)
        self._bundles = bundles
        self._block = "latest"
        self._tx_index: Optional[int] = None

    def with_state_context(self, block: BlockInput, tx_index: Optional[int] = None) -> "TraceCallManyBuilder":
        """Execute at ``block``, after ``tx_index`` transactions or at the end if None."""
        self.at_block(block)
        if tx_index is None:
            return self.at_end()
        return self.with_transaction_index(tx_index)

    def at_block(self, block: BlockInput) -> "TraceCallManyBuilder":
        self._block = normalize_block(block)
        return self

    def at_latest(self) -> "TraceCallManyBuilder":
        self._block = "latest"
        return self

    def with_transaction_index(self, index: int) -> "TraceCallManyBuilder":
        """Execute after the first ``index`` transactions of the block."""
        self._tx_index = index
        return self

    def at_end(self) -> "TraceCallManyBuilder":
        self._tx_index = None
        return self

    def build(self) -> TraceCallManyRequest:
        run_checks(self, (
            self._check_bundles,
            lambda b: _check_block(b._block),
            self._check_tx_index,
            check_execution_options,
        ))
        tx_index = "-1" if self._tx_index is None else TransactionIndex(index=self._tx_index)
        return TraceCallManyRequest(
            bundles=list(self._bundles),
            state_context=StateContext(block=self._block, tx_index=tx_index),
            tracer_config=self._tracers,
        )

    async def execute(self) -> List["ExtendedTracerResponse"]:
        request = self.build()
        return await self._require_client().execute_trace_call_many(request, self._options)

    @staticmethod
    def _check_tx_index(builder: "TraceCallManyBuilder") -> Optional[str]:
        index = builder._tx_index
        if index is not None and (isinstance(index, bool) or index < 0):
            return f"Transaction index must be non-negative, got {index}"
        return None

    @staticmethod
    def _check_bundles(builder: "TraceCallManyBuilder") -> Optional[str]:
        if not builder._bundles:
            return "At least one bundle is required"
        for bundle_index, bundle in enumerate(builder._bundles):
            if not bundle.transactions:
                return "Each bundle must contain at least one transaction"
            for tx_index, call in enumerate(bundle.transactions):
                message = check_transaction_call(call, f"bundle {bundle_index} transaction {tx_index}")
                if message:
                    return message
        return None


class TraceRequestBuilder:
    """Entry point that narrows to a mode-specific trace builder."""

    def __init__(self, client: Optional["TraceClient"] = None, tracers: Optional[TraceConfig] = None):
        self._client = client
        self._tracers = tracers

    def transaction(self, transaction_hash: str) -> TraceTransactionBuilder:
        return TraceTransactionBuilder(transaction_hash, self._client, self._tracers)

    def call(self, call: TransactionCallInput) -> TraceCallBuilder:
        return TraceCallBuilder(coerce_model(TransactionCall, call, "call"), self._client, self._tracers)

    def call_many(self, bundles: Sequence[Union[Bundle, dict]]) -> TraceCallManyBuilder:
        return TraceCallManyBuilder(
            [coerce_model(Bundle, bundle, "bundle") for bundle in bundles],
            self._client,
            self._tracers,
        )
