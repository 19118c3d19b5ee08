"""Trace request and tracer response models."""
from typing import Any, Dict, List, Optional, Union

from pydantic import Field, field_validator

from .common import BlockOverrides, StateOverride, TransactionCall, WireModel


class CallTracerConfig(WireModel):
    only_top_call: bool = False
    with_logs: bool = True


class PrestateTracerConfig(WireModel):
    diff_mode: bool = False
    disable_code: bool = False
    disable_storage: bool = False


class StructLoggerConfig(WireModel):
    clean_struct_logs: bool = True
    disable_memory: bool = True
    disable_return_data: bool = False
    disable_stack: bool = False
    disable_storage: bool = False


class TraceConfig(WireModel):
    """Which tracers to run and how each is configured."""
    call_tracer: Optional[CallTracerConfig] = Field(default_factory=CallTracerConfig)
    prestate_tracer: Optional[PrestateTracerConfig] = None
    struct_logger: Optional[StructLoggerConfig] = None
    four_byte_tracer: bool = Field(default=False, alias="4byteTracer")


class TransactionIndex(WireModel):
    index: int = Field(alias="Index", ge=0)


class StateContext(WireModel):
    """Where in a block a call-many bundle is executed.

    ``tx_index`` is the string ``"-1"`` for the end of the block.
    """
    block: str = "latest"
    tx_index: Union[TransactionIndex, str] = "-1"


class Bundle(WireModel):
    transactions: List[TransactionCall]
    block_overrides: Optional[BlockOverrides] = None


class TraceTransactionRequest(WireModel):
    """Body of ``POST /trace/tx``."""
    transaction_hash: str
    tracer_config: TraceConfig = Field(default_factory=TraceConfig)


class TraceCallRequest(WireModel):
    """Body of ``POST /trace/call``."""
    call: TransactionCall
    block: str = "latest"
    tracer_config: TraceConfig = Field(default_factory=TraceConfig)
    state_overrides: Optional[Dict[str, StateOverride]] = None
    block_overrides: Optional[BlockOverrides] = None


class TraceCallManyRequest(WireModel):
    """Body of ``POST /trace/call-many``."""
    bundles: List[Bundle]
    state_context: StateContext = Field(default_factory=StateContext)
    tracer_config: TraceConfig = Field(default_factory=TraceConfig)


class LogEntry(WireModel):
    address: str
    topics: List[str] = Field(default_factory=list)
    data: str = "0x"


class CallFrame(WireModel):
    """One frame of the call tree. ``gas_used`` includes all nested calls."""
    call_type: str
    from_: str = Field(alias="from")
    to: Optional[str] = None
    value: str = "0x0"
    gas: str = "0x0"
    gas_used: str = "0x0"
    input: str = "0x"
    output: Optional[str] = None
    depth: int = 0
    reverted: bool = False
    error: Optional[str] = None
    revert_reason: Optional[str] = None
    calls: List["CallFrame"] = Field(default_factory=list)
    logs: List[LogEntry] = Field(default_factory=list)


class CallTraceResponse(WireModel):
    root_call: CallFrame
    total_calls: int = 0
    max_depth: int = 0


class PrestateAccount(WireModel):
    balance: Optional[str] = None
    code: Optional[str] = None
    nonce: Optional[int] = None
    storage: Dict[str, str] = Field(default_factory=dict)


class PrestateDiff(WireModel):
    """Diff-mode prestate output."""
    pre: Dict[str, PrestateAccount]
    post: Dict[str, PrestateAccount]


class StructLog(WireModel):
    pc: int
    op: str
    gas: int = 0
    gas_cost: int = 0
    depth: int = 0
    error: Optional[str] = None
    stack: Optional[List[str]] = None
    return_data: Optional[str] = None
    memory: Optional[List[str]] = None
    mem_size: Optional[int] = Field(default=None, alias="memSize")
    storage: Optional[Dict[str, str]] = None
    refund: Optional[int] = None


class StructLogResponse(WireModel):
    struct_logs: Optional[List[StructLog]] = None
    total_opcodes: int = 0
    total_gas: int = 0
    total_gas_refunded: Optional[int] = None
    refund_counter: Optional[int] = None
    error: Optional[str] = None
    output: Optional[str] = None


class FourByteInfo(WireModel):
    data_size: int = 0
    count: int = 0


class FourByteResponse(WireModel):
    identifiers: Dict[str, FourByteInfo] = Field(default_factory=dict)
    total_identifiers: int = 0


class TransactionReceiptInfo(WireModel):
    from_: Optional[str] = Field(default=None, alias="from")
    to: Optional[str] = None
    contract_address: Optional[str] = None
    gas_used: str = "0x0"
    effective_gas_price: Optional[str] = None
    cumulative_gas_used: Optional[str] = None
    transaction_type: Optional[int] = None
    status: bool = True
    logs_bloom: Optional[str] = None
    logs_count: Optional[int] = None


class TracerResponse(WireModel):
    """Raw tracer output; each section is present only if that tracer ran."""
    receipt: Optional[TransactionReceiptInfo] = None
    call_tracer: Optional[CallTraceResponse] = None
    prestate_tracer: Optional[Union[PrestateDiff, Dict[str, PrestateAccount]]] = None
    struct_logger: Optional[StructLogResponse] = None
    four_byte_tracer: Optional[FourByteResponse] = Field(default=None, alias="4byteTracer")

    @field_validator("prestate_tracer", mode="before")
    @classmethod
    def parse_prestate(cls, v: Any) -> Any:
        """Diff mode is the only shape keyed exactly by pre/post."""
        if isinstance(v, dict) and set(v) == {"pre", "post"}:
            return PrestateDiff.model_validate(v)
        return v
