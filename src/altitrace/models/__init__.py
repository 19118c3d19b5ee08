"""Wire models for Altitrace requests and responses."""
from .common import (
    AccessListItem,
    ApiErrorInfo,
    ApiResponse,
    BlockOverrides,
    ResponseMetadata,
    StateOverride,
    TransactionCall,
    WireModel,
)
from .simulation import (
    AssetChange,
    AssetValueChange,
    CallError,
    CallResult,
    CallStatus,
    DecodedEvent,
    DecodedEventParam,
    EnhancedLog,
    SimulationOptions,
    SimulationParams,
    SimulationRequest,
    SimulationResult,
    SimulationStatus,
    TokenInfo,
)
from .trace import (
    Bundle,
    CallFrame,
    CallTraceResponse,
    CallTracerConfig,
    FourByteInfo,
    FourByteResponse,
    LogEntry,
    PrestateAccount,
    PrestateDiff,
    PrestateTracerConfig,
    StateContext,
    StructLog,
    StructLoggerConfig,
    StructLogResponse,
    TraceCallManyRequest,
    TraceCallRequest,
    TraceConfig,
    TracerResponse,
    TraceTransactionRequest,
    TransactionIndex,
    TransactionReceiptInfo,
)
from .access_list import AccessListRequest, AccessListResponse

__all__ = [
    # Shared
    "AccessListItem",
    "ApiErrorInfo",
    "ApiResponse",
    "BlockOverrides",
    "ResponseMetadata",
    "StateOverride",
    "TransactionCall",
    "WireModel",

    # Simulation
    "AssetChange",
    "AssetValueChange",
    "CallError",
    "CallResult",
    "CallStatus",
    "DecodedEvent",
    "DecodedEventParam",
    "EnhancedLog",
    "SimulationOptions",
    "SimulationParams",
    "SimulationRequest",
    "SimulationResult",
    "SimulationStatus",
    "TokenInfo",

    # Trace
    "Bundle",
    "CallFrame",
    "CallTraceResponse",
    "CallTracerConfig",
    "FourByteInfo",
    "FourByteResponse",
    "LogEntry",
    "PrestateAccount",
    "PrestateDiff",
    "PrestateTracerConfig",
    "StateContext",
    "StructLog",
    "StructLoggerConfig",
    "StructLogResponse",
    "TraceCallManyRequest",
    "TraceCallRequest",
    "TraceConfig",
    "TracerResponse",
    "TraceTransactionRequest",
    "TransactionIndex",
    "TransactionReceiptInfo",

    # Access list
    "AccessListRequest",
    "AccessListResponse",
]
