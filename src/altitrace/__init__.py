"""Async client for the Altitrace EVM simulation and tracing service."""
from .builders import (
    AccessListBuilder,
    AccessListComparisonBuilder,
    BlockOverrideHelpers,
    BundleHelpers,
    SimulationBuilder,
    StateContextHelpers,
    StateOverrideHelpers,
    TraceConfigPresets,
    TraceRequestBuilder,
    TransactionHelpers,
)
from .client import AltitraceClient
from .config import (
    AltitraceSettings,
    ClientConfig,
    RequestOptions,
    RetryConfig,
    local_config,
    production_config,
    testing_config,
)
from .core import (
    AltitraceApiError,
    AltitraceError,
    ConfigurationError,
    NetworkError,
    NetworkErrorKind,
    ValidationError,
)
from .execution import BatchSimulationConfig, BatchSimulationResult, BatchStatus
from .models import (
    AccessListItem,
    BlockOverrides,
    Bundle,
    SimulationRequest,
    SimulationResult,
    StateOverride,
    TraceConfig,
    TracerResponse,
    TransactionCall,
)
from .processors import (
    ExtendedAccessListResponse,
    ExtendedSimulationResult,
    ExtendedTracerResponse,
)

__version__ = "0.1.0"

__all__ = [
    # Client
    "AltitraceClient",

    # Configuration
    "AltitraceSettings",
    "ClientConfig",
    "RequestOptions",
    "RetryConfig",
    "local_config",
    "production_config",
    "testing_config",

    # Errors
    "AltitraceApiError",
    "AltitraceError",
    "ConfigurationError",
    "NetworkError",
    "NetworkErrorKind",
    "ValidationError",

    # Builders and helpers
    "AccessListBuilder",
    "AccessListComparisonBuilder",
    "BlockOverrideHelpers",
    "BundleHelpers",
    "SimulationBuilder",
    "StateContextHelpers",
    "StateOverrideHelpers",
    "TraceConfigPresets",
    "TraceRequestBuilder",
    "TransactionHelpers",

    # Batch
    "BatchSimulationConfig",
    "BatchSimulationResult",
    "BatchStatus",

    # Models
    "AccessListItem",
    "BlockOverrides",
    "Bundle",
    "SimulationRequest",
    "SimulationResult",
    "StateOverride",
    "TraceConfig",
    "TracerResponse",
    "TransactionCall",

    # Results
    "ExtendedAccessListResponse",
    "ExtendedSimulationResult",
    "ExtendedTracerResponse",
]
