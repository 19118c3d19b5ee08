"""Fluent request builders and payload helpers."""
from .access_list_builder import (
    AccessListBuilder,
    AccessListComparisonBuilder,
    AccessListComparisonParams,
)
from .helpers import (
    COMMON_ADDRESSES,
    GAS_LIMITS,
    AccessListHelpers,
    BlockOverrideHelpers,
    BundleHelpers,
    StateContextHelpers,
    StateOverrideHelpers,
    TraceConfigPresets,
    TransactionHelpers,
)
from .simulation_builder import SimulationBuilder, SimulationBuilderState, validate_simulation_request
from .trace_builder import (
    TraceCallBuilder,
    TraceCallManyBuilder,
    TraceRequestBuilder,
    TraceTransactionBuilder,
)

__all__ = [
    # Builders
    "AccessListBuilder",
    "AccessListComparisonBuilder",
    "AccessListComparisonParams",
    "SimulationBuilder",
    "SimulationBuilderState",
    "TraceCallBuilder",
    "TraceCallManyBuilder",
    "TraceRequestBuilder",
    "TraceTransactionBuilder",
    "validate_simulation_request",

    # Helpers
    "COMMON_ADDRESSES",
    "GAS_LIMITS",
    "AccessListHelpers",
    "BlockOverrideHelpers",
    "BundleHelpers",
    "StateContextHelpers",
    "StateOverrideHelpers",
    "TraceConfigPresets",
    "TransactionHelpers",
]
