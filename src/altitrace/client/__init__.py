"""Domain clients and the combined AltitraceClient."""
from .access_list_client import (
    AccessListClient,
    AccessListComparison,
    AccessListComparisonResult,
)
from .altitrace_client import AltitraceClient
from .simulation_client import SimulationClient
from .trace_client import TraceClient

__all__ = [
    "AccessListClient",
    "AccessListComparison",
    "AccessListComparisonResult",
    "AltitraceClient",
    "SimulationClient",
    "TraceClient",
]
