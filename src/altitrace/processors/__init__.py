"""Response enrichment: derived accessors over raw service results."""
from .access_list_processor import AccessListSummary, ExtendedAccessListResponse
from .call_tree import CallTreeStats, iter_frames
from .simulation_processor import AssetChangeSummary, AssetChangeType, ExtendedSimulationResult
from .trace_processor import ExtendedTracerResponse, StorageSlotAccess

__all__ = [
    "AccessListSummary",
    "AssetChangeSummary",
    "AssetChangeType",
    "CallTreeStats",
    "ExtendedAccessListResponse",
    "ExtendedSimulationResult",
    "ExtendedTracerResponse",
    "StorageSlotAccess",
    "iter_frames",
]
