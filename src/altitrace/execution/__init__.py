"""Batch execution engine."""
from .batch_executor import (
    BatchExecutor,
    BatchSimulationConfig,
    BatchSimulationResult,
    BatchStatus,
    failed_result,
)
from .outcome import Outcome

__all__ = [
    "BatchExecutor",
    "BatchSimulationConfig",
    "BatchSimulationResult",
    "BatchStatus",
    "Outcome",
    "failed_result",
]
