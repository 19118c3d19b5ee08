"""Derived accessors over simulation results."""
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional

from ..core.validation import hex_to_int
from ..models.simulation import (
    DecodedEvent,
    EnhancedLog,
    SimulationResult,
    SimulationStatus,
)


class AssetChangeType(str, Enum):
    GAIN = "gain"
    LOSS = "loss"


@dataclass(frozen=True)
class AssetChangeSummary:
    """Net token movement for one asset."""
    token_address: str
    symbol: Optional[str]
    decimals: Optional[int]
    net_change: str
    type: AssetChangeType


class ExtendedSimulationResult:
    """
    Simulation result with convenience accessors.

    Attribute access falls through to the wrapped ``SimulationResult``; the
    wrapped snapshot is never modified. ``error`` holds the cause when the
    result was synthesized for a request that failed before the service
    produced one.
    """

    def __init__(self, result: SimulationResult, error: Optional[Exception] = None):
        self.raw = result
        self.error = error

    def __getattr__(self, name: str) -> Any:
        if name == "raw":
            raise AttributeError(name)
        return getattr(self.raw, name)

    def __repr__(self) -> str:
        return (
            f"ExtendedSimulationResult(simulation_id={self.raw.simulation_id!r}, "
            f"status={self.raw.status.value!r}, gas_used={self.raw.gas_used!r})"
        )

    def is_success(self) -> bool:
        return self.raw.status == SimulationStatus.SUCCESS

    def is_failed(self) -> bool:
        return self.raw.status in (SimulationStatus.FAILED, SimulationStatus.REVERTED)

    def get_total_gas_used(self) -> int:
        return hex_to_int(self.raw.gas_used)

    def get_call_gas_used(self, call_index: int) -> int:
        """Gas used by one call.

        Raises:
            IndexError: No call at ``call_index``
        """
        if not 0 <= call_index < len(self.raw.calls):
            raise IndexError(f"Call index {call_index} out of range ({len(self.raw.calls)} calls)")
        return hex_to_int(self.raw.calls[call_index].gas_used)

    def get_errors(self) -> List[str]:
        """Error messages of every failed call, plus the synthesized cause if any."""
        errors = []
        for call in self.raw.calls:
            if call.error is not None:
                errors.append(call.error.message or call.error.reason)
        if self.error is not None:
            errors.append(str(self.error))
        return errors

    def get_log_count(self) -> int:
        return sum(len(call.logs) for call in self.raw.calls)

    def get_logs_by_address(self, address: str) -> List[EnhancedLog]:
        target = address.lower()
        return [
            log
            for call in self.raw.calls
            for log in call.logs
            if log.address.lower() == target
        ]

    def get_decoded_events(self) -> List[DecodedEvent]:
        """Decoded events in call order, then log order within each call."""
        return [
            log.decoded
            for call in self.raw.calls
            for log in call.logs
            if log.decoded is not None
        ]

    def get_asset_changes_summary(self) -> List[AssetChangeSummary]:
        summaries = []
        for change in self.raw.asset_changes or []:
            diff = change.value.diff
            summaries.append(AssetChangeSummary(
                token_address=change.token.address,
                symbol=change.token.symbol,
                decimals=change.token.decimals,
                net_change=diff,
                type=AssetChangeType.LOSS if diff.startswith("-") else AssetChangeType.GAIN,
            ))
        return summaries
