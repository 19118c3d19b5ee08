"""Simulation request and result models."""
from enum import Enum
from typing import Any, List, Optional

from pydantic import Field

from .common import BlockOverrides, StateOverride, TransactionCall, WireModel


class SimulationStatus(str, Enum):
    """Overall simulation outcome."""
    SUCCESS = "success"
    REVERTED = "reverted"
    FAILED = "failed"


class CallStatus(str, Enum):
    SUCCESS = "success"
    REVERTED = "reverted"


class SimulationParams(WireModel):
    calls: List[TransactionCall]
    account: Optional[str] = None
    block_number: Optional[str] = None
    block_tag: Optional[str] = None
    validation: bool = True
    trace_asset_changes: bool = False
    trace_transfers: bool = False


class SimulationOptions(WireModel):
    state_overrides: Optional[List[StateOverride]] = None
    block_overrides: Optional[BlockOverrides] = None


class SimulationRequest(WireModel):
    """Body of ``POST /simulate``."""
    params: SimulationParams
    options: Optional[SimulationOptions] = None


class DecodedEventParam(WireModel):
    name: str
    param_type: str
    value: Any = None
    indexed: bool = False


class DecodedEvent(WireModel):
    """Human-readable form of a recognised event log."""
    name: str
    signature: str
    standard: Optional[str] = None
    description: Optional[str] = None
    params: List[DecodedEventParam] = Field(default_factory=list)
    summary: Optional[str] = None


class EnhancedLog(WireModel):
    """Event log with optional decoding."""
    address: str
    topics: List[str] = Field(default_factory=list)
    data: str = "0x"
    block_hash: Optional[str] = None
    block_number: Optional[str] = None
    log_index: Optional[str] = None
    transaction_hash: Optional[str] = None
    transaction_index: Optional[str] = None
    removed: bool = False
    decoded: Optional[DecodedEvent] = None


class CallError(WireModel):
    reason: str
    error_type: str
    message: Optional[str] = None
    contract_address: Optional[str] = None


class CallResult(WireModel):
    """Outcome of one call within a simulation."""
    call_index: int
    status: CallStatus
    return_data: str = "0x"
    gas_used: str = "0x0"
    logs: List[EnhancedLog] = Field(default_factory=list)
    error: Optional[CallError] = None


class TokenInfo(WireModel):
    address: str
    symbol: Optional[str] = None
    decimals: Optional[int] = None


class AssetValueChange(WireModel):
    pre: str
    post: str
    diff: str


class AssetChange(WireModel):
    """Token balance movement of the simulated account."""
    token: TokenInfo
    value: AssetValueChange


class SimulationResult(WireModel):
    """Raw result of a simulation as returned by the service."""
    simulation_id: str
    block_number: str
    status: SimulationStatus
    calls: List[CallResult] = Field(default_factory=list)
    gas_used: str = "0x0"
    block_gas_used: str = "0x0"
    asset_changes: Optional[List[AssetChange]] = None
