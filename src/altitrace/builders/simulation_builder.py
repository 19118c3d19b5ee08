"""Fluent builder for simulation requests."""
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Union

from ..core.errors import ValidationError
from ..core.validation import BLOCK_TAGS, is_address, is_hex_data, is_hex_quantity
from ..models.common import (
    AccessListItem,
    BlockOverrides,
    BlockOverridesInput,
    StateOverride,
    StateOverrideInput,
    TransactionCall,
    TransactionCallInput,
    coerce_model,
)
from ..models.simulation import SimulationOptions, SimulationParams, SimulationRequest
from .base import (
    RequestBuilderBase,
    check_execution_options,
    check_transaction_call,
    normalize_block,
    run_checks,
)

if TYPE_CHECKING:
    from ..client.simulation_client import SimulationClient
    from ..processors.simulation_processor import ExtendedSimulationResult


@dataclass
class SimulationBuilderState:
    """Everything a SimulationBuilder has accumulated so far."""
    calls: List[TransactionCall] = field(default_factory=list)
    account: Optional[str] = None
    block_number: Optional[str] = None
    block_tag: Optional[str] = None
    validation: bool = True
    trace_asset_changes: bool = False
    trace_transfers: bool = False
    state_overrides: Dict[str, StateOverride] = field(default_factory=dict)
    unaddressed_overrides: List[StateOverride] = field(default_factory=list)
    block_overrides: Optional[BlockOverrides] = None


def _check_has_calls(request: SimulationRequest) -> Optional[str]:
    if not request.params.calls:
        return "At least one call is required"
    return None


def _check_calls(request: SimulationRequest) -> Optional[str]:
    for index, call in enumerate(request.params.calls):
        message = check_transaction_call(call, f"call {index}")
        if message:
            return message
    return None


def _check_block_exclusive(request: SimulationRequest) -> Optional[str]:
    params = request.params
    if params.block_number is not None and params.block_tag is not None:
        return "Cannot specify both blockNumber and blockTag - they are mutually exclusive"
    return None


def _check_block_values(request: SimulationRequest) -> Optional[str]:
    params = request.params
    if params.block_number is not None and not is_hex_quantity(params.block_number):
        return f"Invalid block number: {params.block_number}"
    if params.block_tag is not None and params.block_tag not in BLOCK_TAGS:
        return f"Invalid block tag: {params.block_tag} (expected one of {', '.join(BLOCK_TAGS)})"
    return None


def _check_account(request: SimulationRequest) -> Optional[str]:
    params = request.params
    if (params.trace_asset_changes or params.trace_transfers) and not params.account:
        return "Account parameter is required when traceAssetChanges or traceTransfers is enabled"
    if params.account is not None and not is_address(params.account):
        return f"Invalid account address: {params.account}"
    return None


def _check_state_overrides(request: SimulationRequest) -> Optional[str]:
    overrides = request.options.state_overrides if request.options else None
    for override in overrides or []:
        if not override.address:
            return "State override requires an address"
        if not is_address(override.address):
            return f"Invalid state override address: {override.address}"
        if override.balance is not None and not is_hex_quantity(override.balance):
            return f"Invalid state override balance for {override.address}: {override.balance}"
        if override.code is not None and not is_hex_data(override.code):
            return f"Invalid state override code for {override.address}"
    return None


def _check_block_overrides(request: SimulationRequest) -> Optional[str]:
    overrides = request.options.block_overrides if request.options else None
    if overrides is not None and overrides.coinbase is not None and not is_address(overrides.coinbase):
        return f"Invalid block override coinbase: {overrides.coinbase}"
    return None


SIMULATION_CHECKS = (
    _check_has_calls,
    _check_calls,
    _check_block_exclusive,
    _check_block_values,
    _check_account,
    _check_state_overrides,
    _check_block_overrides,
)


def validate_simulation_request(request: SimulationRequest) -> SimulationRequest:
    """
    Apply the simulation invariants to a request however it was produced.

    Raises:
        ValidationError: First violated invariant
    """
    run_checks(request, SIMULATION_CHECKS)
    return request


class SimulationBuilder(RequestBuilderBase):
    """
    Accumulates simulation options and validates them in ``build()``.

    Configuration methods only record state; nothing is validated or sent
    until ``build()`` or ``execute()``.
    """

    def __init__(self, client: Optional["SimulationClient"] = None):
        super().__init__()
        self._client = client
        self._state = SimulationBuilderState()

    def call(self, call: TransactionCallInput) -> "SimulationBuilder":
        self._state.calls.append(coerce_model(TransactionCall, call, "call"))
        return self

    def call_with_access_list(
        self,
        call: TransactionCallInput,
        access_list: Sequence[Union[AccessListItem, dict]],
    ) -> "SimulationBuilder":
        items = [coerce_model(AccessListItem, item, "access list item") for item in access_list]
        base = coerce_model(TransactionCall, call, "call")
        self._state.calls.append(base.model_copy(update={"access_list": items}))
        return self

    def for_account(self, account: str) -> "SimulationBuilder":
        self._state.account = account
        return self

    def with_validation(self, enabled: bool = True) -> "SimulationBuilder":
        self._state.validation = enabled
        return self

    def with_asset_changes(self, enabled: bool = True) -> "SimulationBuilder":
        self._state.trace_asset_changes = enabled
        return self

    def with_transfers(self, enabled: bool = True) -> "SimulationBuilder":
        self._state.trace_transfers = enabled
        return self

    def at_block_tag(self, tag: str) -> "SimulationBuilder":
        self._state.block_tag = tag
        return self

    def at_block_number(self, number: Union[int, str]) -> "SimulationBuilder":
        self._state.block_number = normalize_block(number)
        return self

    def at_block(self, block: Union[int, str]) -> "SimulationBuilder":
        """Set a block by number (int or hex) or by tag."""
        if isinstance(block, int) or (isinstance(block, str) and block.startswith("0x")):
            return self.at_block_number(block)
        return self.at_block_tag(block)

    def with_state_override(self, override: StateOverrideInput) -> "SimulationBuilder":
        """Add an account override; repeated overrides for one address merge."""
        override = coerce_model(StateOverride, override, "state override")
        if not override.address:
            self._state.unaddressed_overrides.append(override)
            return self

        key = override.address.lower()
        existing = self._state.state_overrides.get(key)
        self._state.state_overrides[key] = existing.merged_with(override) if existing else override
        return self

    def with_state_overrides(self, overrides: Sequence[StateOverrideInput]) -> "SimulationBuilder":
        for override in overrides:
            self.with_state_override(override)
        return self

    def with_block_overrides(self, overrides: BlockOverridesInput) -> "SimulationBuilder":
        overrides = coerce_model(BlockOverrides, overrides, "block overrides")
        current = self._state.block_overrides
        self._state.block_overrides = current.merged_with(overrides) if current else overrides
        return self

    def build(self) -> SimulationRequest:
        """
        Validate accumulated state and produce the request payload.

        Returns:
            Immutable SimulationRequest, independent of later builder changes

        Raises:
            ValidationError: First violated invariant
        """
        state = self._state
        overrides = list(state.unaddressed_overrides) + list(state.state_overrides.values())

        options = None
        if overrides or state.block_overrides is not None:
            options = SimulationOptions(
                state_overrides=overrides or None,
                block_overrides=state.block_overrides,
            )

        request = SimulationRequest(
            params=SimulationParams(
                calls=list(state.calls),
                account=state.account,
                block_number=state.block_number,
                block_tag=state.block_tag,
                validation=state.validation,
                trace_asset_changes=state.trace_asset_changes,
                trace_transfers=state.trace_transfers,
            ),
            options=options,
        )
        validate_simulation_request(request)
        run_checks(self, (check_execution_options,))
        return request

    async def execute(self) -> "ExtendedSimulationResult":
        """Build the request and run it through the bound client."""
        request = self.build()
        if self._client is None:
            raise ValidationError("SimulationBuilder is not bound to a client")
        return await self._client.execute_simulation(request, self._options)
