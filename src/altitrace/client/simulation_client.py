"""Simulation client: single, convenience and batch simulations."""
import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional, Sequence, Union

from ..builders.simulation_builder import SimulationBuilder, validate_simulation_request
from ..config.client_config import RequestOptions
from ..core.errors import ValidationError
from ..core.http_client import HttpClient
from ..execution.batch_executor import BatchExecutor, BatchSimulationConfig, BatchSimulationResult
from ..models.common import (
    AccessListItem,
    BlockOverridesInput,
    StateOverrideInput,
    TransactionCallInput,
    coerce_model,
)
from ..models.simulation import SimulationRequest, SimulationResult
from ..processors.simulation_processor import ExtendedSimulationResult

logger = logging.getLogger(__name__)

SimulationRequestInput = Union[SimulationRequest, Dict[str, Any]]


def _validated_requests(requests: Sequence[SimulationRequestInput]) -> List[SimulationRequest]:
    """Coerce and check every request so an invalid batch fails before any I/O."""
    validated = []
    for index, request in enumerate(requests):
        try:
            validated.append(validate_simulation_request(
                coerce_model(SimulationRequest, request, "simulation request")
            ))
        except ValidationError as e:
            raise ValidationError(f"Invalid simulation {index}: {e.message}", details={"index": index}) from e
    return validated


class SimulationClient:
    """Runs simulation requests and wraps their results."""

    def __init__(self, http: HttpClient):
        self.http = http

    def simulate(self) -> SimulationBuilder:
        """Start a fluent simulation request bound to this client."""
        return SimulationBuilder(self)

    async def execute_simulation(
        self,
        request: SimulationRequestInput,
        options: Optional[RequestOptions] = None,
    ) -> ExtendedSimulationResult:
        """
        Execute a built simulation request.

        Args:
            request: Request produced by ``SimulationBuilder.build()`` or an equivalent dict
            options: Per-request execution options

        Returns:
            ExtendedSimulationResult wrapping the service result
        """
        request = validate_simulation_request(coerce_model(SimulationRequest, request, "simulation request"))
        result = await self.http.post("/simulate", request.to_wire(), SimulationResult, options)
        logger.debug(f"Simulation {result.simulation_id} finished with status {result.status.value}")
        return ExtendedSimulationResult(result)

    async def simulate_call(
        self,
        call: TransactionCallInput,
        block: Optional[Union[int, str]] = None,
        account: Optional[str] = None,
        validation: bool = True,
        trace_asset_changes: bool = False,
        trace_transfers: bool = False,
        state_overrides: Optional[Sequence[StateOverrideInput]] = None,
        block_overrides: Optional[BlockOverridesInput] = None,
        options: Optional[RequestOptions] = None,
    ) -> ExtendedSimulationResult:
        """Simulate a single call without using the builder directly."""
        builder = self._single_call_builder(
            block, account, validation, trace_asset_changes, trace_transfers,
            state_overrides, block_overrides, options,
        )
        return await builder.call(call).execute()

    async def simulate_call_with_access_list(
        self,
        call: TransactionCallInput,
        access_list: Sequence[Union[AccessListItem, dict]],
        block: Optional[Union[int, str]] = None,
        account: Optional[str] = None,
        validation: bool = True,
        trace_asset_changes: bool = False,
        trace_transfers: bool = False,
        state_overrides: Optional[Sequence[StateOverrideInput]] = None,
        block_overrides: Optional[BlockOverridesInput] = None,
        options: Optional[RequestOptions] = None,
    ) -> ExtendedSimulationResult:
        """Simulate a single call with an explicit access list attached."""
        builder = self._single_call_builder(
            block, account, validation, trace_asset_changes, trace_transfers,
            state_overrides, block_overrides, options,
        )
        return await builder.call_with_access_list(call, access_list).execute()

    async def simulate_batch(
        self,
        config: Union[BatchSimulationConfig, Sequence[SimulationRequestInput]],
        options: Optional[RequestOptions] = None,
    ) -> BatchSimulationResult:
        """
        Execute many simulations client-side.

        Args:
            config: Batch configuration, or a plain list of requests run sequentially
            options: Execution options applied to every request

        Returns:
            BatchSimulationResult; individual failures never raise

        Raises:
            ValidationError: Empty batch or an invalid request, before any request is sent
        """
        if not isinstance(config, BatchSimulationConfig):
            config = BatchSimulationConfig(simulations=list(config))

        config = replace(config, simulations=_validated_requests(config.simulations))

        async def execute_one(request: SimulationRequest) -> ExtendedSimulationResult:
            return await self.execute_simulation(request, options)

        return await BatchExecutor(execute_one).run(config)

    async def simulate_batch_api(
        self,
        simulations: Sequence[SimulationRequestInput],
        options: Optional[RequestOptions] = None,
    ) -> List[ExtendedSimulationResult]:
        """Send all simulations to the server-side batch endpoint in one request."""
        if not simulations:
            raise ValidationError("At least one simulation is required")

        body = [request.to_wire() for request in _validated_requests(simulations)]
        results = await self.http.post("/simulate/batch", body, List[SimulationResult], options)
        return [ExtendedSimulationResult(result) for result in results]

    def _single_call_builder(
        self,
        block: Optional[Union[int, str]],
        account: Optional[str],
        validation: bool,
        trace_asset_changes: bool,
        trace_transfers: bool,
        state_overrides: Optional[Sequence[StateOverrideInput]],
        block_overrides: Optional[BlockOverridesInput],
        options: Optional[RequestOptions],
    ) -> SimulationBuilder:
        builder = (
            self.simulate()
            .with_validation(validation)
            .with_asset_changes(trace_asset_changes)
            .with_transfers(trace_transfers)
        )
        if block is not None:
            builder.at_block(block)
        if account is not None:
            builder.for_account(account)
        if state_overrides:
            builder.with_state_overrides(state_overrides)
        if block_overrides is not None:
            builder.with_block_overrides(block_overrides)
        if options is not None:
            builder.with_execution_options(options)
        return builder
