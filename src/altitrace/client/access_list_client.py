"""Access-list generation and with/without comparison."""
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from ..builders.access_list_builder import (
    AccessListBuilder,
    AccessListComparisonBuilder,
    AccessListComparisonParams,
)
from ..config.client_config import RequestOptions
from ..core.errors import AltitraceError
from ..core.http_client import HttpClient
from ..models.access_list import AccessListRequest, AccessListResponse
from ..models.common import TransactionCall, TransactionCallInput
from ..processors.access_list_processor import ExtendedAccessListResponse
from ..processors.simulation_processor import ExtendedSimulationResult
from .simulation_client import SimulationClient

logger = logging.getLogger(__name__)

# Savings below this are treated as noise
SIGNIFICANT_GAS_SAVINGS = 1000


@dataclass
class AccessListComparison:
    gas_baseline: Optional[int] = None
    gas_optimized: Optional[int] = None
    gas_difference: Optional[int] = None
    gas_percentage_change: Optional[float] = None
    access_list_effective: bool = False
    recommended: bool = False


@dataclass
class AccessListComparisonResult:
    """Outcome of each comparison step; a failed step leaves its slot empty and records an error."""
    baseline: Optional[ExtendedSimulationResult] = None
    access_list: Optional[ExtendedAccessListResponse] = None
    optimized: Optional[ExtendedSimulationResult] = None
    comparison: AccessListComparison = field(default_factory=AccessListComparison)
    errors: Dict[str, str] = field(default_factory=dict)
    execution_time_ms: float = 0.0

    @property
    def success(self) -> Dict[str, bool]:
        return {
            "baseline": self.baseline is not None,
            "access_list": self.access_list is not None,
            "optimized": self.optimized is not None,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "success": self.success,
            "gas_baseline": self.comparison.gas_baseline,
            "gas_optimized": self.comparison.gas_optimized,
            "gas_difference": self.comparison.gas_difference,
            "recommended": self.comparison.recommended,
            "errors": dict(self.errors),
        }


class AccessListClient:
    """Generates EIP-2930 access lists and measures their effect."""

    def __init__(self, http: HttpClient, simulations: SimulationClient):
        self.http = http
        self.simulations = simulations

    def create_access_list(self) -> AccessListBuilder:
        return AccessListBuilder(self)

    def compare_access_list(self) -> AccessListComparisonBuilder:
        return AccessListComparisonBuilder(self)

    async def generate_access_list(
        self,
        call: TransactionCallInput,
        block: Optional[Union[int, str]] = None,
        options: Optional[RequestOptions] = None,
    ) -> ExtendedAccessListResponse:
        builder = self.create_access_list().with_transaction(call)
        if block is not None:
            builder.at_block(block)
        if options is not None:
            builder.with_execution_options(options)
        return await builder.execute()

    async def execute_access_list(
        self,
        request: AccessListRequest,
        options: Optional[RequestOptions] = None,
    ) -> ExtendedAccessListResponse:
        response = await self.http.post("/simulate/access-list", request.to_wire(), AccessListResponse, options)
        return ExtendedAccessListResponse(response)

    async def compare(
        self,
        params: AccessListComparisonParams,
        options: Optional[RequestOptions] = None,
    ) -> AccessListComparisonResult:
        """
        Simulate a call with and without its generated access list.

        Args:
            params: Validated comparison input from AccessListComparisonBuilder
            options: Execution options applied to every step

        Returns:
            AccessListComparisonResult; step failures are recorded, not raised
        """
        start_time = time.perf_counter()
        result = AccessListComparisonResult()

        try:
            result.baseline = await self._simulate(params, params.call, options)
            result.comparison.gas_baseline = result.baseline.get_total_gas_used()
        except AltitraceError as e:
            logger.warning(f"Baseline simulation failed: {e.message}")
            result.errors["baseline"] = e.message

        try:
            generated = await self.execute_access_list(
                AccessListRequest(params=params.call, block=params.block), options
            )
        except AltitraceError as e:
            logger.warning(f"Access list generation failed: {e.message}")
            result.errors["access_list"] = e.message
            generated = None

        if generated is not None and generated.is_failed():
            result.errors["access_list"] = generated.raw.error or "Access list generation failed"
        elif generated is not None:
            result.access_list = generated
            optimized_call = params.call.model_copy(update={"access_list": list(generated.raw.access_list)})
            try:
                result.optimized = await self._simulate(params, optimized_call, options)
                result.comparison.gas_optimized = result.optimized.get_total_gas_used()
            except AltitraceError as e:
                logger.warning(f"Optimized simulation failed: {e.message}")
                result.errors["optimized"] = e.message

        self._fill_comparison(result.comparison)
        result.execution_time_ms = (time.perf_counter() - start_time) * 1000
        return result

    @staticmethod
    def _fill_comparison(comparison: AccessListComparison) -> None:
        if comparison.gas_baseline is None or comparison.gas_optimized is None:
            return

        comparison.gas_difference = comparison.gas_optimized - comparison.gas_baseline
        if comparison.gas_baseline > 0:
            comparison.gas_percentage_change = comparison.gas_difference / comparison.gas_baseline * 100
        comparison.access_list_effective = comparison.gas_difference < -SIGNIFICANT_GAS_SAVINGS
        comparison.recommended = comparison.access_list_effective

    async def _simulate(
        self,
        params: AccessListComparisonParams,
        call: TransactionCall,
        options: Optional[RequestOptions],
    ) -> ExtendedSimulationResult:
        builder = (
            self.simulations.simulate()
            .call(call)
            .with_validation(params.validation)
            .with_asset_changes(params.trace_asset_changes)
            .with_transfers(params.trace_transfers)
        )
        if params.block is not None:
            builder.at_block(params.block)
        if params.account is not None:
            builder.for_account(params.account)
        if options is not None:
            builder.with_execution_options(options)
        return await builder.execute()
