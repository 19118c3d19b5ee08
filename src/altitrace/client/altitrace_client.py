"""Top-level client combining simulation, trace and access-list APIs."""
import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from ..builders.access_list_builder import AccessListBuilder, AccessListComparisonBuilder
from ..builders.simulation_builder import SimulationBuilder
from ..builders.trace_builder import TraceRequestBuilder
from ..config.client_config import ClientConfig, RequestOptions
from ..core.http_client import HttpClient
from ..execution.batch_executor import BatchSimulationConfig, BatchSimulationResult
from ..models.trace import TraceConfig
from ..processors.access_list_processor import ExtendedAccessListResponse
from ..processors.simulation_processor import ExtendedSimulationResult
from ..processors.trace_processor import ExtendedTracerResponse
from .access_list_client import AccessListClient
from .simulation_client import SimulationClient, SimulationRequestInput
from .trace_client import TraceClient

logger = logging.getLogger(__name__)


class AltitraceClient:
    """
    Async client for the Altitrace simulation and tracing API.

    Usage:
        async with AltitraceClient(local_config()) as client:
            result = await client.simulate().call(tx).at_block_tag("latest").execute()
    """

    def __init__(self, config: Optional[ClientConfig] = None):
        """
        Initialize the client.

        Args:
            config: Client configuration; defaults to a local server
        """
        self.config = config or ClientConfig()
        self.http = HttpClient(self.config)
        self.simulations = SimulationClient(self.http)
        self.traces = TraceClient(self.http)
        self.access_lists = AccessListClient(self.http, self.simulations)

        logger.info(f"Initialized AltitraceClient: {self.config.to_dict()}")

    async def initialize(self) -> None:
        await self.http.initialize()

    async def close(self) -> None:
        await self.http.close()

    async def __aenter__(self) -> "AltitraceClient":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # Builders

    def simulate(self) -> SimulationBuilder:
        return self.simulations.simulate()

    def trace(self, tracers: Optional[TraceConfig] = None) -> TraceRequestBuilder:
        return self.traces.trace(tracers)

    def create_access_list(self) -> AccessListBuilder:
        return self.access_lists.create_access_list()

    def compare_access_list(self) -> AccessListComparisonBuilder:
        return self.access_lists.compare_access_list()

    # Simulation

    async def execute_simulation(
        self,
        request: SimulationRequestInput,
        options: Optional[RequestOptions] = None,
    ) -> ExtendedSimulationResult:
        return await self.simulations.execute_simulation(request, options)

    async def simulate_call(self, call: Any, **kwargs: Any) -> ExtendedSimulationResult:
        """See ``SimulationClient.simulate_call``."""
        return await self.simulations.simulate_call(call, **kwargs)

    async def simulate_call_with_access_list(
        self, call: Any, access_list: Sequence[Any], **kwargs: Any
    ) -> ExtendedSimulationResult:
        return await self.simulations.simulate_call_with_access_list(call, access_list, **kwargs)

    async def simulate_batch(
        self,
        config: Union[BatchSimulationConfig, Sequence[SimulationRequestInput]],
        options: Optional[RequestOptions] = None,
    ) -> BatchSimulationResult:
        return await self.simulations.simulate_batch(config, options)

    async def simulate_batch_api(
        self,
        simulations: Sequence[SimulationRequestInput],
        options: Optional[RequestOptions] = None,
    ) -> List[ExtendedSimulationResult]:
        return await self.simulations.simulate_batch_api(simulations, options)

    # Trace

    async def trace_transaction(self, transaction_hash: str, **kwargs: Any) -> ExtendedTracerResponse:
        return await self.traces.trace_transaction(transaction_hash, **kwargs)

    async def trace_call(self, call: Any, **kwargs: Any) -> ExtendedTracerResponse:
        return await self.traces.trace_call(call, **kwargs)

    async def trace_call_many(self, bundles: Sequence[Any], **kwargs: Any) -> List[ExtendedTracerResponse]:
        return await self.traces.trace_call_many(bundles, **kwargs)

    # Access list

    async def generate_access_list(self, call: Any, **kwargs: Any) -> ExtendedAccessListResponse:
        return await self.access_lists.generate_access_list(call, **kwargs)

    # Service

    async def health_check(self, options: Optional[RequestOptions] = None) -> Dict[str, Any]:
        """Query ``/status/healthcheck``; raises if the service is unreachable or unhealthy."""
        data = await self.http.get("/status/healthcheck", options=options)
        return data if isinstance(data, dict) else {"status": data}

    def get_config(self) -> ClientConfig:
        return self.config

    def get_stats(self) -> Dict[str, Any]:
        return self.http.get_stats()
