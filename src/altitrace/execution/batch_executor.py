"""Batch execution of simulation requests with partial-failure semantics."""
import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional

from ..core.errors import ValidationError
from ..models.simulation import SimulationRequest, SimulationResult, SimulationStatus
from ..processors.simulation_processor import ExtendedSimulationResult
from .outcome import Outcome

logger = logging.getLogger(__name__)

ExecuteOne = Callable[[SimulationRequest], Awaitable[ExtendedSimulationResult]]


class BatchStatus(str, Enum):
    """Aggregate status of a batch."""
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"


@dataclass
class BatchSimulationConfig:
    """Requests to run and how to run them.

    ``max_concurrency`` above 1 runs requests in concurrent chunks of that
    size; otherwise they run one at a time in order.
    """
    simulations: List[SimulationRequest]
    stop_on_failure: bool = False
    max_concurrency: Optional[int] = None

    def validate(self) -> None:
        if not self.simulations:
            raise ValidationError("At least one simulation is required")
        if self.max_concurrency is not None and self.max_concurrency < 1:
            raise ValidationError(f"max_concurrency must be at least 1, got {self.max_concurrency}")

    @property
    def is_concurrent(self) -> bool:
        return self.max_concurrency is not None and self.max_concurrency > 1


@dataclass
class BatchSimulationResult:
    """Results in request order plus aggregate counts."""
    results: List[ExtendedSimulationResult]
    batch_status: BatchStatus
    success_count: int
    failure_count: int
    total_execution_time_ms: float
    errors: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "batch_status": self.batch_status.value,
            "success_count": self.success_count,
            "failure_count": self.failure_count,
            "result_count": len(self.results),
            "total_execution_time_ms": self.total_execution_time_ms,
        }


def failed_result(error: Exception) -> ExtendedSimulationResult:
    """Stand-in result for a request that produced no service result."""
    return ExtendedSimulationResult(
        SimulationResult(
            simulation_id=str(uuid.uuid4()),
            block_number="0x0",
            status=SimulationStatus.FAILED,
            calls=[],
            gas_used="0x0",
            block_gas_used="0x0",
        ),
        error=error,
    )


def _to_result(outcome: Outcome[ExtendedSimulationResult]) -> ExtendedSimulationResult:
    return outcome.fold(lambda value: value, failed_result)


class BatchExecutor:
    """
    Runs many simulation requests through a single-request primitive.

    No individual request's exception escapes: failures become failed results
    carrying the original error.
    """

    def __init__(self, execute_one: ExecuteOne):
        """
        Initialize the executor.

        Args:
            execute_one: Coroutine function that runs one request
        """
        self.execute_one = execute_one

    async def run(self, config: BatchSimulationConfig) -> BatchSimulationResult:
        """
        Execute a batch.

        Args:
            config: Requests and execution policy

        Returns:
            BatchSimulationResult with results in request order

        Raises:
            ValidationError: Empty batch or invalid concurrency limit
        """
        config.validate()
        start_time = time.perf_counter()

        if config.is_concurrent:
            results = await self._run_chunked(config)
        else:
            results = await self._run_sequential(config)

        success_count = sum(1 for result in results if result.is_success())
        failure_count = len(results) - success_count
        elapsed_ms = (time.perf_counter() - start_time) * 1000

        if failure_count == 0:
            status = BatchStatus.SUCCESS
        elif success_count == 0:
            status = BatchStatus.FAILED
        else:
            status = BatchStatus.PARTIAL

        batch = BatchSimulationResult(
            results=results,
            batch_status=status,
            success_count=success_count,
            failure_count=failure_count,
            total_execution_time_ms=elapsed_ms,
            errors=[
                {"index": index, **_describe(result.error)}
                for index, result in enumerate(results)
                if result.error is not None
            ],
        )

        logger.info(
            f"Batch of {len(config.simulations)} finished: {status.value} "
            f"({success_count} ok, {failure_count} failed, {len(results)} run) in {elapsed_ms:.1f}ms"
        )
        return batch

    async def _run_sequential(self, config: BatchSimulationConfig) -> List[ExtendedSimulationResult]:
        results: List[ExtendedSimulationResult] = []
        total = len(config.simulations)

        for index, request in enumerate(config.simulations):
            logger.debug(f"Running simulation {index + 1}/{total}")
            result = _to_result(await Outcome.capture(self.execute_one(request)))
            results.append(result)

            if config.stop_on_failure and not result.is_success():
                logger.warning(f"Simulation {index + 1} failed, stopping batch")
                break

        return results

    async def _run_chunked(self, config: BatchSimulationConfig) -> List[ExtendedSimulationResult]:
        chunk_size = config.max_concurrency
        simulations = config.simulations
        results: List[ExtendedSimulationResult] = []

        for chunk_start in range(0, len(simulations), chunk_size):
            chunk = simulations[chunk_start:chunk_start + chunk_size]
            outcomes = await asyncio.gather(*[
                Outcome.capture(self.execute_one(request)) for request in chunk
            ])
            # gather preserves argument order, so chunk results land at their request index
            results.extend(_to_result(outcome) for outcome in outcomes)

            if config.stop_on_failure and any(not result.is_success() for result in results):
                logger.warning(
                    f"Failure in batch chunk starting at {chunk_start}, skipping "
                    f"{len(simulations) - len(results)} remaining simulations"
                )
                break

        return results


def _describe(error: Exception) -> Dict[str, Any]:
    to_dict = getattr(error, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return {"type": type(error).__name__, "message": str(error)}
