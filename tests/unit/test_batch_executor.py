"""Unit tests for the batch execution engine."""
import asyncio
from unittest.mock import AsyncMock

import pytest

from altitrace.core import NetworkError, ValidationError
from altitrace.execution import BatchExecutor, BatchSimulationConfig, BatchStatus, Outcome, failed_result
from altitrace.models import SimulationRequest, SimulationResult, SimulationStatus
from altitrace.processors import ExtendedSimulationResult

USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"


def _request(index):
    return SimulationRequest.model_validate({
        "params": {"calls": [{"to": USDC, "data": "0x" + f"{index:08x}"}], "blockTag": "latest"},
    })


def _result(request, status="success"):
    return ExtendedSimulationResult(SimulationResult(
        simulation_id=f"sim-{request.params.calls[0].data}",
        block_number="0x1",
        status=status,
    ))


def _executor(fail_indices=(), revert_indices=(), delays=None):
    """Executor whose behaviour depends on the request's call data index."""
    seen = []

    async def execute_one(request):
        index = int(request.params.calls[0].data, 16)
        seen.append(index)
        if delays:
            await asyncio.sleep(delays[index])
        if index in fail_indices:
            raise NetworkError(f"request {index} failed")
        return _result(request, "reverted" if index in revert_indices else "success")

    return BatchExecutor(execute_one), seen


class TestOutcome:
    """Test the success/failure value type."""

    @pytest.mark.asyncio
    async def test_capture(self):
        """Test capture records values and exceptions."""
        async def boom():
            raise ValueError("boom")

        async def fine():
            return 42

        ok = await Outcome.capture(fine())
        failed = await Outcome.capture(boom())

        assert ok.ok and ok.value == 42
        assert not failed.ok and isinstance(failed.error, ValueError)
        assert failed.fold(lambda v: v, lambda e: str(e)) == "boom"

    def test_failed_result_shape(self):
        """Test synthesized failures carry the cause and zero gas."""
        error = NetworkError("down")
        result = failed_result(error)

        assert result.status == SimulationStatus.FAILED
        assert result.get_total_gas_used() == 0
        assert result.calls == []
        assert result.error is error
        assert result.simulation_id


class TestBatchSequential:
    """Test sequential execution."""

    @pytest.mark.asyncio
    async def test_partial_failure(self):
        """Test a failing middle request yields a partial batch."""
        executor, seen = _executor(fail_indices={1})

        batch = await executor.run(BatchSimulationConfig([_request(i) for i in range(3)]))

        assert seen == [0, 1, 2]
        assert batch.batch_status == BatchStatus.PARTIAL
        assert batch.success_count == 2
        assert batch.failure_count == 1
        assert batch.results[1].is_failed()
        assert str(batch.results[1].error) == "request 1 failed"
        assert batch.errors[0]["index"] == 1
        assert batch.errors[0]["code"] == "NETWORK_ERROR"

    @pytest.mark.asyncio
    async def test_all_success(self):
        """Test an all-green batch."""
        executor, _ = _executor()

        batch = await executor.run(BatchSimulationConfig([_request(i) for i in range(2)]))

        assert batch.batch_status == BatchStatus.SUCCESS
        assert batch.failure_count == 0
        assert batch.errors == []
        assert batch.total_execution_time_ms >= 0

    @pytest.mark.asyncio
    async def test_all_failed(self):
        """Test every request failing gives a failed batch."""
        executor, _ = _executor(fail_indices={0, 1})

        batch = await executor.run(BatchSimulationConfig([_request(i) for i in range(2)]))

        assert batch.batch_status == BatchStatus.FAILED
        assert batch.success_count == 0

    @pytest.mark.asyncio
    async def test_stop_on_failure(self):
        """Test execution stops after the first non-success result."""
        executor, seen = _executor(revert_indices={1})

        batch = await executor.run(BatchSimulationConfig(
            [_request(i) for i in range(4)], stop_on_failure=True,
        ))

        assert seen == [0, 1]
        assert len(batch.results) == 2
        assert batch.batch_status == BatchStatus.PARTIAL

    @pytest.mark.asyncio
    async def test_concurrency_of_one_is_sequential(self):
        """Test max_concurrency=1 runs one request at a time."""
        executor, seen = _executor()

        batch = await executor.run(BatchSimulationConfig([_request(i) for i in range(3)], max_concurrency=1))

        assert seen == [0, 1, 2]
        assert batch.success_count == 3


class TestBatchChunked:
    """Test concurrency-limited execution."""

    @pytest.mark.asyncio
    async def test_results_keep_request_order(self):
        """Test results are ordered by request even when completion order differs."""
        executor, _ = _executor(delays={0: 0.03, 1: 0.0, 2: 0.01, 3: 0.0})

        batch = await executor.run(BatchSimulationConfig([_request(i) for i in range(4)], max_concurrency=2))

        assert [r.simulation_id for r in batch.results] == [
            f"sim-0x{i:08x}" for i in range(4)
        ]

    @pytest.mark.asyncio
    async def test_chunk_size_bounds_in_flight(self):
        """Test no more than max_concurrency requests run at once."""
        in_flight = 0
        peak = 0

        async def execute_one(request):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0)
            in_flight -= 1
            return _result(request)

        batch = await BatchExecutor(execute_one).run(
            BatchSimulationConfig([_request(i) for i in range(5)], max_concurrency=2)
        )

        assert peak == 2
        assert batch.success_count == 5

    @pytest.mark.asyncio
    async def test_stop_on_failure_skips_later_chunks(self):
        """Test a failure finishes its chunk and skips the remaining ones."""
        executor, seen = _executor(fail_indices={0})

        batch = await executor.run(BatchSimulationConfig(
            [_request(i) for i in range(5)], stop_on_failure=True, max_concurrency=2,
        ))

        assert sorted(seen) == [0, 1]
        assert len(batch.results) == 2
        assert batch.failure_count == 1

    @pytest.mark.asyncio
    async def test_failures_do_not_escape(self):
        """Test exceptions inside a chunk become failed results."""
        executor, _ = _executor(fail_indices={1, 2})

        batch = await executor.run(BatchSimulationConfig([_request(i) for i in range(3)], max_concurrency=3))

        assert [r.is_success() for r in batch.results] == [True, False, False]


class TestBatchValidation:
    """Test invalid batches are rejected before any request."""

    @pytest.mark.asyncio
    async def test_empty_batch(self):
        """Test an empty list raises ValidationError."""
        execute_one = AsyncMock()

        with pytest.raises(ValidationError, match="At least one simulation is required"):
            await BatchExecutor(execute_one).run(BatchSimulationConfig([]))

        execute_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_zero_concurrency(self):
        """Test max_concurrency below one raises ValidationError."""
        execute_one = AsyncMock()

        with pytest.raises(ValidationError, match="max_concurrency"):
            await BatchExecutor(execute_one).run(BatchSimulationConfig([_request(0)], max_concurrency=0))

        execute_one.assert_not_called()
