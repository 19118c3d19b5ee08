"""Unit tests for the trace request builders."""
from unittest.mock import AsyncMock, MagicMock

import pytest

from altitrace.builders import BundleHelpers, TraceConfigPresets, TraceRequestBuilder
from altitrace.builders.trace_builder import TraceCallBuilder, TraceCallManyBuilder, TraceTransactionBuilder
from altitrace.core.errors import ValidationError
from altitrace.models import TraceCallManyRequest, TraceCallRequest, TransactionCall

USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
SENDER = "0x742d35Cc6634C0532925a3b844Bc9e7595f06e8c"
TX_HASH = "0x" + "ab" * 32


class TestTraceRequestBuilder:
    """Test mode narrowing."""

    def test_modes_return_specialized_builders(self):
        """Test that each entry point returns the matching builder type."""
        builder = TraceRequestBuilder()

        assert isinstance(builder.transaction(TX_HASH), TraceTransactionBuilder)
        assert isinstance(builder.call({"to": USDC}), TraceCallBuilder)
        assert isinstance(builder.call_many([{"transactions": [{"to": USDC}]}]), TraceCallManyBuilder)

    def test_preset_tracers_carry_through(self):
        """Test that tracers passed to the entry builder reach the payload."""
        request = TraceRequestBuilder(tracers=TraceConfigPresets.function_analysis()).transaction(TX_HASH).build()

        assert request.tracer_config.four_byte_tracer is True
        assert request.tracer_config.call_tracer.with_logs is False


class TestTraceTransactionBuilder:
    """Test transaction tracing requests."""

    def test_build(self):
        """Test the wire payload for a transaction trace."""
        wire = TraceRequestBuilder().transaction(TX_HASH).with_4byte_tracer().build().to_wire()

        assert wire["transactionHash"] == TX_HASH
        assert wire["tracerConfig"]["4byteTracer"] is True
        assert wire["tracerConfig"]["callTracer"] == {"onlyTopCall": False, "withLogs": True}

    @pytest.mark.parametrize("tx_hash", ["0x1234", "ab" * 32, "0x" + "zz" * 32])
    def test_invalid_hash(self, tx_hash):
        """Test malformed transaction hashes are rejected."""
        with pytest.raises(ValidationError, match="Invalid transaction hash format"):
            TraceRequestBuilder().transaction(tx_hash).build()

    def test_tracer_configuration(self):
        """Test enabling and disabling individual tracers."""
        config = (
            TraceRequestBuilder()
            .transaction(TX_HASH)
            .with_call_tracer(only_top_call=True, with_logs=False)
            .with_prestate_tracer(diff_mode=True)
            .with_struct_logger(disable_memory=False)
            .build()
            .tracer_config
        )

        assert config.call_tracer.only_top_call is True
        assert config.prestate_tracer.diff_mode is True
        assert config.struct_logger.disable_memory is False

        no_calls = TraceRequestBuilder().transaction(TX_HASH).without_call_tracer().build()
        assert "callTracer" not in no_calls.to_wire()["tracerConfig"]


class TestTraceCallBuilder:
    """Test call tracing requests."""

    def test_build_with_overrides(self):
        """Test block, state overrides keyed by address and block overrides."""
        request = (
            TraceRequestBuilder()
            .call(TransactionCall(to=USDC, from_=SENDER, data="0x70a08231"))
            .at_block(18_000_000)
            .with_state_override(SENDER, {"balance": 10**18})
            .with_state_override(SENDER.lower(), {"nonce": 3})
            .with_block_overrides({"time": 1700000000})
            .build()
        )
        wire = request.to_wire()

        assert isinstance(request, TraceCallRequest)
        assert wire["block"] == hex(18_000_000)
        assert wire["stateOverrides"] == {SENDER.lower(): {"balance": hex(10**18), "nonce": 3}}
        assert wire["blockOverrides"] == {"time": 1700000000}

    def test_defaults_to_latest_without_overrides(self):
        """Test defaults when nothing is configured."""
        wire = TraceRequestBuilder().call({"to": USDC}).build().to_wire()

        assert wire["block"] == "latest"
        assert "stateOverrides" not in wire
        assert "blockOverrides" not in wire

    def test_invalid_call_address(self):
        """Test malformed call addresses are rejected."""
        with pytest.raises(ValidationError, match='Invalid "to" address'):
            TraceRequestBuilder().call({"to": "0x1"}).build()

    def test_invalid_block(self):
        """Test unknown block identifiers are rejected."""
        with pytest.raises(ValidationError, match="Invalid block"):
            TraceRequestBuilder().call({"to": USDC}).at_block("yesterday").build()

    def test_invalid_override_address(self):
        """Test override keys must be addresses."""
        with pytest.raises(ValidationError, match="Invalid state override address"):
            TraceRequestBuilder().call({"to": USDC}).with_state_overrides({"0xbad": {"nonce": 1}}).build()


class TestTraceCallManyBuilder:
    """Test call-many tracing requests."""

    def test_build_at_end_of_block(self):
        """Test default state context is the end of the latest block."""
        bundles = BundleHelpers.create_bundles([[TransactionCall(to=USDC)], [TransactionCall(to=SENDER)]])
        request = TraceRequestBuilder().call_many(bundles).build()

        assert isinstance(request, TraceCallManyRequest)
        assert request.to_wire()["stateContext"] == {"block": "latest", "txIndex": "-1"}
        assert len(request.bundles) == 2

    def test_transaction_index(self):
        """Test an explicit position within the block."""
        wire = (
            TraceRequestBuilder()
            .call_many([BundleHelpers.single_transaction(TransactionCall(to=USDC))])
            .with_state_context("0x10", 4)
            .build()
            .to_wire()
        )

        assert wire["stateContext"] == {"block": "0x10", "txIndex": {"Index": 4}}

    def test_negative_index_rejected(self):
        """Test a negative transaction index is recorded and rejected by build()."""
        builder = TraceRequestBuilder().call_many([{"transactions": [{"to": USDC}]}]).with_transaction_index(-1)

        with pytest.raises(ValidationError, match="Transaction index must be non-negative, got -1"):
            builder.build()

    def test_at_end_clears_invalid_index(self):
        """Test at_end replaces a previously recorded index."""
        wire = (
            TraceRequestBuilder()
            .call_many([{"transactions": [{"to": USDC}]}])
            .with_transaction_index(-1)
            .at_end()
            .build()
            .to_wire()
        )

        assert wire["stateContext"]["txIndex"] == "-1"

    def test_non_positive_timeout_reported_at_build(self):
        """Test a zero timeout surfaces from build() for every trace mode."""
        builders = [
            TraceRequestBuilder().transaction(TX_HASH).with_timeout(0),
            TraceRequestBuilder().call({"to": USDC}).with_timeout(0),
            TraceRequestBuilder().call_many([{"transactions": [{"to": USDC}]}]).with_timeout(0),
        ]

        for builder in builders:
            with pytest.raises(ValidationError, match="Timeout must be positive"):
                builder.build()

    def test_requires_bundles(self):
        """Test empty bundle lists are rejected."""
        with pytest.raises(ValidationError, match="At least one bundle is required"):
            TraceRequestBuilder().call_many([]).build()

    def test_requires_transactions_in_each_bundle(self):
        """Test empty bundles are rejected."""
        with pytest.raises(ValidationError, match="Each bundle must contain at least one transaction"):
            TraceRequestBuilder().call_many([{"transactions": [{"to": USDC}]}, {"transactions": []}]).build()

    def test_invalid_transaction_in_bundle(self):
        """Test bundle transactions are validated."""
        with pytest.raises(ValidationError, match="bundle 0 transaction 1"):
            TraceRequestBuilder().call_many([{"transactions": [{"to": USDC}, {"to": "0x2"}]}]).build()


class TestTraceBuilderExecute:
    """Test execute() delegation."""

    @pytest.mark.asyncio
    async def test_each_mode_calls_its_endpoint_method(self):
        """Test that every mode delegates to the matching client method."""
        client = MagicMock()
        client.execute_trace_transaction = AsyncMock(return_value="tx")
        client.execute_trace_call = AsyncMock(return_value="call")
        client.execute_trace_call_many = AsyncMock(return_value=["many"])
        builder = TraceRequestBuilder(client)

        assert await builder.transaction(TX_HASH).execute() == "tx"
        assert await builder.call({"to": USDC}).execute() == "call"
        assert await builder.call_many([{"transactions": [{"to": USDC}]}]).execute() == ["many"]

    @pytest.mark.asyncio
    async def test_invalid_hash_never_reaches_client(self):
        """Test validation precedes the client call."""
        client = MagicMock()
        client.execute_trace_transaction = AsyncMock()

        with pytest.raises(ValidationError):
            await TraceRequestBuilder(client).transaction("0xdead").execute()

        client.execute_trace_transaction.assert_not_called()
