"""Trace client for mined transactions, calls and call bundles."""
import logging
from typing import List, Mapping, Optional, Sequence, Union

from ..builders.trace_builder import TraceRequestBuilder
from ..config.client_config import RequestOptions
from ..core.http_client import HttpClient
from ..models.common import BlockOverridesInput, StateOverrideInput, TransactionCallInput
from ..models.trace import (
    Bundle,
    TraceCallManyRequest,
    TraceCallRequest,
    TraceConfig,
    TracerResponse,
    TraceTransactionRequest,
)
from ..processors.trace_processor import ExtendedTracerResponse

logger = logging.getLogger(__name__)


class TraceClient:
    """Runs trace requests and wraps their results."""

    def __init__(self, http: HttpClient):
        self.http = http

    def trace(self, tracers: Optional[TraceConfig] = None) -> TraceRequestBuilder:
        """Start a fluent trace request; pick a mode with transaction(), call() or call_many()."""
        return TraceRequestBuilder(self, tracers)

    async def trace_transaction(
        self,
        transaction_hash: str,
        tracers: Optional[TraceConfig] = None,
        options: Optional[RequestOptions] = None,
    ) -> ExtendedTracerResponse:
        builder = self.trace(tracers).transaction(transaction_hash)
        if options is not None:
            builder.with_execution_options(options)
        return await builder.execute()

    async def trace_call(
        self,
        call: TransactionCallInput,
        block: Union[int, str] = "latest",
        tracers: Optional[TraceConfig] = None,
        state_overrides: Optional[Mapping[str, StateOverrideInput]] = None,
        block_overrides: Optional[BlockOverridesInput] = None,
        options: Optional[RequestOptions] = None,
    ) -> ExtendedTracerResponse:
        builder = self.trace(tracers).call(call).at_block(block)
        if state_overrides:
            builder.with_state_overrides(state_overrides)
        if block_overrides is not None:
            builder.with_block_overrides(block_overrides)
        if options is not None:
            builder.with_execution_options(options)
        return await builder.execute()

    async def trace_call_many(
        self,
        bundles: Sequence[Union[Bundle, dict]],
        block: Union[int, str] = "latest",
        tx_index: Optional[int] = None,
        tracers: Optional[TraceConfig] = None,
        options: Optional[RequestOptions] = None,
    ) -> List[ExtendedTracerResponse]:
        builder = self.trace(tracers).call_many(bundles).with_state_context(block, tx_index)
        if options is not None:
            builder.with_execution_options(options)
        return await builder.execute()

    async def execute_trace_transaction(
        self,
        request: TraceTransactionRequest,
        options: Optional[RequestOptions] = None,
    ) -> ExtendedTracerResponse:
        response = await self.http.post("/trace/tx", request.to_wire(), TracerResponse, options)
        return ExtendedTracerResponse(response)

    async def execute_trace_call(
        self,
        request: TraceCallRequest,
        options: Optional[RequestOptions] = None,
    ) -> ExtendedTracerResponse:
        response = await self.http.post("/trace/call", request.to_wire(), TracerResponse, options)
        return ExtendedTracerResponse(response)

    async def execute_trace_call_many(
        self,
        request: TraceCallManyRequest,
        options: Optional[RequestOptions] = None,
    ) -> List[ExtendedTracerResponse]:
        responses = await self.http.post(
            "/trace/call-many", request.to_wire(), List[TracerResponse], options
        )
        logger.debug(f"call-many returned {len(responses)} traces for {len(request.bundles)} bundles")
        return [ExtendedTracerResponse(response) for response in responses]
