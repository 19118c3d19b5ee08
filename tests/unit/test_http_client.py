"""Unit tests for HttpClient retry and error classification."""
import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from altitrace.config import ClientConfig, RequestOptions, RetryConfig
from altitrace.core import AltitraceApiError, HttpClient, NetworkError, NetworkErrorKind
from altitrace.models import SimulationResult


def _error_envelope(code="SIMULATION_FAILED", message="Simulation failed"):
    return {
        "success": False,
        "error": {"code": code, "message": message, "suggestion": "Check the call data"},
        "metadata": {"requestId": "req-err"},
    }


@pytest.fixture
def http(fast_config):
    """HttpClient with a zero-delay retry policy."""
    return HttpClient(fast_config)


class TestHttpClientResponses:
    """Test envelope handling on a single attempt."""

    @pytest.mark.asyncio
    async def test_success_parses_data(self, http, make_session, envelope, simulation_result_data):
        """Test data is parsed into the requested model."""
        http.session = make_session(envelope(simulation_result_data))

        result = await http.post("/simulate", {"params": {}}, SimulationResult)

        assert isinstance(result, SimulationResult)
        assert result.gas_used == "0x5208"
        method, url = http.session.request.call_args.args
        assert method == "POST"
        assert url == "http://altitrace.test/v1/simulate"
        assert http.session.request.call_args.kwargs["json"] == {"params": {}}

    @pytest.mark.asyncio
    async def test_untyped_get_returns_raw_data(self, http, make_session, envelope):
        """Test result_type Any returns the envelope data untouched."""
        http.session = make_session(envelope({"status": "ok"}))

        assert await http.get("/status/healthcheck") == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_error_envelope_raises_api_error(self, http, make_session):
        """Test an unsuccessful envelope surfaces code, suggestion and request id."""
        http.session = make_session((200, _error_envelope()))

        with pytest.raises(AltitraceApiError) as exc_info:
            await http.post("/simulate", {})

        error = exc_info.value
        assert error.code == "SIMULATION_FAILED"
        assert error.suggestion == "Check the call data"
        assert error.request_id == "req-err"
        assert error.status_code == 200

    @pytest.mark.asyncio
    async def test_missing_data_is_malformed(self, http, make_session):
        """Test a success envelope without data is a malformed response."""
        http.session = make_session({"success": True})

        with pytest.raises(NetworkError) as exc_info:
            await http.post("/simulate", {}, SimulationResult)

        assert exc_info.value.kind == NetworkErrorKind.MALFORMED_RESPONSE

    @pytest.mark.asyncio
    async def test_data_shape_mismatch_is_malformed(self, http, make_session, envelope):
        """Test data that does not match the result type is a malformed response."""
        http.session = make_session(envelope({"unexpected": True}))

        with pytest.raises(NetworkError) as exc_info:
            await http.post("/simulate", {}, SimulationResult)

        assert exc_info.value.kind == NetworkErrorKind.MALFORMED_RESPONSE

    @pytest.mark.asyncio
    async def test_plain_text_error_page(self, http, make_session, make_response):
        """Test a non-JSON 4xx body becomes an HTTP_ERROR api error."""
        http.session = make_session(make_response(status=404, text="Not Found"))

        with pytest.raises(AltitraceApiError) as exc_info:
            await http.get("/missing")

        assert exc_info.value.code == "HTTP_ERROR"
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_request_options_forwarded(self, http, make_session, envelope):
        """Test per-request headers and timeout reach the session."""
        http.session = make_session(envelope({}))

        await http.get("/status/healthcheck", options=RequestOptions(timeout_ms=1500, headers={"X-Trace": "1"}))

        kwargs = http.session.request.call_args.kwargs
        assert kwargs["headers"] == {"X-Trace": "1"}
        assert kwargs["timeout"].total == 1.5


class TestHttpClientRetry:
    """Test the retry loop."""

    @pytest.mark.asyncio
    async def test_retries_until_success(self, http, make_session, envelope):
        """Test k retryable failures followed by success take k+1 requests."""
        http.session = make_session(
            aiohttp.ClientConnectionError("refused"),
            (503, _error_envelope("UNAVAILABLE", "busy")),
            envelope({"status": "ok"}),
        )

        result = await http.get("/status/healthcheck")

        assert result == {"status": "ok"}
        assert http.session.request.call_count == 3
        assert http.get_stats()["retries"] == 2

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(self, http, make_session):
        """Test the last error is raised with the attempt count."""
        http.session = make_session(*[aiohttp.ClientConnectionError("refused")] * 3)

        with pytest.raises(NetworkError) as exc_info:
            await http.get("/status/healthcheck")

        assert exc_info.value.kind == NetworkErrorKind.CONNECTION
        assert exc_info.value.attempts == 3
        assert http.session.request.call_count == 3

    @pytest.mark.asyncio
    async def test_timeout_classified(self, http, make_session):
        """Test asyncio timeouts become TIMEOUT network errors."""
        http.session = make_session(*[asyncio.TimeoutError()] * 3)

        with pytest.raises(NetworkError) as exc_info:
            await http.get("/status/healthcheck")

        assert exc_info.value.is_timeout
        assert "5000ms" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_malformed_json_not_retried(self, http, make_session, make_response):
        """Test invalid JSON on a 2xx fails after a single attempt."""
        http.session = make_session(make_response(status=200, text="<html>"))

        with pytest.raises(NetworkError) as exc_info:
            await http.get("/status/healthcheck")

        assert exc_info.value.kind == NetworkErrorKind.MALFORMED_RESPONSE
        assert http.session.request.call_count == 1

    @pytest.mark.asyncio
    async def test_undecodable_body_is_malformed(self, http, make_session, make_response):
        """Test a body that is not UTF-8 becomes a malformed response, not retried."""
        http.session = make_session(make_response(status=200, body=b'{"success": true, "data": "\xff\xfe"}'))

        with pytest.raises(NetworkError) as exc_info:
            await http.get("/status/healthcheck")

        assert exc_info.value.kind == NetworkErrorKind.MALFORMED_RESPONSE
        assert exc_info.value.status_code == 200
        assert http.session.request.call_count == 1
        assert http.get_stats()["network_errors"] == 1

    @pytest.mark.asyncio
    async def test_undecodable_error_page(self, http, make_session, make_response):
        """Test a non-UTF-8 4xx body surfaces as an HTTP_ERROR api error."""
        http.session = make_session(make_response(status=404, body=b"\xff\xfe not found"))

        with pytest.raises(AltitraceApiError) as exc_info:
            await http.get("/missing")

        assert exc_info.value.code == "HTTP_ERROR"
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_client_error_status_not_retried(self, http, make_session):
        """Test a 400 error envelope is raised immediately."""
        http.session = make_session((400, _error_envelope("VALIDATION_ERROR", "bad input")))

        with pytest.raises(AltitraceApiError) as exc_info:
            await http.post("/simulate", {})

        assert exc_info.value.status_code == 400
        assert http.session.request.call_count == 1

    @pytest.mark.asyncio
    async def test_retry_disabled_per_request(self, http, make_session):
        """Test RequestOptions(retry=False) makes a single attempt."""
        http.session = make_session(aiohttp.ClientConnectionError("refused"))

        with pytest.raises(NetworkError):
            await http.get("/status/healthcheck", options=RequestOptions(retry=False))

        assert http.session.request.call_count == 1

    @pytest.mark.asyncio
    async def test_custom_predicate(self, make_session):
        """Test a custom should_retry replaces the default decision."""
        predicate = MagicMock(return_value=False)
        http = HttpClient(ClientConfig(
            base_url="http://altitrace.test/v1",
            retry=RetryConfig(max_attempts=5, base_delay_ms=0, max_delay_ms=0, should_retry=predicate),
        ))
        http.session = make_session((503, _error_envelope("UNAVAILABLE", "busy")))

        with pytest.raises(AltitraceApiError):
            await http.get("/status/healthcheck")

        assert http.session.request.call_count == 1
        error, attempt, status_code = predicate.call_args.args
        assert isinstance(error, AltitraceApiError)
        assert attempt == 1
        assert status_code == 503

    @pytest.mark.asyncio
    async def test_backoff_delays(self, make_session, envelope):
        """Test sleeps follow the exponential schedule capped at max delay."""
        http = HttpClient(ClientConfig(
            base_url="http://altitrace.test/v1",
            retry=RetryConfig(max_attempts=4, base_delay_ms=100, max_delay_ms=300, backoff_multiplier=2.0),
        ))
        http.session = make_session(
            *[aiohttp.ClientConnectionError("refused")] * 3,
            envelope({"status": "ok"}),
        )

        with patch("altitrace.core.http_client.asyncio.sleep", new_callable=AsyncMock) as sleep:
            await http.get("/status/healthcheck")

        assert [c.args[0] for c in sleep.call_args_list] == [0.1, 0.2, 0.3]


class TestHttpClientLifecycle:
    """Test session management."""

    @pytest.mark.asyncio
    async def test_close_releases_session(self, http, make_session):
        """Test close() closes and clears the session."""
        session = make_session()
        http.session = session

        await http.close()

        session.close.assert_awaited_once()
        assert http.session is None
        assert http.get_stats()["session_open"] is False

    def test_url_joining(self, http):
        """Test slashes are normalized between base URL and path."""
        assert http._build_url("simulate") == "http://altitrace.test/v1/simulate"
        assert http._build_url("/trace/tx") == "http://altitrace.test/v1/trace/tx"
