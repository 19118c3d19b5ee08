"""aiohttp transport with timeout, retry/back-off and error classification."""
import asyncio
import json
import logging
from typing import Any, Dict, Optional, Type, TypeVar

import aiohttp
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..config.client_config import ClientConfig, RequestOptions
from ..models.common import ApiResponse
from .errors import AltitraceApiError, AltitraceError, NetworkError, NetworkErrorKind

logger = logging.getLogger(__name__)

T = TypeVar("T")


class HttpClient:
    """
    Low-level HTTP client for the Altitrace API.

    Sends JSON requests, unwraps the ``{success, data, error}`` envelope and
    parses ``data`` into the requested result type. Failed attempts are retried
    according to the configured ``RetryConfig``.
    """

    def __init__(self, config: Optional[ClientConfig] = None):
        """
        Initialize the HTTP client.

        Args:
            config: Client configuration; defaults to a local server
        """
        self.config = config or ClientConfig()
        self.session: Optional[aiohttp.ClientSession] = None
        self._adapters: Dict[Any, TypeAdapter] = {}

        self._stats = {
            "requests_sent": 0,
            "retries": 0,
            "api_errors": 0,
            "network_errors": 0,
        }

        logger.info(f"Initialized HttpClient for {self.config.base_url}")

    async def initialize(self) -> None:
        """Create the underlying aiohttp session."""
        if self.session is not None:
            return

        self.session = aiohttp.ClientSession(
            headers=self.config.default_headers(),
            timeout=aiohttp.ClientTimeout(total=self.config.timeout_ms / 1000.0),
        )
        logger.info("Altitrace HTTP session initialized")

    async def close(self) -> None:
        """Close the aiohttp session."""
        if self.session:
            await self.session.close()
            self.session = None
        logger.info("Altitrace HTTP session closed")

    async def __aenter__(self) -> "HttpClient":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def get(
        self,
        path: str,
        result_type: Type[T] = Any,
        options: Optional[RequestOptions] = None,
    ) -> T:
        return await self.request("GET", path, result_type=result_type, options=options)

    async def post(
        self,
        path: str,
        body: Any,
        result_type: Type[T] = Any,
        options: Optional[RequestOptions] = None,
    ) -> T:
        return await self.request("POST", path, body=body, result_type=result_type, options=options)

    async def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        result_type: Type[T] = Any,
        options: Optional[RequestOptions] = None,
    ) -> T:
        """
        Send a request, retrying failed attempts.

        Args:
            method: HTTP method
            path: Path relative to the configured base URL
            body: JSON-serializable request body
            result_type: Type the envelope's ``data`` is parsed into
            options: Per-request timeout, headers and retry switch

        Returns:
            Parsed ``data`` of a successful envelope

        Raises:
            AltitraceApiError: Error envelope or non-2xx status
            NetworkError: Timeout, connection failure or malformed response
        """
        options = options or RequestOptions()
        retry = self.config.retry
        max_attempts = retry.max_attempts if options.retry else 1
        url = self._build_url(path)

        attempt = 0
        while True:
            attempt += 1
            try:
                return await self._send_once(method, url, body, result_type, options)
            except (AltitraceApiError, NetworkError) as e:
                e.attempts = attempt
                if attempt >= max_attempts or not self._should_retry(e, attempt):
                    if isinstance(e, AltitraceApiError):
                        self._stats["api_errors"] += 1
                    else:
                        self._stats["network_errors"] += 1
                    raise

                delay = retry.delay_for(attempt - 1)
                self._stats["retries"] += 1
                logger.warning(
                    f"{method} {path} failed (attempt {attempt}/{max_attempts}): {e.message}. "
                    f"Retrying in {delay:.2f}s"
                )
                await asyncio.sleep(delay)

    def get_stats(self) -> Dict[str, Any]:
        """Get client statistics."""
        return {
            **self._stats,
            "base_url": self.config.base_url,
            "session_open": self.session is not None,
        }

    async def _send_once(
        self,
        method: str,
        url: str,
        body: Any,
        result_type: Any,
        options: RequestOptions,
    ) -> Any:
        if self.session is None:
            await self.initialize()

        timeout_ms = options.timeout_ms or self.config.timeout_ms
        self._stats["requests_sent"] += 1

        if self.config.debug:
            logger.debug(f"-> {method} {url} body={json.dumps(body) if body is not None else None}")

        try:
            async with self.session.request(
                method,
                url,
                json=body,
                headers=options.headers or None,
                timeout=aiohttp.ClientTimeout(total=timeout_ms / 1000.0),
            ) as response:
                status = response.status
                body_bytes = await response.read()
        except asyncio.TimeoutError as e:
            raise NetworkError(
                f"Request timed out after {timeout_ms}ms",
                kind=NetworkErrorKind.TIMEOUT,
                cause=e,
            )
        except aiohttp.ClientError as e:
            raise NetworkError(
                f"Network error: {e}",
                kind=NetworkErrorKind.CONNECTION,
                cause=e,
            )

        if self.config.debug:
            logger.debug(f"<- {status} {url} body={body_bytes[:2000].decode('utf-8', errors='replace')}")

        return self._handle_response(status, body_bytes, result_type)

    def _handle_response(self, status: int, body_bytes: bytes, result_type: Any) -> Any:
        envelope = self._parse_envelope(status, body_bytes)

        if not 200 <= status < 300 or not envelope.success:
            error = envelope.error
            request_id = envelope.metadata.request_id if envelope.metadata else None
            if error is None:
                raise AltitraceApiError(
                    f"HTTP {status}: request failed",
                    code="HTTP_ERROR",
                    status_code=status,
                    request_id=request_id,
                )
            raise AltitraceApiError(
                error.message,
                code=error.code,
                status_code=status,
                suggestion=error.suggestion,
                details=error.details,
                request_id=request_id,
            )

        if result_type is Any:
            return envelope.data

        if envelope.data is None:
            raise NetworkError(
                "Response envelope is missing data",
                kind=NetworkErrorKind.MALFORMED_RESPONSE,
                status_code=status,
            )

        try:
            return self._adapter(result_type).validate_python(envelope.data)
        except PydanticValidationError as e:
            raise NetworkError(
                f"Response data does not match {getattr(result_type, '__name__', result_type)}: {e}",
                kind=NetworkErrorKind.MALFORMED_RESPONSE,
                status_code=status,
                cause=e,
            )

    def _parse_envelope(self, status: int, body_bytes: bytes) -> ApiResponse:
        try:
            text = body_bytes.decode("utf-8")
            payload = json.loads(text) if text else None
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            text = body_bytes.decode("utf-8", errors="replace")
            if not 200 <= status < 300:
                # plain-text error page
                raise AltitraceApiError(
                    f"HTTP {status}: {text[:200]}",
                    code="HTTP_ERROR",
                    status_code=status,
                )
            raise NetworkError(
                f"Undecodable response body: {e}",
                kind=NetworkErrorKind.MALFORMED_RESPONSE,
                status_code=status,
                cause=e,
            )

        if payload is None and not 200 <= status < 300:
            return ApiResponse(success=False)

        try:
            return ApiResponse.model_validate(payload)
        except PydanticValidationError as e:
            if not 200 <= status < 300:
                return ApiResponse(success=False)
            raise NetworkError(
                f"Malformed response envelope: {e}",
                kind=NetworkErrorKind.MALFORMED_RESPONSE,
                status_code=status,
                cause=e,
            )

    def _should_retry(self, error: AltitraceError, attempt: int) -> bool:
        retry = self.config.retry
        status_code = getattr(error, "status_code", None)

        if isinstance(error, NetworkError) and not error.is_retryable:
            return False

        if retry.should_retry is not None:
            return retry.should_retry(error, attempt, status_code)

        if status_code is None:
            return True
        return status_code in retry.retryable_status_codes

    def _adapter(self, result_type: Any) -> TypeAdapter:
        adapter = self._adapters.get(result_type)
        if adapter is None:
            adapter = TypeAdapter(result_type)
            self._adapters[result_type] = adapter
        return adapter

    def _build_url(self, path: str) -> str:
        return f"{self.config.base_url.rstrip('/')}/{path.lstrip('/')}"
