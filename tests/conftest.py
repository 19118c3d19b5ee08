"""Shared fixtures for Altitrace client tests."""
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from altitrace.config import ClientConfig, RetryConfig

USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
SENDER = "0x742d35Cc6634C0532925a3b844Bc9e7595f06e8c"
RECIPIENT = "0x1234567890123456789012345678901234567890"
TRANSFER_DATA = (
    "0xa9059cbb"
    "0000000000000000000000001234567890123456789012345678901234567890"
    "00000000000000000000000000000000000000000000000000000000000f4240"
)


@pytest.fixture
def make_response():
    """Factory for a mock aiohttp response."""
    def _make(status=200, payload=None, text=None, body=None):
        if body is None:
            body = (text if text is not None else json.dumps(payload)).encode("utf-8")
        response = MagicMock()
        response.status = status
        response.read = AsyncMock(return_value=body)
        return response
    return _make


@pytest.fixture
def make_session(make_response):
    """Factory for a mock aiohttp session.

    Each item is a response payload dict (sent as a 200 envelope body), a
    ``(status, payload)`` tuple, a mock response, or an exception raised by
    ``session.request``.
    """
    def _make(*items):
        side_effects = []
        for item in items:
            if isinstance(item, BaseException):
                side_effects.append(item)
                continue
            if isinstance(item, tuple):
                response = make_response(status=item[0], payload=item[1])
            elif isinstance(item, dict):
                response = make_response(payload=item)
            else:
                response = item
            context = MagicMock()
            context.__aenter__ = AsyncMock(return_value=response)
            context.__aexit__ = AsyncMock(return_value=False)
            side_effects.append(context)

        session = MagicMock()
        session.close = AsyncMock()
        session.request = MagicMock(side_effect=side_effects)
        return session
    return _make


@pytest.fixture
def fast_config():
    """Config with three attempts and no meaningful back-off."""
    return ClientConfig(
        base_url="http://altitrace.test/v1",
        timeout_ms=5000,
        retry=RetryConfig(max_attempts=3, base_delay_ms=0, max_delay_ms=0),
    )


@pytest.fixture
def simulation_result_data():
    """Successful ERC-20 transfer simulation as returned by the service."""
    return {
        "simulationId": "sim-123",
        "blockNumber": "0x1234",
        "status": "success",
        "gasUsed": "0x5208",
        "blockGasUsed": "0x5208",
        "calls": [
            {
                "callIndex": 0,
                "status": "success",
                "returnData": "0x0000000000000000000000000000000000000000000000000000000000000001",
                "gasUsed": "0x5208",
                "logs": [
                    {
                        "address": USDC,
                        "topics": [
                            "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef",
                        ],
                        "data": "0x00000000000000000000000000000000000000000000000000000000000f4240",
                        "removed": False,
                        "decoded": {
                            "name": "Transfer",
                            "signature": "Transfer(address,address,uint256)",
                            "standard": "ERC20",
                            "description": "Token transfer",
                            "params": [
                                {"name": "from", "paramType": "address", "value": SENDER, "indexed": True},
                                {"name": "to", "paramType": "address", "value": RECIPIENT, "indexed": True},
                                {"name": "value", "paramType": "uint256", "value": "1000000", "indexed": False},
                            ],
                            "summary": "Transferred 1 USDC",
                        },
                    }
                ],
            }
        ],
        "assetChanges": [
            {
                "token": {"address": USDC, "symbol": "USDC", "decimals": 6},
                "value": {"pre": "0x1e8480", "post": "0xf4240", "diff": "-0xf4240"},
            }
        ],
    }


@pytest.fixture
def envelope():
    """Wrap data in a successful response envelope."""
    def _wrap(data):
        return {
            "success": True,
            "data": data,
            "metadata": {"requestId": "req-1", "timestamp": "2024-01-01T00:00:00Z", "executionTime": 12},
        }
    return _wrap


@pytest.fixture
def nested_call_frame():
    """Three-level call tree; each parent's gasUsed already includes its children."""
    return {
        "callType": "CALL",
        "from": SENDER,
        "to": USDC,
        "value": "0x0",
        "gas": "0x30d40",
        "gasUsed": "0x7530",  # 30000
        "input": TRANSFER_DATA,
        "output": "0x",
        "depth": 0,
        "reverted": False,
        "calls": [
            {
                "callType": "DELEGATECALL",
                "from": USDC,
                "to": "0x43506849D7C04F9138D1A2050bbF3A0c054402dd",
                "value": "0x0",
                "gas": "0x1d4c0",
                "gasUsed": "0x4e20",  # 20000
                "input": TRANSFER_DATA,
                "depth": 1,
                "reverted": False,
                "logs": [
                    {"address": USDC, "topics": ["0xddf252ad"], "data": "0x01"},
                ],
                "calls": [
                    {
                        "callType": "STATICCALL",
                        "from": "0x43506849D7C04F9138D1A2050bbF3A0c054402dd",
                        "to": "0x0000000000000000000000000000000000000001",
                        "value": "0x0",
                        "gas": "0x2710",
                        "gasUsed": "0xbb8",  # 3000
                        "input": "0x70a08231000000000000000000000000742d35cc6634c0532925a3b844bc9e7595f06e8c",
                        "depth": 2,
                        "reverted": True,
                        "error": "execution reverted",
                        "revertReason": "insufficient balance",
                        "calls": [],
                    }
                ],
            }
        ],
    }
