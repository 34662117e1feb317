# tests/conftest.py
"""
Global pytest configuration and fixtures
"""
import copy
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from analysis.token_analyzer import TokenAnalyzer
from config.config_manager import ENV_OVERRIDES
from data.collectors.dex_liquidity import LiquidityInfo
from tests.fixtures.mock_data import (
    SAFE_TOKEN_SECURITY, COINGECKO_COIN, SUI_COIN_METADATA, SUI_ACTIVITY,
    CETUS_LIQUIDITY,
)

FIXED_TIME = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return FIXED_TIME


def make_client(payload: Optional[Dict] = None, name: str = "provider") -> AsyncMock:
    """Provider client double whose fetch() returns payload"""
    client = AsyncMock()
    client.name = name
    client.fetch.return_value = copy.deepcopy(payload)
    return client


def make_session(responses: List[Any]) -> MagicMock:
    """
    aiohttp session double.

    Each item in responses is served to one request, in order: a
    (status, json_body) tuple, or an exception raised from request().
    """
    def build(item):
        if isinstance(item, BaseException):
            raise item
        status, body = item
        response = MagicMock()
        response.status = status
        if isinstance(body, BaseException):
            response.json = AsyncMock(side_effect=body)
        else:
            response.json = AsyncMock(return_value=body)
        ctx = MagicMock()
        ctx.__aenter__ = AsyncMock(return_value=response)
        ctx.__aexit__ = AsyncMock(return_value=False)
        return ctx

    queue = list(responses)
    session = MagicMock()
    session.closed = False
    session.request = MagicMock(side_effect=lambda *args, **kwargs: build(queue.pop(0)))
    return session


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep host environment variables out of configuration tests"""
    for var in list(ENV_OVERRIDES) + ['LIQUIDITY_CHAIN', 'CHAINCHECK_CONFIG']:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def safe_security() -> Dict:
    return copy.deepcopy(SAFE_TOKEN_SECURITY)


@pytest.fixture
def coingecko_coin() -> Dict:
    return copy.deepcopy(COINGECKO_COIN)


@pytest.fixture
def healthy_clients() -> Dict[str, AsyncMock]:
    """Provider doubles that all return data"""
    chain = AsyncMock()
    chain.fetch.return_value = LiquidityInfo.from_payload(CETUS_LIQUIDITY, "cetus")
    return {
        'goplus': make_client(SAFE_TOKEN_SECURITY, "GoPlus"),
        'coingecko': make_client(COINGECKO_COIN, "CoinGecko"),
        'sui_rpc': make_client(SUI_COIN_METADATA, "SuiRPC"),
        'activity': make_client(SUI_ACTIVITY, "SuiActivity"),
        'liquidity_chain': chain,
    }


@pytest.fixture
def failing_clients() -> Dict[str, AsyncMock]:
    """Provider doubles that all come back empty"""
    chain = AsyncMock()
    chain.fetch.return_value = LiquidityInfo.unavailable()
    return {
        'goplus': make_client(None, "GoPlus"),
        'coingecko': make_client(None, "CoinGecko"),
        'sui_rpc': make_client(None, "SuiRPC"),
        'activity': make_client(None, "SuiActivity"),
        'liquidity_chain': chain,
    }


@pytest.fixture
def analyzer(healthy_clients) -> TokenAnalyzer:
    return TokenAnalyzer(**healthy_clients, clock=fixed_clock)


@pytest.fixture
def failing_analyzer(failing_clients) -> TokenAnalyzer:
    return TokenAnalyzer(**failing_clients, clock=fixed_clock)
