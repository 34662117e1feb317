"""
Provider clients
Each wraps one external source behind fetch(address) -> payload | None
"""

from .base_provider import BaseProviderClient
from .coingecko import CoinGeckoClient
from .dex_liquidity import LiquidityFallbackChain, LiquidityInfo, build_liquidity_chain
from .goplus import GoPlusClient
from .sui_rpc import SuiRpcClient, SuiActivityClient

__all__ = [
    'BaseProviderClient',
    'CoinGeckoClient',
    'GoPlusClient',
    'SuiRpcClient',
    'SuiActivityClient',
    'LiquidityFallbackChain',
    'LiquidityInfo',
    'build_liquidity_chain',
]
