"""
Sui JSON-RPC clients
Coin metadata (suix_getCoinMetadata) and trailing-window transaction activity
(suix_queryTransactionBlocks) for a coin type
"""

import logging
import time
from typing import Any, Callable, Dict, List, Optional

import aiohttp

from data.collectors.base_provider import BaseProviderClient
from utils.constants import (
    SUI_MAINNET_RPC_URL, PROVIDER_TIMEOUTS, COMMUNITY_THRESHOLDS
)
from utils.errors import ProviderDataAbsent, MalformedPayload
from utils.helpers import safe_int

logger = logging.getLogger(__name__)


class SuiRpcClient(BaseProviderClient):
    """Chain RPC provider: coin metadata"""

    name = "SuiRPC"

    def __init__(
        self,
        rpc_url: str = SUI_MAINNET_RPC_URL,
        timeout: float = PROVIDER_TIMEOUTS["sui_rpc"],
        session: Optional[aiohttp.ClientSession] = None,
    ):
        super().__init__(timeout=timeout, session=session)
        self.rpc_url = rpc_url
        self._request_id = 0

    async def _rpc(self, method: str, params: List[Any]) -> Any:
        """Call one JSON-RPC method and return its result field"""
        self._request_id += 1
        body = {
            'jsonrpc': '2.0',
            'id': self._request_id,
            'method': method,
            'params': params,
        }
        data = await self._post_json(
            self.rpc_url, body, headers={'Content-Type': 'application/json'}
        )

        if not isinstance(data, dict):
            raise MalformedPayload(self.name, "RPC response is not an object")
        if data.get('error'):
            error = data['error']
            message = error.get('message') if isinstance(error, dict) else error
            raise ProviderDataAbsent(self.name, f"{method}: {message}")
        return data.get('result')

    async def _fetch(self, address: str) -> Optional[Dict[str, Any]]:
        result = await self._rpc('suix_getCoinMetadata', [address])
        if result is None:
            raise ProviderDataAbsent(self.name, "no coin metadata")
        if not isinstance(result, dict):
            raise MalformedPayload(self.name, "coin metadata is not an object")

        logger.debug(
            f"🏷️ Sui metadata: {result.get('name')} ({result.get('symbol')}), "
            f"decimals={result.get('decimals')}"
        )
        return result


class SuiActivityClient(SuiRpcClient):
    """
    Chain RPC provider: transactions touching the coin's package over a
    trailing window.

    Pages newest-first and stops at the first transaction older than the
    window, or after max_pages pages (reported as truncated).
    """

    name = "SuiActivity"
    PAGE_LIMIT = 50

    def __init__(
        self,
        rpc_url: str = SUI_MAINNET_RPC_URL,
        timeout: float = PROVIDER_TIMEOUTS["sui_rpc"],
        window_days: int = COMMUNITY_THRESHOLDS["activity_window_days"],
        max_pages: int = 4,
        clock: Callable[[], float] = time.time,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        super().__init__(rpc_url=rpc_url, timeout=timeout, session=session)
        self.window_days = window_days
        self.max_pages = max_pages
        self.clock = clock

    @staticmethod
    def package_id(address: str) -> str:
        """Package id of a coin type ("0xabc::coin::COIN" -> "0xabc")"""
        return address.split('::', 1)[0]

    async def _fetch(self, address: str) -> Optional[Dict[str, Any]]:
        cutoff_ms = int((self.clock() - self.window_days * 86400) * 1000)
        query = {
            'filter': {'MoveFunction': {'package': self.package_id(address)}},
            'options': {},
        }

        tx_count = 0
        cursor = None
        truncated = False

        for page in range(self.max_pages):
            result = await self._rpc(
                'suix_queryTransactionBlocks',
                [query, cursor, self.PAGE_LIMIT, True],
            )
            if not isinstance(result, dict) or not isinstance(result.get('data'), list):
                raise MalformedPayload(self.name, "transaction page without data")

            reached_cutoff = False
            for tx in result['data']:
                if safe_int(tx.get('timestampMs')) < cutoff_ms:
                    reached_cutoff = True
                    break
                tx_count += 1

            if reached_cutoff or not result.get('hasNextPage'):
                break
            cursor = result.get('nextCursor')
            if page == self.max_pages - 1:
                truncated = True

        return {
            'txCount': tx_count,
            'windowDays': self.window_days,
            'truncated': truncated,
        }
