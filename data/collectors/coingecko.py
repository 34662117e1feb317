"""
CoinGecko API client
Market data and community data for listed tokens, resolved through a static
Sui coin-type catalog or the contract lookup endpoint
"""

import logging
from typing import Any, Dict, Optional

import aiohttp

from data.collectors.base_provider import BaseProviderClient
from utils.constants import (
    COINGECKO_API_URL, COINGECKO_PRO_API_URL, PROVIDER_TIMEOUTS, SUI_COINGECKO_IDS
)
from utils.errors import MalformedPayload
from utils.helpers import get_nested, safe_float, safe_int

logger = logging.getLogger(__name__)


class CoinGeckoClient(BaseProviderClient):
    """Market-data provider"""

    name = "CoinGecko"

    COIN_PARAMS = {
        'localization': 'false',
        'tickers': 'false',
        'market_data': 'true',
        'community_data': 'true',
        'developer_data': 'false',
        'sparkline': 'false',
    }

    def __init__(
        self,
        platform: str = "sui",
        api_key: str = "",
        pro: bool = False,
        timeout: float = PROVIDER_TIMEOUTS["coingecko"],
        session: Optional[aiohttp.ClientSession] = None,
    ):
        super().__init__(timeout=timeout, session=session)
        self.platform = platform
        self.api_key = api_key
        self.pro = pro
        self.base_url = COINGECKO_PRO_API_URL if pro else COINGECKO_API_URL

    @property
    def headers(self) -> Dict[str, str]:
        if not self.api_key:
            return {}
        header = 'x-cg-pro-api-key' if self.pro else 'x-cg-demo-api-key'
        return {header: self.api_key}

    @staticmethod
    def resolve_coin_id(address: str) -> Optional[str]:
        """Map a known coin type to its CoinGecko id, ignoring case"""
        cleaned = address.strip()
        return SUI_COINGECKO_IDS.get(cleaned) or SUI_COINGECKO_IDS.get(cleaned.lower())

    async def _fetch(self, address: str) -> Optional[Dict[str, Any]]:
        coin_id = self.resolve_coin_id(address)
        if coin_id:
            logger.debug(f"🗺️ Contract mapping: {address[:16]}... → {coin_id}")
            url = f"{self.base_url}/coins/{coin_id}"
        else:
            url = f"{self.base_url}/coins/{self.platform}/contract/{address}"

        data = await self._get_json(url, params=self.COIN_PARAMS, headers=self.headers)
        if not isinstance(data, dict) or 'id' not in data:
            raise MalformedPayload(self.name, "coin response without id")
        return data

    # ============= Payload views =============

    @staticmethod
    def market_view(payload: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Listing and market figures from a coin payload"""
        if not payload:
            return {
                'isListed': False,
                'name': None,
                'symbol': None,
                'price': 0.0,
                'volume24h': 0.0,
                'marketCap': 0.0,
                'priceChange24h': 0.0,
            }

        market = payload.get('market_data') or {}
        return {
            'isListed': True,
            'name': payload.get('name'),
            'symbol': payload.get('symbol'),
            'price': safe_float(get_nested(market, 'current_price', 'usd')),
            'volume24h': safe_float(get_nested(market, 'total_volume', 'usd')),
            'marketCap': safe_float(get_nested(market, 'market_cap', 'usd')),
            'priceChange24h': safe_float(market.get('price_change_percentage_24h')),
        }

    @staticmethod
    def social_view(payload: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        """
        Follower count, official account presence and engagement rate.

        Engagement rate is active Reddit accounts over subscribers in the
        last 48h, as a percentage.
        """
        if not payload:
            return None

        community = payload.get('community_data') or {}
        links = payload.get('links') or {}

        followers = (
            safe_int(community.get('twitter_followers')) +
            safe_int(community.get('telegram_channel_user_count'))
        )
        has_official = bool(
            links.get('twitter_screen_name') or links.get('telegram_channel_identifier')
        )

        subscribers = safe_int(community.get('reddit_subscribers'))
        active = safe_float(community.get('reddit_accounts_active_48h'))
        engagement_rate = (active / subscribers * 100) if subscribers > 0 else 0.0

        return {
            'followers': followers,
            'hasOfficialSocial': has_official,
            'engagementRate': engagement_rate,
        }
