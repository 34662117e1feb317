"""
Community Signals Scorer
Social reach and engagement from CoinGecko community data, market presence
from CoinGecko market data, and recent on-chain activity from Sui RPC
"""

import asyncio
import logging
from typing import Any, Dict, Optional

from analysis.base_scorer import CategoryScorer
from analysis.models import CategoryScore
from data.collectors.coingecko import CoinGeckoClient
from data.collectors.sui_rpc import SuiActivityClient
from utils.constants import Category, COMMUNITY_THRESHOLDS
from utils.helpers import mean, safe_float, safe_int, round_score

logger = logging.getLogger(__name__)


class CommunitySignalsScorer(CategoryScorer):
    """Combines the CoinGecko coin payload with Sui transaction activity"""

    category = Category.COMMUNITY_SIGNALS

    def __init__(
        self,
        coingecko: CoinGeckoClient,
        activity: SuiActivityClient,
        thresholds: Optional[Dict[str, float]] = None,
    ):
        self.coingecko = coingecko
        self.activity = activity
        self.thresholds = thresholds or COMMUNITY_THRESHOLDS

    async def analyze(self, address: str) -> CategoryScore:
        coin_payload, activity_payload = await asyncio.gather(
            self.coingecko.fetch(address),
            self.activity.fetch(address),
        )
        return self.score(coin_payload, activity_payload)

    def score(
        self,
        coin_payload: Optional[Dict[str, Any]] = None,
        activity_payload: Optional[Dict[str, Any]] = None,
    ) -> CategoryScore:
        if not coin_payload and not activity_payload:
            return self.default_score()

        social = CoinGeckoClient.social_view(coin_payload) or {}
        market = CoinGeckoClient.market_view(coin_payload)

        followers = safe_int(social.get('followers'))
        has_official = bool(social.get('hasOfficialSocial'))
        engagement_rate = safe_float(social.get('engagementRate'))
        tx_count = safe_int((activity_payload or {}).get('txCount'))

        social_presence = mean([
            self.binary(followers > self.thresholds['min_followers']),
            self.binary(has_official),
        ])
        market_mention = (
            0.5 * self.binary(market['isListed']) +
            0.5 * self.binary(market['volume24h'] > self.thresholds['min_market_volume_usd'])
        )

        if activity_payload and activity_payload.get('truncated'):
            logger.debug(f"Activity window truncated at {tx_count} transactions")

        return CategoryScore(
            category=self.category.value,
            sub_scores={
                'socialPresenceScore': social_presence,
                'engagementScore': self.binary(
                    engagement_rate > self.thresholds['min_engagement_rate']
                ),
                'chainActivityScore': self.binary(tx_count > self.thresholds['min_tx_count']),
                'marketMentionScore': market_mention,
            },
            details={
                'socialFollowers': followers,
                'engagementRate': round_score(engagement_rate),
                'txLast7Days': tx_count,
                'isListedOnCoinGecko': market['isListed'],
            },
            sources={
                'coingecko': coin_payload is not None,
                'suiActivity': activity_payload is not None,
            },
        )
