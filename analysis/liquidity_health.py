"""
Liquidity Health Scorer
LP lock status, pool depth and deployer LP control from GoPlus
"""

import logging
from typing import Any, Dict, Optional

from analysis.base_scorer import (
    CategoryScorer, normalize_percentages, is_deployer_entry, deployer_addresses
)
from analysis.models import CategoryScore
from data.collectors.goplus import GoPlusClient
from utils.constants import Category, LIQUIDITY_THRESHOLDS, SCORE_NEUTRAL
from utils.helpers import safe_float, safe_int, round_score

logger = logging.getLogger(__name__)


class LiquidityHealthScorer(CategoryScorer):
    """
    Pool age is not reported by GoPlus, so poolAgeScore is always neutral.
    """

    category = Category.LIQUIDITY_HEALTH

    def __init__(self, goplus: GoPlusClient, thresholds: Optional[Dict[str, float]] = None):
        self.goplus = goplus
        self.thresholds = thresholds or LIQUIDITY_THRESHOLDS

    async def analyze(self, address: str) -> CategoryScore:
        payload = await self.goplus.fetch(address)
        return self.score(payload)

    def score(self, payload: Optional[Dict[str, Any]] = None) -> CategoryScore:
        if not payload:
            return self.default_score()

        lp_holders = payload.get('lp_holders')
        dex = payload.get('dex')
        if not isinstance(lp_holders, list) and not isinstance(dex, list):
            logger.debug("No LP holder or DEX data in security payload")
            return self.default_score()

        lp_holders = [h for h in (lp_holders or []) if isinstance(h, dict)]
        dex = [d for d in (dex or []) if isinstance(d, dict)]

        is_locked = any(safe_int(holder.get('is_locked')) == 1 for holder in lp_holders)

        if dex:
            depth = sum(safe_float(pool.get('liquidity')) for pool in dex)
        else:
            depth = sum(safe_float(holder.get('balance')) for holder in lp_holders)

        deployers = deployer_addresses(payload)
        shares = normalize_percentages(holder.get('percent') for holder in lp_holders)
        deployer_pct = sum(
            share for holder, share in zip(lp_holders, shares)
            if is_deployer_entry(holder, deployers)
        )
        deployer_has_control = deployer_pct >= self.thresholds['max_deployer_lp_pct']

        return CategoryScore(
            category=self.category.value,
            sub_scores={
                'poolLockedScore': self.binary(is_locked),
                'liquidityDepthScore': self.binary(depth > self.thresholds['min_depth_usd']),
                'deployerControlScore': self.binary(not deployer_has_control),
                'poolAgeScore': SCORE_NEUTRAL,
            },
            details={
                'isPoolLocked': is_locked,
                'liquidityUSD': round_score(depth),
                'deployerHasControl': deployer_has_control,
                'poolAgeDays': None,
            },
            sources={'goplus': True},
        )
