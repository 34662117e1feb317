"""
Holder Distribution Scorer
Concentration, whale and deployer checks plus a holder-count diversity band
"""

import logging
from typing import Any, Dict, Optional

from analysis.base_scorer import (
    CategoryScorer, normalize_percentages, is_deployer_entry, deployer_addresses
)
from analysis.models import CategoryScore
from data.collectors.goplus import GoPlusClient
from utils.constants import Category, HOLDER_THRESHOLDS, HOLDER_DIVERSITY_BANDS, SCORE_FAIL
from utils.helpers import safe_int, round_score

logger = logging.getLogger(__name__)


def diversity_score(total_holders: int) -> float:
    """Banded score on total holder count"""
    for minimum, score in HOLDER_DIVERSITY_BANDS:
        if total_holders >= minimum:
            return score
    return SCORE_FAIL


class HolderDistributionScorer(CategoryScorer):
    """Scores the GoPlus holders list"""

    category = Category.HOLDER_DISTRIBUTION

    def __init__(self, goplus: GoPlusClient, thresholds: Optional[Dict[str, float]] = None):
        self.goplus = goplus
        self.thresholds = thresholds or HOLDER_THRESHOLDS

    async def analyze(self, address: str) -> CategoryScore:
        payload = await self.goplus.fetch(address)
        return self.score(payload)

    def score(self, payload: Optional[Dict[str, Any]] = None) -> CategoryScore:
        if not payload or not isinstance(payload.get('holders'), list):
            return self.default_score()

        holders = [h for h in payload['holders'] if isinstance(h, dict)]
        shares = sorted(
            normalize_percentages(holder.get('percent') for holder in holders),
            reverse=True,
        )

        top5_pct = sum(shares[:5])
        largest_pct = shares[0] if shares else 0.0

        deployers = deployer_addresses(payload)
        deployer_count = sum(1 for holder in holders if is_deployer_entry(holder, deployers))

        if payload.get('holder_count') is not None:
            total_holders = safe_int(payload.get('holder_count'))
        else:
            total_holders = len(holders)

        return CategoryScore(
            category=self.category.value,
            sub_scores={
                'topHolderScore': self.binary(top5_pct < self.thresholds['max_top5_pct']),
                'whaleDetectionScore': self.binary(
                    largest_pct <= self.thresholds['max_single_holder_pct']
                ),
                'deployerActivityScore': self.binary(
                    deployer_count < self.thresholds['max_deployer_holders']
                ),
                'diversityScore': diversity_score(total_holders),
            },
            details={
                'top5HoldersPercentage': round_score(top5_pct),
                'largestHolderPercentage': round_score(largest_pct),
                'totalHolders': total_holders,
                'deployerTxCount': deployer_count,
            },
            sources={'goplus': True},
        )
