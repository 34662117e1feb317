"""
Composite Scorer
Weighted overall score and risk tier from the four category scores
"""

import logging
from datetime import datetime
from typing import Callable, Dict, Optional, Tuple

from analysis.models import CategoryScore, CompositeAnalysis, empty_data_sources
from data.collectors.dex_liquidity import LiquidityInfo
from utils.constants import (
    Category, RiskLevel, DEFAULT_CATEGORY_WEIGHTS, DEFAULT_RISK_BANDS,
    UNKNOWN_TOKEN_NAME, UNKNOWN_TOKEN_SYMBOL,
)
from utils.helpers import clamp, round_score, utc_now

logger = logging.getLogger(__name__)


def classify_risk(score: float, risk_bands: Optional[Dict[str, float]] = None) -> RiskLevel:
    """
    Map an overall score onto a risk tier.

    Bands are lower bounds checked from the safest tier down, so a higher
    score never lands in a more severe tier.
    """
    bands = risk_bands or DEFAULT_RISK_BANDS
    for level in (RiskLevel.LOW, RiskLevel.MEDIUM, RiskLevel.HIGH):
        if score >= bands[level.value]:
            return level
    return RiskLevel.VERY_HIGH


def compute_composite(
    contract_behavior: CategoryScore,
    liquidity_health: CategoryScore,
    holder_distribution: CategoryScore,
    community_signals: CategoryScore,
    weights: Optional[Dict[str, float]] = None,
    risk_bands: Optional[Dict[str, float]] = None,
) -> Tuple[float, RiskLevel]:
    """
    Weighted sum of category totals

    Returns:
        (overall score in [0, 1] rounded to two decimals, risk tier)
    """
    weights = weights or DEFAULT_CATEGORY_WEIGHTS
    totals = {
        Category.CONTRACT_BEHAVIOR.value: contract_behavior.total_score,
        Category.LIQUIDITY_HEALTH.value: liquidity_health.total_score,
        Category.HOLDER_DISTRIBUTION.value: holder_distribution.total_score,
        Category.COMMUNITY_SIGNALS.value: community_signals.total_score,
    }

    weighted = sum(weights[category] * total for category, total in totals.items())
    overall = round_score(clamp(weighted))
    risk_level = classify_risk(overall, risk_bands)

    logger.debug(f"Composite score {overall:.2f} ({risk_level.value}) from {totals}")
    return overall, risk_level


def build_fallback_analysis(
    address: str,
    weights: Optional[Dict[str, float]] = None,
    risk_bands: Optional[Dict[str, float]] = None,
    clock: Callable[[], datetime] = utc_now,
) -> CompositeAnalysis:
    """Analysis assembled purely from the defaults table"""
    categories = [CategoryScore.from_defaults(category.value) for category in Category]
    overall, risk_level = compute_composite(*categories, weights=weights, risk_bands=risk_bands)

    return CompositeAnalysis(
        contract_address=address.strip(),
        token_name=UNKNOWN_TOKEN_NAME,
        token_symbol=UNKNOWN_TOKEN_SYMBOL,
        contract_behavior=categories[0],
        liquidity_health=categories[1],
        holder_distribution=categories[2],
        community_signals=categories[3],
        liquidity_info=LiquidityInfo.unavailable(),
        overall_score=overall,
        risk_level=risk_level,
        is_fallback=True,
        data_sources=empty_data_sources(),
        timestamp=clock(),
    )
