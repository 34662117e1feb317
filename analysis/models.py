"""
Analysis result types: per-category scores and the composite analysis
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List

from config.scoring_defaults import category_defaults
from data.collectors.dex_liquidity import LiquidityInfo
from utils.constants import Category, RiskLevel
from utils.helpers import round_score, mean, isoformat_utc

# Keys of CompositeAnalysis.data_sources
DATA_SOURCE_KEYS = ('goplus', 'coingecko', 'suiMetadata', 'suiActivity')


def empty_data_sources() -> Dict[str, Any]:
    """Provider outcome record when nothing answered"""
    sources: Dict[str, Any] = {key: False for key in DATA_SOURCE_KEYS}
    sources['liquidity'] = None
    return sources


@dataclass
class CategoryScore:
    """
    Sub-scores and details of one signal category.

    total_score is always derived from sub_scores, never stored.
    """
    category: str
    sub_scores: Dict[str, float]
    details: Dict[str, Any]
    # provider name -> returned usable data; not serialized
    sources: Dict[str, bool] = field(default_factory=dict, compare=False)

    @property
    def total_score(self) -> float:
        return round_score(mean(self.sub_scores.values()))

    @classmethod
    def from_defaults(cls, category: str) -> "CategoryScore":
        defaults = category_defaults(category)
        return cls(
            category=Category(category).value,
            sub_scores=dict(defaults['sub_scores']),
            details=dict(defaults['details']),
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = dict(self.sub_scores)
        result['totalScore'] = self.total_score
        result['details'] = dict(self.details)
        return result


@dataclass
class CompositeAnalysis:
    """Complete assessment of one token"""
    contract_address: str
    token_name: str
    token_symbol: str
    contract_behavior: CategoryScore
    liquidity_health: CategoryScore
    holder_distribution: CategoryScore
    community_signals: CategoryScore
    liquidity_info: LiquidityInfo
    overall_score: float
    risk_level: RiskLevel
    is_fallback: bool
    data_sources: Dict[str, Any]
    timestamp: datetime

    def categories(self) -> List[CategoryScore]:
        return [
            self.contract_behavior,
            self.liquidity_health,
            self.holder_distribution,
            self.community_signals,
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'contractAddress': self.contract_address,
            'tokenName': self.token_name,
            'tokenSymbol': self.token_symbol,
            'contractBehavior': self.contract_behavior.to_dict(),
            'liquidityHealth': self.liquidity_health.to_dict(),
            'holderDistribution': self.holder_distribution.to_dict(),
            'communitySignals': self.community_signals.to_dict(),
            'liquidityInfo': self.liquidity_info.to_dict(),
            'overallScore': self.overall_score,
            'riskLevel': self.risk_level.value,
            'isFallback': self.is_fallback,
            'dataSources': dict(self.data_sources),
            'timestamp': isoformat_utc(self.timestamp),
        }
