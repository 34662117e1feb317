"""
Fallback values for every category score and the liquidity info block.

This table is the single definition of what a category looks like when its
providers returned nothing usable. Scorers, the orchestrator's catastrophic
fallback and the tests all read from here. Values are read-only.
"""

from types import MappingProxyType
from typing import Any, Mapping

from utils.constants import Category, UNAVAILABLE


def _freeze(table: dict) -> Mapping[str, Any]:
    return MappingProxyType({
        key: _freeze(value) if isinstance(value, dict) else value
        for key, value in table.items()
    })


CATEGORY_DEFAULTS: Mapping[str, Mapping[str, Any]] = _freeze({
    Category.CONTRACT_BEHAVIOR.value: {
        "sub_scores": {
            "contractVerificationScore": 0.0,
            "honeypotScore": 0.0,
            "mintAuthorityScore": 0.0,
            "ownerPrivilegesScore": 0.0,
            "hiddenFunctionsScore": 0.0,
        },
        "details": {
            "isVerified": False,
            "isHoneypot": True,
            "canMint": True,
            "hasOwnerPrivileges": True,
            "hasHiddenFunctions": True,
        },
    },
    Category.LIQUIDITY_HEALTH.value: {
        "sub_scores": {
            "poolLockedScore": 0.0,
            "liquidityDepthScore": 0.0,
            "deployerControlScore": 0.0,
            # pool age is never reported by the security provider
            "poolAgeScore": 0.5,
        },
        "details": {
            "isPoolLocked": False,
            "liquidityUSD": 0.0,
            "deployerHasControl": True,
            "poolAgeDays": None,
        },
    },
    Category.HOLDER_DISTRIBUTION.value: {
        "sub_scores": {
            "topHolderScore": 0.0,
            "whaleDetectionScore": 0.0,
            "deployerActivityScore": 0.0,
            "diversityScore": 0.0,
        },
        "details": {
            "top5HoldersPercentage": 100.0,
            "largestHolderPercentage": 100.0,
            "totalHolders": 0,
            "deployerTxCount": 0,
        },
    },
    Category.COMMUNITY_SIGNALS.value: {
        "sub_scores": {
            "socialPresenceScore": 0.0,
            "engagementScore": 0.0,
            "chainActivityScore": 0.0,
            "marketMentionScore": 0.0,
        },
        "details": {
            "socialFollowers": 0,
            "engagementRate": 0.0,
            "txLast7Days": 0,
            "isListedOnCoinGecko": False,
        },
    },
})

LIQUIDITY_INFO_DEFAULTS: Mapping[str, Any] = _freeze({
    "price": UNAVAILABLE,
    "volume24h": UNAVAILABLE,
    "liquidity": UNAVAILABLE,
    "priceChange24h": UNAVAILABLE,
    "marketCap": UNAVAILABLE,
    "source": None,
})


def category_defaults(category: str) -> Mapping[str, Any]:
    """Defaults for one category, by Category value"""
    return CATEGORY_DEFAULTS[Category(category).value]
