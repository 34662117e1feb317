"""
System-wide Constants for ChainCheck
Provider endpoints, scoring thresholds, risk tiers and token catalog mappings
"""

from enum import Enum
from typing import Dict, List

# ============= Version Info =============
VERSION = "1.0.0"
PROJECT_NAME = "ChainCheck"
USER_AGENT = f"{PROJECT_NAME}/1.0"

# ============= Input =============
MIN_ADDRESS_LENGTH = 5

# ============= Categories & Risk =============

class Category(str, Enum):
    """Signal categories, in composite weighting order"""
    CONTRACT_BEHAVIOR = "contractBehavior"
    LIQUIDITY_HEALTH = "liquidityHealth"
    HOLDER_DISTRIBUTION = "holderDistribution"
    COMMUNITY_SIGNALS = "communitySignals"


class RiskLevel(str, Enum):
    """Risk tiers, least to most severe"""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    VERY_HIGH = "VERY_HIGH"

    @property
    def severity(self) -> int:
        return RISK_SEVERITY[self]


RISK_SEVERITY: Dict[RiskLevel, int] = {
    RiskLevel.LOW: 0,
    RiskLevel.MEDIUM: 1,
    RiskLevel.HIGH: 2,
    RiskLevel.VERY_HIGH: 3,
}

# Scores live on a 0-1 scale everywhere
SCORE_PASS = 1.0
SCORE_FAIL = 0.0
SCORE_NEUTRAL = 0.5

DEFAULT_CATEGORY_WEIGHTS: Dict[str, float] = {
    Category.CONTRACT_BEHAVIOR.value: 0.30,
    Category.LIQUIDITY_HEALTH.value: 0.25,
    Category.HOLDER_DISTRIBUTION.value: 0.25,
    Category.COMMUNITY_SIGNALS.value: 0.20,
}

# Lower bound of each tier; anything below the last bound is VERY_HIGH
DEFAULT_RISK_BANDS: Dict[str, float] = {
    RiskLevel.LOW.value: 0.8,
    RiskLevel.MEDIUM.value: 0.6,
    RiskLevel.HIGH.value: 0.4,
}

# ============= Scoring Thresholds =============

LIQUIDITY_THRESHOLDS = {
    "min_depth_usd": 10_000,
    "max_deployer_lp_pct": 50,
}

HOLDER_THRESHOLDS = {
    "max_top5_pct": 50,
    "max_single_holder_pct": 20,
    "max_deployer_holders": 5,
}

# (minimum holder count, diversity score), highest band first
HOLDER_DIVERSITY_BANDS: List[tuple] = [
    (1000, 1.0),
    (500, 0.8),
    (200, 0.6),
    (100, 0.4),
    (50, 0.2),
]

COMMUNITY_THRESHOLDS = {
    "min_followers": 1000,
    "min_engagement_rate": 2.0,   # percent
    "min_tx_count": 50,
    "activity_window_days": 7,
    "min_market_volume_usd": 10_000,
}

DEPLOYER_TAGS = {"deployer", "creator", "owner"}

# ============= Provider Endpoints =============

GOPLUS_API_URL = "https://api.gopluslabs.io/api/v1"
COINGECKO_API_URL = "https://api.coingecko.com/api/v3"
COINGECKO_PRO_API_URL = "https://pro-api.coingecko.com/api/v3"
SUI_MAINNET_RPC_URL = "https://fullnode.mainnet.sui.io"
CETUS_API_URL = "https://api-sui.cetus.zone/v1"
TURBOS_API_URL = "https://api.turbos.finance/v1"
BLUEMOVE_API_URL = "https://api.bluemove.net/api/v1"
DEXSCREENER_API_URL = "https://api.dexscreener.com"

# GoPlus response codes
GOPLUS_CODE_OK = 1
GOPLUS_CODE_CHAIN_UNSUPPORTED = 4012

# Per-call timeouts in seconds
PROVIDER_TIMEOUTS = {
    "goplus": 15,
    "coingecko": 15,
    "sui_rpc": 15,
    "dex": 8,
    "coingecko_price": 10,
}

DEFAULT_LIQUIDITY_CHAIN = ["cetus", "turbos", "bluemove", "dexscreener", "coingecko"]

# ============= Token Catalog =============

# Sui coin type -> CoinGecko coin id, keys lower-cased
SUI_COINGECKO_IDS: Dict[str, str] = {
    "0x2::sui::sui": "sui",
    "0x06864a6f921804860930db6ddbe2e16acdf8504495ea7481637a1c8b9a8fe54b::cetus::cetus": "cetus-protocol",
    "0x5d4b302506645c37ff133b98c4b50a5ae14841659738d6d733d59d0d217a93bf::coin::coin": "wormhole-token",
    "0xf325ce1300e8dac124071d3152c5c5ee6174914f8bc2161e88329cf579246efc::afsui::afsui": "afsui",
    "0xdba34672e30cb065b1f93e3ab55318768fd6fef66c15942c9f7cb846e2f900e7::usdc::usdc": "usd-coin",
    "0x960b531667636f39e85867775f52f6b1f220a058c4de786905bdf761e06a56bb::usdt::usdt": "tether",
    "0xd0e89b2af5e4910726fbcd8b8dd37bb79b29e5f83f7492ab06dab5d8b1d4a2a8::hasui::hasui": "hasui",
    "0x549e8b69270defbfafd4f94e17ec44cdbdd99820b33bda2278dea3b9a32d3f55::cert::cert": "scallop-sui",
}

UNKNOWN_TOKEN_NAME = "Unknown Token"
UNKNOWN_TOKEN_SYMBOL = "UNK"
UNAVAILABLE = "N/A"
