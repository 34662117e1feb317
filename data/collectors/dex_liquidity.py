"""
DEX Liquidity Sources and Fallback Chain
Price, volume and pool liquidity from an ordered list of DEX / market APIs;
the first source with a usable answer wins
"""

import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import aiohttp

from config.scoring_defaults import LIQUIDITY_INFO_DEFAULTS
from data.collectors.base_provider import BaseProviderClient
from utils.constants import (
    CETUS_API_URL, TURBOS_API_URL, BLUEMOVE_API_URL, DEXSCREENER_API_URL,
    COINGECKO_API_URL, COINGECKO_PRO_API_URL, PROVIDER_TIMEOUTS,
    DEFAULT_LIQUIDITY_CHAIN,
)
from utils.errors import ProviderDataAbsent, MalformedPayload

logger = logging.getLogger(__name__)

Number = Union[float, str]

LIQUIDITY_FIELDS = ('price', 'volume24h', 'liquidity', 'priceChange24h', 'marketCap')


@dataclass
class LiquidityInfo:
    """
    Market block of an analysis.

    Fields the winning source did not report hold UNAVAILABLE ("N/A") rather
    than 0, so missing data never reads as zero liquidity. Blank values come
    from LIQUIDITY_INFO_DEFAULTS.
    """
    price: Number
    volume24h: Number
    liquidity: Number
    priceChange24h: Number
    marketCap: Number
    source: Optional[str]

    @property
    def available(self) -> bool:
        return self.source is not None

    @classmethod
    def unavailable(cls) -> "LiquidityInfo":
        return cls(**LIQUIDITY_INFO_DEFAULTS)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any], source: str) -> "LiquidityInfo":
        values = {
            name: LIQUIDITY_INFO_DEFAULTS[name] if payload.get(name) is None else payload[name]
            for name in LIQUIDITY_FIELDS
        }
        return cls(source=source, **values)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _number(value: Any) -> Optional[float]:
    """Numeric provider field, or None when missing or not a number"""
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def is_usable_payload(payload: Any) -> bool:
    """Minimal schema check: a dict carrying a numeric price"""
    return isinstance(payload, dict) and _number(payload.get('price')) is not None


class LiquiditySource(BaseProviderClient):
    """
    One strategy in the fallback chain.

    _fetch() returns a normalized payload keyed by LIQUIDITY_FIELDS; a field
    the source does not report is omitted.
    """

    name = "liquidity"

    def __init__(
        self,
        timeout: float = PROVIDER_TIMEOUTS["dex"],
        session: Optional[aiohttp.ClientSession] = None,
    ):
        super().__init__(timeout=timeout, session=session)

    @staticmethod
    def _normalize(raw: Dict[str, Any], mapping: Dict[str, str]) -> Dict[str, float]:
        payload = {}
        for target, source_key in mapping.items():
            value = _number(raw.get(source_key))
            if value is not None:
                payload[target] = value
        return payload

    @staticmethod
    def _unwrap(data: Any) -> Dict[str, Any]:
        """Some DEX APIs wrap the body in {"code": ..., "data": {...}}"""
        if isinstance(data, dict) and isinstance(data.get('data'), dict):
            return data['data']
        if not isinstance(data, dict):
            raise MalformedPayload("liquidity", "response is not an object")
        return data


class CetusSource(LiquiditySource):
    """Cetus DEX market endpoint"""

    name = "cetus"
    FIELDS = {
        'price': 'price',
        'volume24h': 'volume24h',
        'liquidity': 'liquidity',
        'priceChange24h': 'priceChange24h',
        'marketCap': 'marketCap',
    }

    def __init__(self, base_url: str = CETUS_API_URL, **kwargs):
        super().__init__(**kwargs)
        self.base_url = base_url.rstrip('/')

    async def _fetch(self, address: str) -> Optional[Dict[str, Any]]:
        data = await self._get_json(f"{self.base_url}/market/token/{address}")
        return self._normalize(self._unwrap(data), self.FIELDS)


class TurbosSource(LiquiditySource):
    """Turbos Finance pool endpoint"""

    name = "turbos"
    FIELDS = {
        'price': 'token_price',
        'volume24h': 'volume_24h',
        'liquidity': 'tvl',
        'priceChange24h': 'price_change_24h',
    }

    def __init__(self, base_url: str = TURBOS_API_URL, **kwargs):
        super().__init__(**kwargs)
        self.base_url = base_url.rstrip('/')

    async def _fetch(self, address: str) -> Optional[Dict[str, Any]]:
        data = await self._get_json(f"{self.base_url}/pools/{address}")
        return self._normalize(self._unwrap(data), self.FIELDS)


class BlueMoveSource(LiquiditySource):
    """BlueMove token endpoint"""

    name = "bluemove"
    FIELDS = {
        'price': 'price',
        'volume24h': 'volume24h',
        'liquidity': 'liquidity',
        'priceChange24h': 'priceChange24h',
    }

    def __init__(self, base_url: str = BLUEMOVE_API_URL, **kwargs):
        super().__init__(**kwargs)
        self.base_url = base_url.rstrip('/')

    async def _fetch(self, address: str) -> Optional[Dict[str, Any]]:
        data = await self._get_json(f"{self.base_url}/token/{address}")
        return self._normalize(self._unwrap(data), self.FIELDS)


class DexScreenerSource(LiquiditySource):
    """DexScreener token pairs; the deepest pair is used"""

    name = "dexscreener"

    def __init__(self, base_url: str = DEXSCREENER_API_URL, **kwargs):
        super().__init__(**kwargs)
        self.base_url = base_url.rstrip('/')

    async def _fetch(self, address: str) -> Optional[Dict[str, Any]]:
        data = await self._get_json(f"{self.base_url}/latest/dex/tokens/{address}")
        if not isinstance(data, dict):
            raise MalformedPayload(self.name, "response is not an object")

        pairs = [pair for pair in (data.get('pairs') or []) if isinstance(pair, dict)]
        if not pairs:
            raise ProviderDataAbsent(self.name, "no pairs")

        pair = max(pairs, key=lambda p: _number((p.get('liquidity') or {}).get('usd')) or 0.0)
        flat = {
            'price': pair.get('priceUsd'),
            'volume24h': (pair.get('volume') or {}).get('h24'),
            'liquidity': (pair.get('liquidity') or {}).get('usd'),
            'priceChange24h': (pair.get('priceChange') or {}).get('h24'),
            'marketCap': pair.get('marketCap', pair.get('fdv')),
        }
        return self._normalize(flat, {name: name for name in LIQUIDITY_FIELDS})


class CoinGeckoPriceSource(LiquiditySource):
    """CoinGecko simple token price; reports no pool liquidity"""

    name = "coingecko"
    FIELDS = {
        'price': 'usd',
        'volume24h': 'usd_24h_vol',
        'priceChange24h': 'usd_24h_change',
        'marketCap': 'usd_market_cap',
    }

    def __init__(self, platform: str = "sui", api_key: str = "", pro: bool = False,
                 timeout: float = PROVIDER_TIMEOUTS["coingecko_price"], **kwargs):
        super().__init__(timeout=timeout, **kwargs)
        self.platform = platform
        self.api_key = api_key
        self.pro = pro
        self.base_url = COINGECKO_PRO_API_URL if pro else COINGECKO_API_URL

    async def _fetch(self, address: str) -> Optional[Dict[str, Any]]:
        headers = {}
        if self.api_key:
            headers['x-cg-pro-api-key' if self.pro else 'x-cg-demo-api-key'] = self.api_key

        data = await self._get_json(
            f"{self.base_url}/simple/token_price/{self.platform}",
            params={
                'contract_addresses': address,
                'vs_currencies': 'usd',
                'include_24hr_vol': 'true',
                'include_24hr_change': 'true',
                'include_market_cap': 'true',
            },
            headers=headers,
        )
        if not isinstance(data, dict):
            raise MalformedPayload(self.name, "response is not an object")

        token_data = data.get(address) or data.get(address.lower())
        if not token_data:
            raise ProviderDataAbsent(self.name, "token not priced")
        return self._normalize(token_data, self.FIELDS)


SOURCE_REGISTRY = {
    'cetus': CetusSource,
    'turbos': TurbosSource,
    'bluemove': BlueMoveSource,
    'dexscreener': DexScreenerSource,
    'coingecko': CoinGeckoPriceSource,
}


class LiquidityFallbackChain:
    """
    Ordered liquidity strategies.

    Sources are tried in priority order; the first usable payload wins and
    the remaining sources are not called.
    """

    def __init__(self, sources: Sequence[Any]):
        self.sources: List[Any] = list(sources)

    @property
    def total_timeout(self) -> float:
        """Worst-case time for a full pass: every source timing out in turn"""
        return sum(source.timeout.total for source in self.sources)

    async def initialize(self):
        for source in self.sources:
            if hasattr(source, 'initialize'):
                await source.initialize()

    async def close(self):
        for source in self.sources:
            if hasattr(source, 'close'):
                await source.close()

    async def fetch_raw(self, address: str) -> Tuple[Optional[str], Optional[Dict[str, Any]]]:
        """
        Returns:
            (winning source name, its payload) or (None, None)
        """
        for source in self.sources:
            payload = await source.fetch(address)
            if is_usable_payload(payload):
                logger.info(f"✅ Liquidity data for {address[:16]}... from {source.name}")
                return source.name, payload
            logger.debug(f"⚠️ {source.name} had no usable liquidity data, trying next...")

        logger.warning(f"⚠️ All liquidity sources failed for: {address[:16]}...")
        return None, None

    async def fetch(self, address: str) -> LiquidityInfo:
        """Liquidity info from the first usable source, or the unavailable sentinel"""
        source_name, payload = await self.fetch_raw(address)
        if payload is None:
            return LiquidityInfo.unavailable()
        return LiquidityInfo.from_payload(payload, source_name)


def build_liquidity_chain(
    order: Sequence[str] = DEFAULT_LIQUIDITY_CHAIN,
    dex_timeout: float = PROVIDER_TIMEOUTS["dex"],
    coingecko_timeout: float = PROVIDER_TIMEOUTS["coingecko_price"],
    coingecko_platform: str = "sui",
    coingecko_api_key: str = "",
    coingecko_pro: bool = False,
) -> LiquidityFallbackChain:
    """Build the chain in the configured priority order"""
    sources = []
    for name in order:
        source_cls = SOURCE_REGISTRY[name]
        if source_cls is CoinGeckoPriceSource:
            sources.append(CoinGeckoPriceSource(
                platform=coingecko_platform,
                api_key=coingecko_api_key,
                pro=coingecko_pro,
                timeout=coingecko_timeout,
            ))
        else:
            sources.append(source_cls(timeout=dex_timeout))
    return LiquidityFallbackChain(sources)
