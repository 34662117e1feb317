"""
Token Analyzer
Fans out to every provider concurrently, scores the four categories and
assembles the composite analysis. A failing provider or scorer degrades to
that category's defaults; analyze() itself never raises on provider trouble.
"""

import asyncio
import logging
import time
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from analysis.base_scorer import CategoryScorer
from analysis.community_signals import CommunitySignalsScorer
from analysis.composite_scorer import compute_composite, build_fallback_analysis
from analysis.contract_behavior import ContractBehaviorScorer
from analysis.holder_distribution import HolderDistributionScorer
from analysis.liquidity_health import LiquidityHealthScorer
from analysis.models import CategoryScore, CompositeAnalysis, empty_data_sources
from config.config_manager import AppConfig
from config.settings import Settings
from data.collectors.coingecko import CoinGeckoClient
from data.collectors.dex_liquidity import (
    LiquidityFallbackChain, LiquidityInfo, build_liquidity_chain
)
from data.collectors.goplus import GoPlusClient
from data.collectors.sui_rpc import SuiRpcClient, SuiActivityClient
from monitoring.logger import AnalysisLogger
from utils.constants import Category, UNKNOWN_TOKEN_NAME, UNKNOWN_TOKEN_SYMBOL
from utils.errors import AnalysisError
from utils.helpers import measure_time, normalize_address, utc_now

logger = logging.getLogger(__name__)


def resolve_token_identity(
    coin_payload: Optional[Dict[str, Any]],
    metadata: Optional[Dict[str, Any]],
) -> Tuple[str, str]:
    """
    Token name and symbol: CoinGecko first, then Sui coin metadata.

    Returns:
        (name, upper-cased symbol)
    """
    name = None
    symbol = None
    for source in (coin_payload, metadata):
        if not source:
            continue
        name = name or source.get('name')
        symbol = symbol or source.get('symbol')

    return (
        str(name) if name else UNKNOWN_TOKEN_NAME,
        str(symbol).upper() if symbol else UNKNOWN_TOKEN_SYMBOL,
    )


class TokenAnalyzer:
    """
    Aggregation orchestrator.

    Owns the provider clients: use as an async context manager, or call
    initialize() / close() explicitly.
    """

    def __init__(
        self,
        goplus: GoPlusClient,
        coingecko: CoinGeckoClient,
        sui_rpc: SuiRpcClient,
        activity: SuiActivityClient,
        liquidity_chain: LiquidityFallbackChain,
        weights: Optional[Dict[str, float]] = None,
        risk_bands: Optional[Dict[str, float]] = None,
        analysis_timeout: float = 30.0,
        liquidity_timeout: Optional[float] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.goplus = goplus
        self.coingecko = coingecko
        self.sui_rpc = sui_rpc
        self.activity = activity
        self.liquidity_chain = liquidity_chain

        self.weights = weights
        self.risk_bands = risk_bands
        self.analysis_timeout = analysis_timeout
        # the chain runs its sources one after another
        self.liquidity_timeout = liquidity_timeout or analysis_timeout
        self.clock = clock

        self.contract_scorer = ContractBehaviorScorer(goplus)
        self.liquidity_scorer = LiquidityHealthScorer(goplus)
        self.holder_scorer = HolderDistributionScorer(goplus)
        self.community_scorer = CommunitySignalsScorer(coingecko, activity)

        self.analysis_logger = AnalysisLogger()

    @classmethod
    def from_config(cls, config: AppConfig, **kwargs) -> "TokenAnalyzer":
        """Build the analyzer and its clients from loaded configuration"""
        providers = config.providers
        goplus_key = providers.goplus_api_key.get_secret_value()
        coingecko_key = providers.coingecko_api_key.get_secret_value()
        logger.info(
            f"🔑 GoPlus API key: {Settings.masked(goplus_key)}, "
            f"CoinGecko API key: {Settings.masked(coingecko_key)}"
        )
        liquidity_chain = build_liquidity_chain(
            order=providers.liquidity_chain,
            dex_timeout=providers.dex_timeout,
            coingecko_timeout=providers.coingecko_price_timeout,
            coingecko_platform=providers.coingecko_platform,
            coingecko_api_key=coingecko_key,
            coingecko_pro=providers.coingecko_pro,
        )

        return cls(
            goplus=GoPlusClient(
                chain=providers.chain,
                api_key=goplus_key,
                timeout=providers.goplus_timeout,
            ),
            coingecko=CoinGeckoClient(
                platform=providers.coingecko_platform,
                api_key=coingecko_key,
                pro=providers.coingecko_pro,
                timeout=providers.coingecko_timeout,
            ),
            sui_rpc=SuiRpcClient(
                rpc_url=providers.sui_rpc_url,
                timeout=providers.sui_rpc_timeout,
            ),
            activity=SuiActivityClient(
                rpc_url=providers.sui_rpc_url,
                timeout=providers.sui_rpc_timeout,
                max_pages=providers.activity_max_pages,
            ),
            liquidity_chain=liquidity_chain,
            weights=dict(config.scoring.weights),
            risk_bands=dict(config.scoring.risk_bands),
            analysis_timeout=config.analysis.analysis_timeout,
            liquidity_timeout=max(config.analysis.analysis_timeout, liquidity_chain.total_timeout),
            **kwargs,
        )

    async def initialize(self):
        """Open every provider session"""
        for client in (self.goplus, self.coingecko, self.sui_rpc, self.activity):
            await client.initialize()
        await self.liquidity_chain.initialize()
        logger.info("✅ Token analyzer initialized")

    async def close(self):
        """Close every provider session"""
        for client in (self.goplus, self.coingecko, self.sui_rpc, self.activity):
            await client.close()
        await self.liquidity_chain.close()

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    # ============= Full analysis =============

    async def analyze(self, address: str) -> CompositeAnalysis:
        """
        Complete analysis of one token.

        Raises:
            ValidationError: address shorter than the minimum length
        """
        address = normalize_address(address)
        logger.info(f"🔍 Analyzing token: {address[:16]}...")
        started = time.perf_counter()

        try:
            analysis = await self._analyze(address)
        except Exception as e:
            logger.error(f"❌ Analysis assembly failed for {address[:16]}...: {e}", exc_info=True)
            analysis = build_fallback_analysis(
                address, weights=self.weights, risk_bands=self.risk_bands, clock=self.clock
            )

        self.analysis_logger.log_analysis(analysis, time.perf_counter() - started)
        return analysis

    @measure_time
    async def _analyze(self, address: str) -> CompositeAnalysis:
        results = await asyncio.gather(
            self._bounded('goplus', self.goplus.fetch(address)),
            self._bounded('coingecko', self.coingecko.fetch(address)),
            self._bounded('suiMetadata', self.sui_rpc.fetch(address)),
            self._bounded('suiActivity', self.activity.fetch(address)),
            self._bounded('liquidity', self.liquidity_chain.fetch(address), self.liquidity_timeout),
            return_exceptions=True,
        )
        goplus, coin, metadata, activity, liquidity = [
            None if isinstance(result, BaseException) else result for result in results
        ]
        if not isinstance(liquidity, LiquidityInfo):
            liquidity = LiquidityInfo.unavailable()

        contract_behavior = self._score(self.contract_scorer, goplus)
        liquidity_health = self._score(self.liquidity_scorer, goplus)
        holder_distribution = self._score(self.holder_scorer, goplus)
        community_signals = self._score(self.community_scorer, coin, activity)

        overall, risk_level = compute_composite(
            contract_behavior, liquidity_health, holder_distribution, community_signals,
            weights=self.weights, risk_bands=self.risk_bands,
        )

        data_sources = empty_data_sources()
        data_sources.update({
            'goplus': goplus is not None,
            'coingecko': coin is not None,
            'suiMetadata': metadata is not None,
            'suiActivity': activity is not None,
            'liquidity': liquidity.source,
        })
        is_fallback = not any(data_sources.values())

        name, symbol = resolve_token_identity(coin, metadata)

        return CompositeAnalysis(
            contract_address=address,
            token_name=name,
            token_symbol=symbol,
            contract_behavior=contract_behavior,
            liquidity_health=liquidity_health,
            holder_distribution=holder_distribution,
            community_signals=community_signals,
            liquidity_info=liquidity,
            overall_score=overall,
            risk_level=risk_level,
            is_fallback=is_fallback,
            data_sources=data_sources,
            timestamp=self.clock(),
        )

    async def _bounded(
        self, name: str, awaitable: Awaitable[Any], timeout: Optional[float] = None
    ) -> Any:
        """Await one provider call within its time budget"""
        timeout = timeout or self.analysis_timeout
        try:
            return await asyncio.wait_for(awaitable, timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(f"⏱️ {name} exceeded {timeout}s analysis budget")
            raise

    def _score(self, scorer: CategoryScorer, *payloads: Any) -> CategoryScore:
        try:
            return scorer.evaluate(*payloads)
        except AnalysisError as e:
            logger.error(f"❌ {e}, using defaults")
            return scorer.default_score()

    # ============= Single category =============

    def get_scorer(self, category: str) -> CategoryScorer:
        scorers = {
            Category.CONTRACT_BEHAVIOR: self.contract_scorer,
            Category.LIQUIDITY_HEALTH: self.liquidity_scorer,
            Category.HOLDER_DISTRIBUTION: self.holder_scorer,
            Category.COMMUNITY_SIGNALS: self.community_scorer,
        }
        return scorers[Category(category)]

    async def analyze_category(self, category: str, address: str) -> CategoryScore:
        """
        Score one category on its own.

        Raises:
            ValidationError: address shorter than the minimum length
        """
        address = normalize_address(address)
        scorer = self.get_scorer(category)
        try:
            return await asyncio.wait_for(scorer.analyze(address), timeout=self.analysis_timeout)
        except Exception as e:
            logger.error(f"❌ {scorer.category.value} analysis failed, using defaults: {e}")
            return scorer.default_score()

    async def analyze_liquidity(self, address: str) -> LiquidityInfo:
        """Market block from the liquidity fallback chain"""
        address = normalize_address(address)
        try:
            return await asyncio.wait_for(
                self.liquidity_chain.fetch(address), timeout=self.liquidity_timeout
            )
        except Exception as e:
            logger.error(f"❌ Liquidity lookup failed: {e}")
            return LiquidityInfo.unavailable()
