# tests/unit/test_category_scorers.py
"""
Unit tests for the four category scorers
"""
import copy
import pytest

from analysis.community_signals import CommunitySignalsScorer
from analysis.contract_behavior import ContractBehaviorScorer
from analysis.holder_distribution import HolderDistributionScorer, diversity_score
from analysis.liquidity_health import LiquidityHealthScorer
from analysis.models import CategoryScore
from config.scoring_defaults import CATEGORY_DEFAULTS
from tests.conftest import make_client
from tests.fixtures.mock_data import (
    RISKY_TOKEN_SECURITY, SAFE_TOKEN_SECURITY, COINGECKO_COIN, SUI_ACTIVITY,
    CETUS_ADDRESS, CREATOR_ADDRESS, holders_payload,
)
from utils.constants import Category
from utils.errors import AnalysisError


def assert_is_default(score: CategoryScore, category: Category):
    defaults = CATEGORY_DEFAULTS[category.value]
    assert score.sub_scores == dict(defaults["sub_scores"])
    assert score.details == dict(defaults["details"])


@pytest.mark.unit
class TestContractBehaviorScorer:
    """GoPlus security flags"""

    @pytest.fixture
    def scorer(self):
        return ContractBehaviorScorer(make_client())

    def test_safe_token_scores_full(self, scorer, safe_security):
        score = scorer.score(safe_security)
        assert score.total_score == 1.0
        assert score.details == {
            "isVerified": True,
            "isHoneypot": False,
            "canMint": False,
            "hasOwnerPrivileges": False,
            "hasHiddenFunctions": False,
        }

    def test_honeypot_flag(self, scorer, safe_security):
        safe_security["is_honeypot"] = "1"
        score = scorer.score(safe_security)
        assert score.sub_scores["honeypotScore"] == 0.0
        assert score.details["isHoneypot"] is True

    def test_risky_token_fails_every_rule(self, scorer):
        score = scorer.score(copy.deepcopy(RISKY_TOKEN_SECURITY))
        assert score.total_score == 0.0

    def test_missing_flags_are_risky(self, scorer, safe_security):
        for flag in ("is_honeypot", "slippage_modifiable", "cannot_buy"):
            del safe_security[flag]
        score = scorer.score(safe_security)
        assert score.sub_scores["honeypotScore"] == 0.0
        assert score.sub_scores["hiddenFunctionsScore"] == 0.0
        assert score.sub_scores["ownerPrivilegesScore"] == 0.0
        assert score.details["isHoneypot"] is True

    def test_mint_authority_needs_one_explicit_safe_flag(self, scorer, safe_security):
        del safe_security["can_take_back_ownership"]
        assert scorer.score(safe_security).sub_scores["mintAuthorityScore"] == 1.0

        del safe_security["is_mintable"]
        assert scorer.score(safe_security).sub_scores["mintAuthorityScore"] == 0.0

    def test_verified_via_either_flag(self, scorer, safe_security):
        safe_security["is_open_source"] = "0"
        safe_security["is_verified"] = "1"
        assert scorer.score(safe_security).details["isVerified"] is True

    @pytest.mark.parametrize("payload", [None, {}])
    def test_no_data_gives_defaults(self, scorer, payload):
        assert_is_default(scorer.score(payload), Category.CONTRACT_BEHAVIOR)

    @pytest.mark.asyncio
    async def test_analyze_fetches_security_data(self, safe_security):
        goplus = make_client(safe_security)
        score = await ContractBehaviorScorer(goplus).analyze(CETUS_ADDRESS)
        goplus.fetch.assert_awaited_once_with(CETUS_ADDRESS)
        assert score.total_score == 1.0


@pytest.mark.unit
class TestLiquidityHealthScorer:
    """LP lock, depth and deployer control"""

    @pytest.fixture
    def scorer(self):
        return LiquidityHealthScorer(make_client())

    def test_healthy_pool(self, scorer, safe_security):
        score = scorer.score(safe_security)
        assert score.sub_scores == {
            "poolLockedScore": 1.0,
            "liquidityDepthScore": 1.0,
            "deployerControlScore": 1.0,
            "poolAgeScore": 0.5,
        }
        assert score.total_score == 0.88
        assert score.details["liquidityUSD"] == 125000.5
        assert score.details["poolAgeDays"] is None

    def test_deployer_controlled_pool(self, scorer):
        score = scorer.score(copy.deepcopy(RISKY_TOKEN_SECURITY))
        assert score.details["isPoolLocked"] is False
        assert score.details["deployerHasControl"] is True
        # no dex entries: depth falls back to LP balances
        assert score.details["liquidityUSD"] == 950.0
        assert score.total_score == 0.13

    def test_depth_threshold_is_exclusive(self, scorer, safe_security):
        safe_security["dex"] = [{"liquidity": "10000"}]
        assert scorer.score(safe_security).sub_scores["liquidityDepthScore"] == 0.0

    def test_small_deployer_share_in_percent_units(self, scorer, safe_security):
        safe_security["lp_holders"] = [
            {"address": CREATOR_ADDRESS, "percent": "0.6", "balance": "60", "is_locked": 0, "tag": ""},
        ] + [
            {"address": f"0xlp{i}", "percent": "0.9", "balance": "90", "is_locked": 1, "tag": ""}
            for i in range(110)
        ]
        score = scorer.score(safe_security)
        assert score.details["deployerHasControl"] is False
        assert score.sub_scores["deployerControlScore"] == 1.0

    def test_missing_lp_data_gives_defaults(self, scorer, safe_security):
        del safe_security["lp_holders"]
        del safe_security["dex"]
        assert_is_default(scorer.score(safe_security), Category.LIQUIDITY_HEALTH)

    def test_defaults_keep_neutral_pool_age(self, scorer):
        score = scorer.score(None)
        assert score.sub_scores["poolAgeScore"] == 0.5
        assert score.total_score == 0.13


@pytest.mark.unit
class TestHolderDistributionScorer:
    """Concentration and diversity"""

    @pytest.fixture
    def scorer(self):
        return HolderDistributionScorer(make_client())

    def test_distributed_holders(self, scorer, safe_security):
        score = scorer.score(safe_security)
        assert score.total_score == 1.0
        assert score.details == {
            "top5HoldersPercentage": 30.0,
            "largestHolderPercentage": 8.0,
            "totalHolders": 1500,
            "deployerTxCount": 0,
        }

    def test_concentrated_holders(self, scorer):
        score = scorer.score(copy.deepcopy(RISKY_TOKEN_SECURITY))
        assert score.sub_scores["topHolderScore"] == 0.0
        assert score.sub_scores["whaleDetectionScore"] == 0.0
        assert score.sub_scores["diversityScore"] == 0.0
        assert score.details["largestHolderPercentage"] == 62.5
        assert score.details["deployerTxCount"] == 1

    def test_holder_count_falls_back_to_list_length(self, scorer, safe_security):
        del safe_security["holder_count"]
        assert scorer.score(safe_security).details["totalHolders"] == 6

    def test_overflowing_holder_count_keeps_other_scores(self, scorer, safe_security):
        safe_security["holder_count"] = "1e400"
        score = scorer.score(safe_security)
        assert score.details["totalHolders"] == 0
        assert score.sub_scores["diversityScore"] == 0.0
        assert score.sub_scores["topHolderScore"] == 1.0

    @pytest.mark.parametrize("count,expected", [
        (0, 0.0), (49, 0.0), (50, 0.2), (99, 0.2), (100, 0.4), (199, 0.4),
        (200, 0.6), (499, 0.6), (500, 0.8), (999, 0.8), (1000, 1.0),
    ])
    def test_diversity_bands(self, scorer, count, expected):
        assert diversity_score(count) == expected
        assert scorer.score(holders_payload(count)).sub_scores["diversityScore"] == expected

    def test_missing_holders_gives_defaults(self, scorer, safe_security):
        del safe_security["holders"]
        assert_is_default(scorer.score(safe_security), Category.HOLDER_DISTRIBUTION)

    @staticmethod
    def with_holders(payload, percents, tag=""):
        payload["holders"] = [
            {"address": f"0xh{i}", "percent": percent, "tag": tag}
            for i, percent in enumerate(percents)
        ]
        return payload

    def test_top5_of_exactly_50_fails(self, scorer, safe_security):
        score = scorer.score(self.with_holders(safe_security, ["10"] * 5 + ["5"]))
        assert score.details["top5HoldersPercentage"] == 50.0
        assert score.sub_scores["topHolderScore"] == 0.0

    def test_largest_holder_of_exactly_20_passes(self, scorer, safe_security):
        score = scorer.score(self.with_holders(safe_security, ["20", "10", "5", "5", "5", "3"]))
        assert score.details["largestHolderPercentage"] == 20.0
        assert score.sub_scores["whaleDetectionScore"] == 1.0
        assert score.sub_scores["topHolderScore"] == 1.0

    @pytest.mark.parametrize("deployer_holders,expected", [(4, 1.0), (5, 0.0)])
    def test_deployer_holder_limit(self, scorer, safe_security, deployer_holders, expected):
        payload = self.with_holders(safe_security, ["2"] * deployer_holders, tag="deployer")
        payload["holders"].append({"address": "0xother", "percent": "40", "tag": ""})
        score = scorer.score(payload)
        assert score.details["deployerTxCount"] == deployer_holders
        assert score.sub_scores["deployerActivityScore"] == expected

    def test_small_percent_shares_are_not_scaled(self, scorer, safe_security):
        score = scorer.score(self.with_holders(safe_security, ["0.5"] * 200))
        assert score.details["largestHolderPercentage"] == 0.5
        assert score.details["top5HoldersPercentage"] == 2.5
        assert score.sub_scores["topHolderScore"] == 1.0
        assert score.sub_scores["whaleDetectionScore"] == 1.0

    def test_fraction_shares_are_scaled(self, scorer, safe_security):
        score = scorer.score(self.with_holders(safe_security, ["0.25", "0.25", "0.2", "0.15", "0.1", "0.05"]))
        assert score.details["largestHolderPercentage"] == 25.0
        assert score.sub_scores["whaleDetectionScore"] == 0.0


@pytest.mark.unit
class TestCommunitySignalsScorer:
    """Social, engagement, chain activity and market presence"""

    @pytest.fixture
    def scorer(self):
        return CommunitySignalsScorer(make_client(), make_client())

    def test_active_listed_token(self, scorer, coingecko_coin):
        score = scorer.score(coingecko_coin, dict(SUI_ACTIVITY))
        assert score.total_score == 1.0
        assert score.details == {
            "socialFollowers": 135000,
            "engagementRate": 3.5,
            "txLast7Days": 120,
            "isListedOnCoinGecko": True,
        }

    def test_unlisted_token_with_chain_activity(self, scorer):
        score = scorer.score(None, {"txCount": 51, "windowDays": 7, "truncated": False})
        assert score.sub_scores == {
            "socialPresenceScore": 0.0,
            "engagementScore": 0.0,
            "chainActivityScore": 1.0,
            "marketMentionScore": 0.0,
        }
        assert score.sources == {"coingecko": False, "suiActivity": True}

    def test_partial_social_presence(self, scorer, coingecko_coin):
        coingecko_coin["community_data"]["twitter_followers"] = 10
        coingecko_coin["community_data"]["telegram_channel_user_count"] = 0
        coingecko_coin["market_data"]["total_volume"]["usd"] = 500
        score = scorer.score(coingecko_coin, None)
        assert score.sub_scores["socialPresenceScore"] == 0.5
        assert score.sub_scores["marketMentionScore"] == 0.5
        assert score.sub_scores["chainActivityScore"] == 0.0

    def test_nothing_available_gives_defaults(self, scorer):
        assert_is_default(scorer.score(None, None), Category.COMMUNITY_SIGNALS)

    @pytest.mark.asyncio
    async def test_analyze_queries_both_providers(self):
        coingecko = make_client(COINGECKO_COIN)
        activity = make_client(SUI_ACTIVITY)
        score = await CommunitySignalsScorer(coingecko, activity).analyze(CETUS_ADDRESS)
        coingecko.fetch.assert_awaited_once_with(CETUS_ADDRESS)
        activity.fetch.assert_awaited_once_with(CETUS_ADDRESS)
        assert score.total_score == 1.0


@pytest.mark.unit
class TestScorerEvaluate:
    """evaluate() wraps rule failures"""

    def test_evaluate_returns_score(self):
        scorer = ContractBehaviorScorer(make_client(None))
        assert scorer.evaluate(copy.deepcopy(SAFE_TOKEN_SECURITY)).total_score == 1.0

    def test_evaluate_wraps_unexpected_errors(self):
        scorer = HolderDistributionScorer(make_client(None))
        scorer.score = lambda *payloads: 1 / 0
        with pytest.raises(AnalysisError) as exc_info:
            scorer.evaluate({})
        assert "holderDistribution" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, ZeroDivisionError)
