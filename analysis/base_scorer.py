"""
Category scorer base class
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from analysis.models import CategoryScore
from utils.constants import Category, DEPLOYER_TAGS, SCORE_PASS, SCORE_FAIL
from utils.errors import AnalysisError
from utils.helpers import safe_float

logger = logging.getLogger(__name__)

# rounding slack when fractional shares add up to exactly 1
FRACTION_SUM_TOLERANCE = 1e-6


class CategoryScorer(ABC):
    """
    One signal category.

    analyze() fetches its own provider payloads; score() is the pure rule set
    and falls back to the category defaults when the payload is unusable.
    """

    category: Category

    @abstractmethod
    async def analyze(self, address: str) -> CategoryScore:
        """Fetch provider data and score it"""

    @abstractmethod
    def score(self, *payloads: Optional[Dict[str, Any]]) -> CategoryScore:
        """Score raw provider payloads"""

    def evaluate(self, *payloads: Optional[Dict[str, Any]]) -> CategoryScore:
        """
        score() with unexpected failures surfaced as AnalysisError

        Raises:
            AnalysisError: the rule set failed on this payload
        """
        try:
            return self.score(*payloads)
        except AnalysisError:
            raise
        except Exception as e:
            raise AnalysisError(f"{self.category.value} scoring failed: {e}") from e

    def default_score(self) -> CategoryScore:
        return CategoryScore.from_defaults(self.category.value)

    @staticmethod
    def binary(passed: bool) -> float:
        return SCORE_PASS if passed else SCORE_FAIL


def normalize_percentages(values: Iterable[Any]) -> List[float]:
    """
    GoPlus reports holder shares either as fractions ("0.12") or percents
    ("12"). Shares of one supply cannot sum past 100%, so a list summing to
    at most 1 is read as fractions.
    """
    numbers = [safe_float(value) for value in values]
    if numbers and sum(numbers) <= 1.0 + FRACTION_SUM_TOLERANCE:
        return [value * 100 for value in numbers]
    return numbers


def is_deployer_entry(entry: Dict[str, Any], deployer_addresses: Iterable[str]) -> bool:
    """Holder entry tagged as, or addressed as, the deployer / creator"""
    tag = str(entry.get('tag') or '').lower()
    if any(label in tag for label in DEPLOYER_TAGS):
        return True
    address = str(entry.get('address') or '').lower()
    return bool(address) and address in deployer_addresses


def deployer_addresses(payload: Dict[str, Any]) -> set:
    """Creator and owner addresses reported by the security provider"""
    return {
        str(payload[key]).lower()
        for key in ('creator_address', 'owner_address')
        if payload.get(key)
    }
