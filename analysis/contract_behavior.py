"""
Contract Behavior Scorer
Verification, honeypot, mint authority, owner privilege and hidden-function
checks from GoPlus security flags
"""

import logging
from typing import Any, Dict, Optional

from analysis.base_scorer import CategoryScorer
from analysis.models import CategoryScore
from data.collectors.goplus import GoPlusClient
from utils.constants import Category
from utils.helpers import parse_flag

logger = logging.getLogger(__name__)

SECURITY_FLAGS = (
    'is_open_source',
    'is_verified',
    'is_honeypot',
    'is_mintable',
    'can_take_back_ownership',
    'cannot_buy',
    'cannot_sell_all',
    'slippage_modifiable',
    'hidden_owner',
)


class ContractBehaviorScorer(CategoryScorer):
    """
    Every rule passes only on an explicit safe flag; a flag GoPlus did not
    report scores as risky.
    """

    category = Category.CONTRACT_BEHAVIOR

    def __init__(self, goplus: GoPlusClient):
        self.goplus = goplus

    async def analyze(self, address: str) -> CategoryScore:
        payload = await self.goplus.fetch(address)
        return self.score(payload)

    def score(self, payload: Optional[Dict[str, Any]] = None) -> CategoryScore:
        if not payload:
            return self.default_score()

        flags = {name: parse_flag(payload.get(name)) for name in SECURITY_FLAGS}

        is_verified = flags['is_open_source'] is True or flags['is_verified'] is True
        not_honeypot = flags['is_honeypot'] is False

        mint = flags['is_mintable']
        take_back = flags['can_take_back_ownership']
        mint_safe = (
            mint is not True and take_back is not True and
            (mint is False or take_back is False)
        )

        owner_safe = flags['cannot_buy'] is False and flags['cannot_sell_all'] is False
        hidden_safe = flags['slippage_modifiable'] is False and flags['hidden_owner'] is not True

        if not not_honeypot:
            logger.warning(
                f"🚨 Honeypot flag {'set' if flags['is_honeypot'] else 'unknown'} "
                f"for {payload.get('token_symbol') or 'token'}"
            )

        return CategoryScore(
            category=self.category.value,
            sub_scores={
                'contractVerificationScore': self.binary(is_verified),
                'honeypotScore': self.binary(not_honeypot),
                'mintAuthorityScore': self.binary(mint_safe),
                'ownerPrivilegesScore': self.binary(owner_safe),
                'hiddenFunctionsScore': self.binary(hidden_safe),
            },
            details={
                'isVerified': is_verified,
                'isHoneypot': not not_honeypot,
                'canMint': not mint_safe,
                'hasOwnerPrivileges': not owner_safe,
                'hasHiddenFunctions': not hidden_safe,
            },
            sources={'goplus': True},
        )
