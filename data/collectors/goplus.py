"""
GoPlus Security API client
Token security flags, LP holders and top holders keyed by contract address
"""

import logging
from typing import Any, Dict, Optional

import aiohttp

from data.collectors.base_provider import BaseProviderClient
from utils.constants import (
    GOPLUS_API_URL, GOPLUS_CODE_OK, GOPLUS_CODE_CHAIN_UNSUPPORTED, PROVIDER_TIMEOUTS
)
from utils.errors import ProviderDataAbsent, MalformedPayload

logger = logging.getLogger(__name__)


class GoPlusClient(BaseProviderClient):
    """Security-analysis provider"""

    name = "GoPlus"

    def __init__(
        self,
        chain: str = "sui",
        api_key: str = "",
        timeout: float = PROVIDER_TIMEOUTS["goplus"],
        base_url: str = GOPLUS_API_URL,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        super().__init__(timeout=timeout, session=session)
        self.chain = chain
        self.api_key = api_key
        self.base_url = base_url.rstrip('/')

    async def _fetch(self, address: str) -> Optional[Dict[str, Any]]:
        url = f"{self.base_url}/token_security/{self.chain}"
        headers = {'Authorization': f"Bearer {self.api_key}"} if self.api_key else {}

        logger.debug(f"🔒 Calling GoPlus Security API for {address[:16]}...")
        data = await self._get_json(
            url, params={'contract_addresses': address}, headers=headers
        )
        return self.extract_token_data(data, address)

    @staticmethod
    def extract_token_data(data: Any, address: str) -> Dict[str, Any]:
        """
        Pull this address's entry out of a GoPlus response.

        GoPlus lower-cases EVM addresses in its result keys but keeps Sui
        coin types as given, so both spellings are tried.
        """
        if not isinstance(data, dict):
            raise MalformedPayload("GoPlus", f"expected object, got {type(data).__name__}")

        code = data.get('code')
        if code == GOPLUS_CODE_CHAIN_UNSUPPORTED:
            raise ProviderDataAbsent("GoPlus", "chain not supported (4012)")
        if code != GOPLUS_CODE_OK:
            raise ProviderDataAbsent("GoPlus", f"code {code}: {data.get('message', '')}")

        result = data.get('result')
        if not isinstance(result, dict):
            raise ProviderDataAbsent("GoPlus", "empty result")

        token_data = result.get(address)
        if token_data is None:
            token_data = result.get(address.lower())
        if token_data is None:
            raise ProviderDataAbsent("GoPlus", "address not in result")
        if not isinstance(token_data, dict):
            raise MalformedPayload("GoPlus", "token entry is not an object")

        return token_data
