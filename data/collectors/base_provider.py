"""
Base Provider Client
Shared aiohttp plumbing for every external data source: a fixed per-call
timeout, request statistics, and the rule that nothing raises past fetch()
"""

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import aiohttp

from utils.constants import USER_AGENT
from utils.errors import (
    ProviderError, ProviderUnavailable, ProviderDataAbsent, MalformedPayload
)

logger = logging.getLogger(__name__)


class BaseProviderClient(ABC):
    """
    One external data source.

    Subclasses implement _fetch(), which may raise ProviderError subclasses.
    fetch() maps every failure, including unexpected ones, to None.
    """

    name = "provider"

    def __init__(self, timeout: float, session: Optional[aiohttp.ClientSession] = None):
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.session = session
        self._owns_session = session is None

        self.stats = {
            'total_requests': 0,
            'successful_requests': 0,
            'failed_requests': 0,
            'absent_responses': 0,
        }

    async def initialize(self):
        """Open the HTTP session"""
        if not self.session:
            self.session = aiohttp.ClientSession(
                timeout=self.timeout,
                headers={'User-Agent': USER_AGENT},
            )
            self._owns_session = True

    async def close(self):
        """Close the HTTP session if this client opened it"""
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()
        self.session = None

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def fetch(self, address: str) -> Optional[Dict[str, Any]]:
        """
        Fetch the raw payload for an address.

        Returns:
            Provider payload, or None when the provider is unreachable,
            timed out, has no entry, or answered with an unexpected shape.
        """
        try:
            payload = await self._fetch(address)
        except ProviderDataAbsent as e:
            self.stats['absent_responses'] += 1
            logger.info(f"⚠️ {self.name}: no data for {address[:16]}... ({e})")
            return None
        except MalformedPayload as e:
            self.stats['failed_requests'] += 1
            logger.warning(f"⚠️ {self.name}: malformed payload ({e})")
            return None
        except ProviderError as e:
            self.stats['failed_requests'] += 1
            logger.warning(f"❌ {self.name} unavailable: {e}")
            return None
        except Exception as e:
            self.stats['failed_requests'] += 1
            logger.error(f"❌ {self.name}: unexpected error for {address[:16]}...: {e}")
            return None

        if payload is None:
            self.stats['absent_responses'] += 1
        return payload

    @abstractmethod
    async def _fetch(self, address: str) -> Optional[Dict[str, Any]]:
        """Provider-specific request and payload extraction"""

    async def _request_json(
        self,
        method: str,
        url: str,
        params: Optional[Dict] = None,
        headers: Optional[Dict] = None,
        json_body: Optional[Dict] = None,
        not_found_is_absent: bool = True,
    ) -> Any:
        """
        Make one HTTP request and decode the JSON body.

        Raises:
            ProviderUnavailable: timeout, connection error, non-2xx status
            ProviderDataAbsent: 404 when not_found_is_absent
            MalformedPayload: body is not JSON
        """
        if not self.session:
            await self.initialize()

        self.stats['total_requests'] += 1

        try:
            async with self.session.request(
                method, url,
                params=params,
                headers=headers,
                json=json_body,
                timeout=self.timeout,
            ) as response:
                if response.status == 404 and not_found_is_absent:
                    raise ProviderDataAbsent(self.name, f"404 from {url}")
                if response.status < 200 or response.status >= 300:
                    raise ProviderUnavailable(self.name, f"HTTP {response.status} from {url}")

                try:
                    data = await response.json(content_type=None)
                except (json.JSONDecodeError, aiohttp.ContentTypeError, ValueError) as e:
                    raise MalformedPayload(self.name, f"non-JSON body: {e}") from e

        except asyncio.TimeoutError as e:
            raise ProviderUnavailable(self.name, f"timeout after {self.timeout.total}s") from e
        except aiohttp.ClientError as e:
            raise ProviderUnavailable(self.name, str(e)) from e

        self.stats['successful_requests'] += 1
        return data

    async def _get_json(self, url: str, **kwargs) -> Any:
        return await self._request_json('GET', url, **kwargs)

    async def _post_json(self, url: str, body: Dict, **kwargs) -> Any:
        return await self._request_json('POST', url, json_body=body, **kwargs)

    def get_stats(self) -> Dict[str, int]:
        """Request counters for this client"""
        return dict(self.stats)
