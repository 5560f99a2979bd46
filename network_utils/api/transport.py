# network_utils/api/transport.py

from typing import Dict, Optional, Protocol
from dataclasses import dataclass
import logging
import aiohttp
import yarl

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class RawResponse:
    """Unprocessed response handed from a transport to the response handler"""
    status_code: int
    body_text: str
    request_method: str
    request_url: Optional[yarl.URL]

class Transport(Protocol):
    """Verb-level send operations an APIClient delegates to"""

    async def get(self, url: yarl.URL, headers: Dict[str, str]) -> RawResponse:
        ...

    async def post(self, url: yarl.URL, headers: Dict[str, str], body: str) -> RawResponse:
        ...

    async def put(self, url: yarl.URL, headers: Dict[str, str], body: str) -> RawResponse:
        ...

    async def delete(self, url: yarl.URL, headers: Dict[str, str]) -> RawResponse:
        ...

    async def head(self, url: yarl.URL, headers: Dict[str, str]) -> RawResponse:
        ...

class AiohttpTransport:
    """
    Default transport backed by a lazily created aiohttp session.

    A single session is shared by every in-flight request and is safe for
    concurrent use. Transport errors (``aiohttp.ClientError``, timeouts)
    propagate to the caller untouched.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        user_agent: Optional[str] = None,
        session: Optional[aiohttp.ClientSession] = None
    ):
        self.timeout = timeout
        self.user_agent = user_agent
        self._session = session
        self._owns_session = session is None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session"""
        if self._session is None or self._session.closed:
            headers = {"User-Agent": self.user_agent} if self.user_agent else None
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers=headers
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the session if this transport created it"""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    async def _send(
        self,
        method: str,
        url: yarl.URL,
        headers: Dict[str, str],
        body: Optional[str] = None
    ) -> RawResponse:
        logger.debug("%s %s", method, url)
        session = await self._get_session()
        async with session.request(method, url, headers=headers, data=body) as response:
            text = await response.text()
            return RawResponse(
                status_code=response.status,
                body_text=text,
                request_method=method,
                request_url=url
            )

    async def get(self, url: yarl.URL, headers: Dict[str, str]) -> RawResponse:
        return await self._send("GET", url, headers)

    async def post(self, url: yarl.URL, headers: Dict[str, str], body: str) -> RawResponse:
        return await self._send("POST", url, headers, body)

    async def put(self, url: yarl.URL, headers: Dict[str, str], body: str) -> RawResponse:
        return await self._send("PUT", url, headers, body)

    async def delete(self, url: yarl.URL, headers: Dict[str, str]) -> RawResponse:
        return await self._send("DELETE", url, headers)

    async def head(self, url: yarl.URL, headers: Dict[str, str]) -> RawResponse:
        return await self._send("HEAD", url, headers)
