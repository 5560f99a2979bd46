"""Global test configuration and fixtures."""
import pytest
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
import yarl
from network_utils.api.api_client import APIClient, APIConfig
from network_utils.api.transport import RawResponse

@dataclass
class SentRequest:
    """A request as seen by the fake transport"""
    method: str
    url: yarl.URL
    headers: Dict[str, str]
    body: Optional[str] = None

class FakeTransport:
    """
    Transport answering from a queue of ``(body_text, status_code)`` pairs.

    The last queued answer is repeated once the queue is down to one entry.
    """

    def __init__(self, *responses: Tuple[str, int]):
        self.responses: List[Tuple[str, int]] = list(responses) or [("{}", 200)]
        self.calls: List[SentRequest] = []

    async def _respond(self, method, url, headers, body=None) -> RawResponse:
        self.calls.append(SentRequest(method, url, dict(headers), body))
        if len(self.responses) > 1:
            body_text, status_code = self.responses.pop(0)
        else:
            body_text, status_code = self.responses[0]
        return RawResponse(
            status_code=status_code,
            body_text=body_text,
            request_method=method,
            request_url=url
        )

    async def get(self, url, headers):
        return await self._respond("GET", url, headers)

    async def post(self, url, headers, body):
        return await self._respond("POST", url, headers, body)

    async def put(self, url, headers, body):
        return await self._respond("PUT", url, headers, body)

    async def delete(self, url, headers):
        return await self._respond("DELETE", url, headers)

    async def head(self, url, headers):
        return await self._respond("HEAD", url, headers)

class FakeResponse:
    """Stand-in for an aiohttp response used inside ``async with``"""

    def __init__(self, status: int = 200, text: str = "", content: bytes = b""):
        self.status = status
        self._text = text
        self._content = content

    async def text(self) -> str:
        return self._text

    async def read(self) -> bytes:
        return self._content

class _FakeRequestContext:
    def __init__(self, session, data):
        self.session = session
        self.data = data

    async def __aenter__(self):
        if self.session.error is not None:
            raise self.session.error
        if self.data is not None:
            self.session.received = b"".join([chunk async for chunk in self.data])
        return self.session.response

    async def __aexit__(self, *exc_info):
        return False

class FakeSession:
    """Stand-in for aiohttp.ClientSession recording GET and POST calls"""

    def __init__(self, response: Optional[FakeResponse] = None, error: Optional[Exception] = None):
        self.response = response or FakeResponse()
        self.error = error
        self.calls: List[Tuple[str, str, Optional[Dict[str, str]]]] = []
        self.received: Optional[bytes] = None
        self.closed = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        self.closed = True
        return False

    def get(self, url, headers=None):
        self.calls.append(("GET", url, headers))
        return _FakeRequestContext(self, None)

    def post(self, url, data=None, headers=None):
        self.calls.append(("POST", url, headers))
        return _FakeRequestContext(self, data)

@pytest.fixture
def api_config():
    """Fixture for API configuration"""
    return APIConfig(gateway="api.example.com", default_headers={"Def": "D"})

@pytest.fixture
def make_client(api_config):
    """Build an APIClient around a FakeTransport answering with ``responses``"""
    def _make(*responses, config=None, **hooks):
        transport = FakeTransport(*responses)
        client = APIClient(config or api_config, transport=transport, **hooks)
        return client, transport
    return _make

@pytest.fixture
def fake_session():
    """Build a FakeSession answering every request with the same response"""
    def _make(status=200, text="", content=b"", error=None):
        return FakeSession(FakeResponse(status, text, content), error=error)
    return _make

@pytest.fixture
def fake_transport():
    """Build a standalone FakeTransport"""
    def _make(*responses):
        return FakeTransport(*responses)
    return _make
