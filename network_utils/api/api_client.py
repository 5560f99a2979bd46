# network_utils/api/api_client.py

from typing import Dict, Any, Optional, Callable, Awaitable, Mapping
from dataclasses import dataclass, field
from enum import Enum
import logging
import json
import yarl
from ..core.config import Config
from ..core.utils import (
    validate_gateway,
    normalize_endpoint,
    render_query,
    merge_headers
)
from .transport import Transport, AiohttpTransport, RawResponse
from .response_handler import (
    ResponseHandler,
    ResponseKind,
    APIResponse,
    Json
)

logger = logging.getLogger(__name__)

UnauthorizedHook = Callable[[Json], APIResponse]
UpgradeRequiredHook = Callable[[Json], APIResponse]
ReauthenticateHook = Callable[[], Awaitable[bool]]

class RequestMethod(Enum):
    """HTTP request methods"""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"

@dataclass(frozen=True)
class APIConfig:
    """Identity of an API origin shared by every request of a client"""
    gateway: str
    default_headers: Optional[Dict[str, str]] = None
    allow_insecure: bool = False
    timeout: float = 30.0
    user_agent: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "gateway", validate_gateway(self.gateway))
        object.__setattr__(self, "default_headers", dict(self.default_headers or {}))

    @property
    def scheme(self) -> str:
        return "http" if self.allow_insecure else "https"

    @classmethod
    def from_config(cls, config: Config) -> "APIConfig":
        """Build an APIConfig from the ``api.*`` section of a Config"""
        return cls(
            gateway=config.get("api.gateway"),
            default_headers=dict(config.get("api.default_headers") or {}),
            allow_insecure=bool(config.get("api.allow_insecure", False)),
            timeout=float(config.get("api.timeout", 30.0)),
            user_agent=config.get("api.user_agent")
        )

@dataclass(frozen=True)
class PreparedRequest:
    """Everything needed to send, and re-send, one logical call"""
    method: RequestMethod
    url: yarl.URL
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None

class APIClient:
    """
    Issues JSON requests against a single API gateway.

    This class provides:
    - GET/POST/PUT/DELETE/HEAD against ``https://<gateway><endpoint>``
    - Default headers merged into every request (defaults win on collision)
    - Uniform response classification and outcome logging
    - Interception of 401 and 426 responses through optional hooks
    - A single retry after a successful ``on_reauthenticate``

    Hooks are plain attributes and may be reassigned at any time; each
    request reads them when it needs them.

    Example:
        client = APIClient(APIConfig(gateway="api.example.com"))
        payload, status = await client.get("/v1/items", query={"page": 2})
    """

    def __init__(
        self,
        config: APIConfig,
        transport: Optional[Transport] = None,
        on_unauthorized: Optional[UnauthorizedHook] = None,
        on_upgrade_required: Optional[UpgradeRequiredHook] = None,
        on_reauthenticate: Optional[ReauthenticateHook] = None,
        response_handler: Optional[ResponseHandler] = None
    ):
        self.config = config
        self._owns_transport = transport is None
        if transport is None:
            transport = AiohttpTransport(
                timeout=config.timeout,
                user_agent=config.user_agent
            )
        self.transport: Transport = transport
        self.on_unauthorized = on_unauthorized
        self.on_upgrade_required = on_upgrade_required
        self.on_reauthenticate = on_reauthenticate
        self.response_handler = response_handler or ResponseHandler()

    async def __aenter__(self) -> "APIClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the default transport; injected transports are left open"""
        if self._owns_transport:
            await self.transport.close()

    def build_url(self, endpoint: str, query: Optional[Mapping[str, Any]] = None) -> yarl.URL:
        """Build the absolute URL for an endpoint on the configured gateway"""
        url = yarl.URL(f"{self.config.scheme}://{self.config.gateway}").with_path(
            normalize_endpoint(endpoint)
        )
        rendered = render_query(query)
        if rendered:
            url = url.with_query(rendered)
        return url

    def prepare(
        self,
        method: RequestMethod,
        endpoint: str,
        headers: Optional[Mapping[str, str]] = None,
        query: Optional[Mapping[str, Any]] = None,
        body: Optional[Json] = None
    ) -> PreparedRequest:
        """Translate a logical call into a transport-level request"""
        encoded = None
        if method in (RequestMethod.POST, RequestMethod.PUT):
            encoded = json.dumps(body)
        return PreparedRequest(
            method=method,
            url=self.build_url(endpoint, query),
            headers=merge_headers(headers, self.config.default_headers),
            body=encoded
        )

    async def request(
        self,
        method: RequestMethod,
        endpoint: str,
        headers: Optional[Mapping[str, str]] = None,
        query: Optional[Mapping[str, Any]] = None,
        body: Optional[Json] = None
    ) -> APIResponse:
        """
        Make an API request

        Args:
            method: HTTP method to use
            endpoint: Path on the gateway, e.g. ``/v1/items``
            headers: Per-call headers, overridden by default headers
            query: Query parameters, rendered to strings
            body: JSON body, only sent with POST and PUT

        Returns:
            APIResponse of the (possibly retried) call, or the result of an
            ``on_unauthorized``/``on_upgrade_required`` hook

        Raises:
            json.JSONDecodeError: malformed body on a non-success response
            NetworkError: body is valid JSON but not an object
        """
        prepared = self.prepare(method, endpoint, headers=headers, query=query, body=body)
        raw = await self._send(prepared)
        return await self._process(prepared, raw, allow_reauthenticate=True)

    async def _send(self, prepared: PreparedRequest) -> RawResponse:
        send = getattr(self.transport, prepared.method.value.lower())
        if prepared.method in (RequestMethod.POST, RequestMethod.PUT):
            return await send(prepared.url, prepared.headers, prepared.body)
        return await send(prepared.url, prepared.headers)

    async def _process(
        self,
        prepared: PreparedRequest,
        raw: RawResponse,
        allow_reauthenticate: bool
    ) -> APIResponse:
        classified = self.response_handler.classify(raw)

        if classified.kind is ResponseKind.UNAUTHORIZED:
            on_reauthenticate = self.on_reauthenticate
            if allow_reauthenticate and on_reauthenticate is not None:
                if await on_reauthenticate():
                    logger.debug(
                        f"Retrying {prepared.method.value} on {prepared.url.path} after reauthentication"
                    )
                    retried = await self._send(prepared)
                    return await self._process(prepared, retried, allow_reauthenticate=False)
            if self.on_unauthorized is not None:
                return self.on_unauthorized(classified.payload)
            return classified.as_response()

        if classified.kind is ResponseKind.UPGRADE_REQUIRED:
            if self.on_upgrade_required is not None:
                return self.on_upgrade_required(classified.payload)
            return classified.as_response()

        return classified.as_response()

    async def get(
        self,
        endpoint: str,
        headers: Optional[Mapping[str, str]] = None,
        query: Optional[Mapping[str, Any]] = None
    ) -> APIResponse:
        """Perform GET request"""
        return await self.request(RequestMethod.GET, endpoint, headers=headers, query=query)

    async def post(
        self,
        endpoint: str,
        headers: Optional[Mapping[str, str]] = None,
        body: Optional[Json] = None,
        query: Optional[Mapping[str, Any]] = None
    ) -> APIResponse:
        """Perform POST request"""
        return await self.request(RequestMethod.POST, endpoint, headers=headers, query=query, body=body)

    async def put(
        self,
        endpoint: str,
        headers: Optional[Mapping[str, str]] = None,
        body: Optional[Json] = None
    ) -> APIResponse:
        """Perform PUT request"""
        return await self.request(RequestMethod.PUT, endpoint, headers=headers, body=body)

    async def delete(
        self,
        endpoint: str,
        headers: Optional[Mapping[str, str]] = None,
        query: Optional[Mapping[str, Any]] = None
    ) -> APIResponse:
        """Perform DELETE request"""
        return await self.request(RequestMethod.DELETE, endpoint, headers=headers, query=query)

    async def head(
        self,
        endpoint: str,
        headers: Optional[Mapping[str, str]] = None,
        query: Optional[Mapping[str, Any]] = None
    ) -> APIResponse:
        """Perform HEAD request"""
        return await self.request(RequestMethod.HEAD, endpoint, headers=headers, query=query)

class Requests:
    """
    Mixin granting request methods to classes that expose an API identity.

    Subclasses provide ``gateway`` and, optionally, ``default_headers``,
    ``transport``, ``allow_insecure`` and any of the three hooks, either as
    attributes or as methods. The underlying APIClient is built on first
    use; hooks are copied onto it on every access. Call ``close`` or use
    the instance as an async context manager to release its transport.
    """

    gateway: str
    default_headers: Optional[Dict[str, str]] = None
    transport: Optional[Transport] = None
    allow_insecure: bool = False
    on_unauthorized: Optional[UnauthorizedHook] = None
    on_upgrade_required: Optional[UpgradeRequiredHook] = None
    on_reauthenticate: Optional[ReauthenticateHook] = None

    @property
    def api_client(self) -> APIClient:
        client = self.__dict__.get("_api_client")
        if client is None:
            client = APIClient(
                APIConfig(
                    gateway=self.gateway,
                    default_headers=self.default_headers,
                    allow_insecure=self.allow_insecure
                ),
                transport=self.transport
            )
            self.__dict__["_api_client"] = client
        client.on_unauthorized = self.on_unauthorized
        client.on_upgrade_required = self.on_upgrade_required
        client.on_reauthenticate = self.on_reauthenticate
        return client

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying client if one was built"""
        client = self.__dict__.pop("_api_client", None)
        if client is not None:
            await client.close()

    async def get(self, endpoint: str, **kwargs: Any) -> APIResponse:
        return await self.api_client.get(endpoint, **kwargs)

    async def post(self, endpoint: str, **kwargs: Any) -> APIResponse:
        return await self.api_client.post(endpoint, **kwargs)

    async def put(self, endpoint: str, **kwargs: Any) -> APIResponse:
        return await self.api_client.put(endpoint, **kwargs)

    async def delete(self, endpoint: str, **kwargs: Any) -> APIResponse:
        return await self.api_client.delete(endpoint, **kwargs)

    async def head(self, endpoint: str, **kwargs: Any) -> APIResponse:
        return await self.api_client.head(endpoint, **kwargs)
