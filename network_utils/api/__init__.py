# network_utils/api/__init__.py

"""
Request issuing and response classification against a configured API gateway.
"""

from .api_client import (
    APIClient,
    APIConfig,
    PreparedRequest,
    Requests,
    RequestMethod
)

from .response_handler import (
    APIResponse,
    BodyShape,
    ClassifiedResponse,
    Json,
    ParsedBody,
    ResponseHandler,
    ResponseKind,
    parse_body
)

from .transport import (
    AiohttpTransport,
    RawResponse,
    Transport
)

__all__ = [
    'APIClient',
    'APIConfig',
    'PreparedRequest',
    'Requests',
    'RequestMethod',
    'APIResponse',
    'BodyShape',
    'ClassifiedResponse',
    'Json',
    'ParsedBody',
    'ResponseHandler',
    'ResponseKind',
    'parse_body',
    'AiohttpTransport',
    'RawResponse',
    'Transport'
]
