# network_utils/api/response_handler.py

from typing import Dict, Any, Optional, NamedTuple
from dataclasses import dataclass
from enum import Enum
import logging
import json
from ..core.exceptions import NetworkError
from ..core.utils import is_positive_status
from .transport import RawResponse

logger = logging.getLogger(__name__)

Json = Dict[str, Any]

UNKNOWN_ENDPOINT = "unknown endpoint"
HTTP_UNAUTHORIZED = 401
HTTP_UPGRADE_REQUIRED = 426

class APIResponse(NamedTuple):
    """A JSON payload paired with the status code it arrived with"""
    payload: Json
    status_code: int

class BodyShape(Enum):
    """Outcome of decoding a response body"""
    OBJECT = "object"
    NON_OBJECT = "non_object"
    MALFORMED = "malformed"

@dataclass(frozen=True)
class ParsedBody:
    """Tagged result of :func:`parse_body`"""
    shape: BodyShape
    value: Any = None
    error: Optional[json.JSONDecodeError] = None

    @property
    def offset(self) -> int:
        """Position at which decoding failed, 0 when it never started"""
        return self.error.pos if self.error is not None else 0

def parse_body(text: str) -> ParsedBody:
    """Decode a response body without raising on malformed input"""
    try:
        value = json.loads(text)
    except json.JSONDecodeError as e:
        return ParsedBody(BodyShape.MALFORMED, error=e)
    if isinstance(value, dict):
        return ParsedBody(BodyShape.OBJECT, value=value)
    return ParsedBody(BodyShape.NON_OBJECT, value=value)

class ResponseKind(Enum):
    """How a classified response should be handed back to the caller"""
    SUCCESS = "success"
    EMPTY_SUCCESS = "empty_success"
    UNAUTHORIZED = "unauthorized"
    UPGRADE_REQUIRED = "upgrade_required"
    FAILURE = "failure"

@dataclass(frozen=True)
class ClassifiedResponse:
    """A response after classification, before any hook has run"""
    kind: ResponseKind
    payload: Json
    status_code: int

    def as_response(self) -> APIResponse:
        return APIResponse(self.payload, self.status_code)

class ResponseHandler:
    """
    Classifies raw responses and logs their outcome.

    Every call to :meth:`classify` emits exactly one record: INFO for
    successful responses, WARNING for everything else. Classification is
    stateless; hooks and retries are applied by the caller.

    Raises:
        json.JSONDecodeError: the body is malformed and the response is not
            an empty success (2xx with decoding failing at offset 0)
        NetworkError: the body is valid JSON but not an object
    """

    def __init__(self, log: Optional[logging.Logger] = None):
        self.logger = log or logger

    def classify(self, raw: RawResponse) -> ClassifiedResponse:
        status_code = raw.status_code
        method = raw.request_method
        endpoint = self._endpoint(raw)
        parsed = parse_body(raw.body_text)

        if parsed.shape is BodyShape.MALFORMED:
            # empty positive response, e.g. 204
            if is_positive_status(status_code) and parsed.offset == 0:
                self._success(endpoint, status_code, method)
                return ClassifiedResponse(ResponseKind.EMPTY_SUCCESS, {}, status_code)
            self._failure(endpoint, status_code, method)
            raise parsed.error

        if parsed.shape is BodyShape.NON_OBJECT:
            self._failure(endpoint, status_code, method)
            raise NetworkError(status_code=status_code)

        payload = parsed.value
        if status_code == HTTP_UNAUTHORIZED:
            kind = ResponseKind.UNAUTHORIZED
        elif status_code == HTTP_UPGRADE_REQUIRED:
            kind = ResponseKind.UPGRADE_REQUIRED
        elif is_positive_status(status_code):
            kind = ResponseKind.SUCCESS
        else:
            kind = ResponseKind.FAILURE

        if kind is ResponseKind.SUCCESS:
            self._success(endpoint, status_code, method)
        else:
            self._failure(endpoint, status_code, method, payload=payload)
        return ClassifiedResponse(kind, payload, status_code)

    @staticmethod
    def _endpoint(raw: RawResponse) -> str:
        if raw.request_url is None or not raw.request_url.path:
            return UNKNOWN_ENDPOINT
        return raw.request_url.path

    def _success(self, endpoint: str, status_code: int, method: str) -> None:
        self.logger.info(
            f"{method} on {endpoint}: {status_code}",
            extra={"method": method, "endpoint": endpoint}
        )

    def _failure(
        self,
        endpoint: str,
        status_code: int,
        method: str,
        payload: Optional[Json] = None
    ) -> None:
        if payload is None:
            detail = "with no payload"
        else:
            detail = f"with payload: {json.dumps(payload)}"
        self.logger.warning(
            f"{method} on {endpoint}: {status_code} {detail}",
            extra={"method": method, "endpoint": endpoint}
        )
