from typing import Any, Dict, Mapping, Optional

from .exceptions import ValidationError

def is_positive_status(status_code: int) -> bool:
    """Return True for 2xx status codes."""
    return 200 <= status_code < 300

def validate_gateway(gateway: Optional[str]) -> str:
    """Validate a bare API host such as ``api.example.com`` or ``localhost:8080``."""
    if not gateway or not isinstance(gateway, str) or not gateway.strip():
        raise ValidationError("Gateway is required")
    gateway = gateway.strip()
    if "://" in gateway:
        raise ValidationError(f"Gateway must not include a scheme: {gateway}")
    if "/" in gateway:
        raise ValidationError(f"Gateway must not include a path: {gateway}")
    return gateway

def normalize_endpoint(endpoint: str) -> str:
    """Ensure an endpoint path starts with a slash."""
    if not isinstance(endpoint, str):
        raise ValidationError("Endpoint must be a string")
    return endpoint if endpoint.startswith("/") else f"/{endpoint}"

def render_query_value(value: Any) -> str:
    """Render a query parameter value the way it is written in JSON-ish APIs."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)

def render_query(query: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Render every value of a query mapping to a string."""
    if not query:
        return {}
    return {str(key): render_query_value(value) for key, value in query.items()}

def merge_headers(
    headers: Optional[Mapping[str, str]],
    default_headers: Optional[Mapping[str, str]]
) -> Dict[str, str]:
    """Merge per-call headers with default headers; defaults win on collision."""
    return {**(headers or {}), **(default_headers or {})}

def merge_dicts(dict1: Dict[str, Any], dict2: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge two dictionaries."""
    result = dict1.copy()

    for key, value in dict2.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_dicts(result[key], value)
        else:
            result[key] = value

    return result
