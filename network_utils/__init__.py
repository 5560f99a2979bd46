# network_utils/__init__.py

"""
Client-side HTTP convenience layer: JSON requests against a configured API
gateway with reauthentication retry, plus pre-signed bucket uploads.
"""

from .api import (
    APIClient,
    APIConfig,
    APIResponse,
    Json,
    RawResponse,
    RequestMethod,
    Requests,
    Transport
)
from .core.exceptions import (
    NetworkUtilsError,
    NetworkError,
    ConfigError,
    CredentialFormatError,
    ValidationError
)
from .download import get_page, get_raw_network_file_bytes
from .storage import MultipartFile, PreSignedUrl, parse_upload_links, upload_to_bucket

__version__ = "1.0.0"

__all__ = [
    'APIClient',
    'APIConfig',
    'APIResponse',
    'Json',
    'RawResponse',
    'RequestMethod',
    'Requests',
    'Transport',
    'NetworkUtilsError',
    'NetworkError',
    'ConfigError',
    'CredentialFormatError',
    'ValidationError',
    'get_page',
    'get_raw_network_file_bytes',
    'MultipartFile',
    'PreSignedUrl',
    'parse_upload_links',
    'upload_to_bucket'
]
