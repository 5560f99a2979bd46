# network_utils/storage/__init__.py

"""
Uploads to object-storage buckets through pre-signed POST credentials.
"""

from .bucket import (
    MultipartFile,
    PreSignedUrl,
    encode_multipart,
    parse_upload_links,
    upload_to_bucket
)

__all__ = [
    'MultipartFile',
    'PreSignedUrl',
    'encode_multipart',
    'parse_upload_links',
    'upload_to_bucket'
]
