# network_utils/storage/bucket.py

from typing import Dict, Any, Optional, Callable, Mapping, AsyncIterator, Tuple
from dataclasses import dataclass
import asyncio
import logging
import aiohttp
from aiohttp.payload import get_payload
from ..core.exceptions import CredentialFormatError

logger = logging.getLogger(__name__)

UPLOAD_LINKS_KEY = "mediaUploadLinks"
UPLOAD_SUCCESS_STATUS = 204
DEFAULT_CHUNK_SIZE = 65536
DEFAULT_CONTENT_TYPE = "application/octet-stream"

ProgressCallback = Callable[[int, int], None]

@dataclass(frozen=True)
class PreSignedUrl:
    """Time-limited upload target and the form fields it must be posted with"""
    url: str
    fields: Dict[str, str]

@dataclass(frozen=True)
class MultipartFile:
    """File part of a multipart upload"""
    field: str
    value: bytes
    filename: Optional[str] = None
    content_type: Optional[str] = None

def parse_upload_links(json_data: Mapping[str, Any]) -> Dict[str, PreSignedUrl]:
    """
    Parse the ``mediaUploadLinks`` section of an API payload.

    Args:
        json_data: Payload such as
            ``{"mediaUploadLinks": {"file1": {"url": ..., "fields": {...}}}}``

    Returns:
        Mapping of each link key to its PreSignedUrl; field names and values
        are converted to strings

    Raises:
        CredentialFormatError: the section is missing or an entry lacks a
            string ``url`` or a mapping ``fields``
    """
    raw = json_data.get(UPLOAD_LINKS_KEY) if isinstance(json_data, Mapping) else None
    if not isinstance(raw, Mapping):
        raise CredentialFormatError("Incorrect S3 credential data")

    links: Dict[str, PreSignedUrl] = {}
    for key, value in raw.items():
        if not isinstance(value, Mapping):
            raise CredentialFormatError("Incorrect S3 credential data", details={"key": key})
        url = value.get("url")
        fields = value.get("fields")
        if not isinstance(url, str) or not isinstance(fields, Mapping):
            raise CredentialFormatError("Incorrect S3 credential data", details={"key": key})
        links[key] = PreSignedUrl(
            url=url,
            fields={str(name): str(field_value) for name, field_value in fields.items()}
        )
    return links

class _BufferWriter:
    """Collects what a multipart payload writes so its size is known upfront"""

    def __init__(self) -> None:
        self.chunks = []

    async def write(self, chunk: bytes) -> None:
        self.chunks.append(bytes(chunk))

async def encode_multipart(
    fields: Mapping[str, str],
    file: MultipartFile,
    boundary: Optional[str] = None
) -> Tuple[bytes, str]:
    """
    Encode form fields followed by a single file as multipart/form-data.

    Part names and the filename are quoted by aiohttp, so quotes and line
    breaks cannot leak into the part headers.

    Returns:
        The serialized body and the Content-Type header announcing its boundary
    """
    writer = aiohttp.MultipartWriter("form-data", boundary=boundary)
    for name, value in fields.items():
        part = get_payload(str(value))
        part.set_content_disposition("form-data", name=name)
        writer.append_payload(part)

    file_part = get_payload(bytes(file.value), content_type=file.content_type or DEFAULT_CONTENT_TYPE)
    if file.filename is not None:
        file_part.set_content_disposition("form-data", name=file.field, filename=file.filename)
    else:
        file_part.set_content_disposition("form-data", name=file.field)
    writer.append_payload(file_part)

    buffer = _BufferWriter()
    await writer.write(buffer)
    return b"".join(buffer.chunks), writer.content_type

async def _stream_body(
    body: bytes,
    chunk_size: int,
    on_progress: Optional[ProgressCallback]
) -> AsyncIterator[bytes]:
    total = len(body)
    sent = 0
    for start in range(0, total, chunk_size):
        chunk = body[start:start + chunk_size]
        yield chunk
        sent += len(chunk)
        if on_progress is not None:
            on_progress(sent, total)

async def upload_to_bucket(
    cred: PreSignedUrl,
    file: MultipartFile,
    on_progress: Optional[ProgressCallback] = None,
    session: Optional[aiohttp.ClientSession] = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE
) -> bool:
    """
    Upload a file to an object-storage bucket with a pre-signed POST.

    The form fields of ``cred`` are sent first, then ``file``. The body is
    streamed in ``chunk_size`` pieces and ``on_progress(bytes_sent,
    total_bytes)`` is called after each piece has been handed to the
    transport.

    Returns:
        True when the bucket answers 204, False for any other status

    Raises:
        aiohttp.ClientError, asyncio.TimeoutError: transport-level failures,
            after being logged
    """
    body, content_type = await encode_multipart(cred.fields, file)
    headers = {
        "Content-Type": content_type,
        "Content-Length": str(len(body))
    }

    if session is None:
        async with aiohttp.ClientSession() as own_session:
            return await _post_upload(own_session, cred.url, body, headers, chunk_size, on_progress)
    return await _post_upload(session, cred.url, body, headers, chunk_size, on_progress)

async def _post_upload(
    session: aiohttp.ClientSession,
    url: str,
    body: bytes,
    headers: Dict[str, str],
    chunk_size: int,
    on_progress: Optional[ProgressCallback]
) -> bool:
    try:
        async with session.post(
            url,
            data=_stream_body(body, chunk_size, on_progress),
            headers=headers
        ) as response:
            if response.status == UPLOAD_SUCCESS_STATUS:
                logger.info(f"POST on {url}: {response.status}")
                return True
            text = await response.text()
            logger.warning(f"POST on {url}: {response.status} - {text}")
            return False
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        logger.warning(f"POST on {url}: {str(e)}")
        raise
