# network_utils/download.py

from typing import Optional
import logging
import aiohttp

logger = logging.getLogger(__name__)

async def _get(url: str, session: Optional[aiohttp.ClientSession], as_text: bool):
    if session is None:
        async with aiohttp.ClientSession() as own_session:
            return await _get(url, own_session, as_text)
    async with session.get(url) as response:
        logger.debug(f"GET on {url}: {response.status}")
        if as_text:
            return await response.text()
        return await response.read()

async def get_raw_network_file_bytes(
    file_url: str,
    session: Optional[aiohttp.ClientSession] = None
) -> bytes:
    """Fetch the raw bytes behind an absolute URL, whatever the status"""
    return await _get(file_url, session, as_text=False)

async def get_page(
    url: str,
    session: Optional[aiohttp.ClientSession] = None
) -> str:
    """Fetch the decoded body of an absolute URL, whatever the status"""
    return await _get(url, session, as_text=True)
