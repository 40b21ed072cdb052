# rangeget/prober.py
"""
Metadata-only request that learns the object length and its filename.
"""
import asyncio
import logging

import aiohttp

from rangeget.models import ProbeResult
from rangeget.utils import filename_from_url, format_bytes

logger = logging.getLogger(__name__)


class Prober:
    def __init__(self, session: aiohttp.ClientSession):
        self.session = session

    async def probe(self, url: str) -> ProbeResult:
        """
        HEAD the URL, following redirects.

        Any transport failure yields a zero length, which the caller treats
        the same as a server that advertises no length.
        """
        logger.info("Requesting content-length from the server")
        result = ProbeResult()
        try:
            async with self.session.head(url, allow_redirects=True) as response:
                if response.status >= 400:
                    logger.warning("Probe failed: HTTP %d", response.status)
                    return result
                result.filename = filename_from_url(str(response.url)) or filename_from_url(url)
                raw_length = response.headers.get('Content-Length')
                if raw_length is not None:
                    result.content_length = self._parse_length(raw_length)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning("Probe failed: %s: %s", type(e).__name__, e)
            return ProbeResult()

        if result.content_length > 0:
            logger.info("File name: %s", result.filename)
            logger.info("File size: %s", format_bytes(result.content_length))
        return result

    @staticmethod
    def _parse_length(raw: str) -> int:
        try:
            value = int(raw.strip())
        except ValueError:
            logger.warning("Ignoring malformed Content-Length %r", raw)
            return 0
        return max(value, 0)
