import logging
import aiohttp
from fastapi import HTTPException

from ...application.ports.image_fetcher import ImageFetcher

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class AiohttpImageFetcher(ImageFetcher):
    def __init__(self, timeout_seconds: int = 15) -> None:
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    async def fetch(self, url: str, max_bytes: int) -> bytes:
        data = bytearray()
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.get(url) as response:
                    if response.status != 200:
                        raise HTTPException(status_code=400, detail=f"Could not fetch file from URL (status {response.status})")
                    async for chunk in response.content.iter_chunked(CHUNK_SIZE):
                        data.extend(chunk)
                        if len(data) > max_bytes:
                            raise HTTPException(status_code=400, detail=f"File too large. Max size: {max_bytes} bytes")
        except aiohttp.ClientError as e:
            logger.warning(f"Fetching {url} failed: {e}")
            raise HTTPException(status_code=400, detail="Could not fetch file from URL")
        return bytes(data)
