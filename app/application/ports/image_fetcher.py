from typing import Protocol


class ImageFetcher(Protocol):
    async def fetch(self, url: str, max_bytes: int) -> bytes:
        ...
