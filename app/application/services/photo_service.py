from dataclasses import dataclass
from typing import Optional, Dict, Any, List
import base64
import binascii
import io
import logging
import re
import uuid
from fastapi import HTTPException
from PIL import Image, UnidentifiedImageError

from ..ports.storage_repo import StorageRepository
from ..ports.image_fetcher import ImageFetcher

logger = logging.getLogger(__name__)

_FOLDER_RE = re.compile(r'^[A-Za-z0-9_\-]{1,64}$')


@dataclass
class PhotoService:
    storage_repo: StorageRepository
    fetcher: ImageFetcher
    base_url: str
    max_file_size: int
    allowed_types: List[str]
    default_folder: str = "photos"

    async def upload_bytes(self, data: bytes, folder: Optional[str] = None) -> Dict[str, Any]:
        folder = self._folder(folder)
        if not data:
            raise HTTPException(status_code=400, detail="file is required")
        if len(data) > self.max_file_size:
            raise HTTPException(status_code=400, detail=f"File too large. Max size: {self.max_file_size} bytes")

        info = self._inspect(data)
        filename = f"{uuid.uuid4()}.{info['format'].lower()}"
        path = self.storage_repo.save_bytes(folder, filename, data)
        logger.info(f"Stored photo {path} ({len(data)} bytes)")
        return {
            "url": f"{self.base_url.rstrip('/')}/uploads/{path}",
            "path": path,
            "bytes": len(data),
            **info,
        }

    async def upload_source(self, source: str, folder: Optional[str] = None) -> Dict[str, Any]:
        """Upload from a remote URL, a data URL, or raw base64."""
        source = source.strip()
        if source.startswith(("http://", "https://")):
            data = await self.fetcher.fetch(source, self.max_file_size)
        else:
            data = self._decode_base64(source)
        return await self.upload_bytes(data, folder)

    def _folder(self, folder: Optional[str]) -> str:
        if not folder:
            return self.default_folder
        if not _FOLDER_RE.match(folder):
            raise HTTPException(status_code=400, detail="folder may only contain letters, digits, '-' and '_'")
        return folder

    def _decode_base64(self, value: str) -> bytes:
        if value.startswith("data:"):
            header, _, value = value.partition(",")
            if ";base64" not in header:
                raise HTTPException(status_code=400, detail="Only base64 data URLs are supported")
        try:
            return base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError):
            raise HTTPException(status_code=400, detail="file must be a URL, data URL or base64 string")

    def _inspect(self, data: bytes) -> Dict[str, Any]:
        try:
            with Image.open(io.BytesIO(data)) as image:
                image.verify()
                fmt = image.format or ""
                width, height = image.size
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError) as e:
            raise HTTPException(status_code=400, detail=f"Invalid image: {e}")

        mime_type = Image.MIME.get(fmt, f"image/{fmt.lower()}")
        if mime_type not in self.allowed_types:
            raise HTTPException(status_code=400, detail=f"File type not allowed. Allowed: {', '.join(self.allowed_types)}")
        return {"format": fmt, "width": width, "height": height}
