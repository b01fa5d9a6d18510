import os
import logging

from ...application.ports.storage_repo import StorageRepository

logger = logging.getLogger(__name__)


class LocalStorageRepository(StorageRepository):
    def __init__(self, upload_dir: str) -> None:
        self.upload_dir = upload_dir

    def save_bytes(self, subdir: str, filename: str, data: bytes) -> str:
        """Write the file and return its path relative to the upload dir."""
        dest_dir = os.path.join(self.upload_dir, subdir) if subdir else self.upload_dir
        os.makedirs(dest_dir, exist_ok=True)
        path = os.path.join(dest_dir, filename)
        with open(path, "wb") as f:
            f.write(data)
        return f"{subdir}/{filename}" if subdir else filename
