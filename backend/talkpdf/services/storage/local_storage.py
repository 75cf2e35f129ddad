"""
Local filesystem storage adapter implementing FileStorageInterface.
Stores files on the local filesystem - perfect for development and demos.
"""
import asyncio
from pathlib import Path
from typing import Optional

from .base import FileStorageInterface


class LocalFileStorage(FileStorageInterface):
    """
    Local filesystem storage adapter.
    Stores files in a local directory - perfect for development and demos.
    """

    def __init__(self, base_dir: Optional[Path] = None):
        """
        Initialize local file storage.

        Args:
            base_dir: Base directory for file storage (defaults to backend/uploads)
        """
        if base_dir is None:
            from ...core.config import BASE_DIR
            base_dir = BASE_DIR / "uploads"

        self.base_dir = Path(base_dir)

    async def initialize(self):
        """Initialize storage - ensure base directory exists."""
        self.base_dir.mkdir(parents=True, exist_ok=True)

    async def close(self):
        """Close storage (no-op for local filesystem)."""
        pass

    def _get_full_path(self, file_path: str) -> Path:
        """Get full filesystem path from storage path."""
        normalized = Path(file_path).as_posix().lstrip('/')
        full_path = (self.base_dir / normalized).resolve()
        # Reject paths that escape the storage root
        if not full_path.is_relative_to(self.base_dir.resolve()):
            raise ValueError(f"Invalid storage path: {file_path}")
        return full_path

    async def get_file(self, file_path: str) -> bytes:
        """Retrieve a file from local filesystem."""
        full_path = self._get_full_path(file_path)

        if not full_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, full_path.read_bytes)

    async def save_bytes(self, content: bytes, file_path: str, content_type: str) -> str:
        """Save bytes to local filesystem (content type is not recorded locally)."""
        full_path = self._get_full_path(file_path)

        def _save():
            full_path.parent.mkdir(parents=True, exist_ok=True)
            full_path.write_bytes(content)

        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, _save)

        return file_path
