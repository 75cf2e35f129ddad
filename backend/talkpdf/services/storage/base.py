"""
Abstract base class for file storage adapters.
All storage implementations must inherit from this class.
"""
from abc import ABC, abstractmethod


class FileStorageInterface(ABC):
    """
    Abstract interface for file storage operations.
    All storage adapters must implement these methods.
    This allows plug-and-play storage support (local, S3, Supabase) without changing business logic.
    """

    @abstractmethod
    async def get_file(self, file_path: str) -> bytes:
        """
        Retrieve a file from storage.

        Args:
            file_path: Storage path/key of the file

        Returns:
            File contents as bytes

        Raises:
            FileNotFoundError: If nothing is stored at file_path
        """
        pass

    @abstractmethod
    async def save_bytes(self, content: bytes, file_path: str, content_type: str) -> str:
        """
        Save raw bytes, replacing any existing object at file_path.

        Args:
            content: Payload to store
            file_path: Path/key where content should be stored
            content_type: MIME type recorded with the object

        Returns:
            Storage path/key where content was saved
        """
        pass

    @abstractmethod
    async def initialize(self):
        """Initialize storage (create buckets/directories, verify connections, etc.)."""
        pass

    @abstractmethod
    async def close(self):
        """Close storage connection (cleanup, close clients, etc.)."""
        pass
