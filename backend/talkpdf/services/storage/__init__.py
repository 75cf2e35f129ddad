"""
File Storage abstraction layer for plug-and-play storage support.
Supports multiple storage backends without changing business logic.
"""
from .base import FileStorageInterface
from .local_storage import LocalFileStorage
from .factory import FileStorageFactory

__all__ = [
    "FileStorageInterface",
    "LocalFileStorage",
    "FileStorageFactory"
]
