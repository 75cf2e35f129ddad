"""
Database abstraction layer for plug-and-play database support.
Supports Supabase (Postgres) and Memory (in-memory) database backends.
"""
from .base import DatabaseInterface
from .memory_adapter import MemoryAdapter
from .factory import DatabaseFactory

__all__ = [
    "DatabaseInterface",
    "MemoryAdapter",
    "DatabaseFactory"
]
