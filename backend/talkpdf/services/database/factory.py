"""
Database Factory for creating database adapters.
Implements Factory Pattern for plug-and-play database support.
"""
from typing import Optional

from .base import DatabaseInterface
from .memory_adapter import MemoryAdapter
from ...core import config
from ...core.logging_config import get_logger

logger = get_logger(__name__)


class DatabaseFactory:
    """
    Factory for creating database adapters.
    Supports Supabase (Postgres) and Memory (in-memory) database backends.
    """

    @staticmethod
    def create(database_type: Optional[str] = None, **kwargs) -> DatabaseInterface:
        """
        Create a database adapter instance.

        Args:
            database_type: Type of database ('supabase', 'memory', or None for auto-detect)
            **kwargs: Additional arguments for specific database adapters

        Returns:
            DatabaseInterface instance

        Examples:
            # Memory (in-memory, non-persistent)
            db = DatabaseFactory.create('memory')

            # Supabase
            db = DatabaseFactory.create('supabase', supabase_url=..., supabase_key=...)
        """
        if database_type is None:
            database_type = config.DATABASE_TYPE

        database_type = database_type.lower()

        if database_type == "memory":
            return DatabaseFactory._create_memory(**kwargs)
        elif database_type == "supabase":
            return DatabaseFactory._create_supabase(**kwargs)
        else:
            raise ValueError(
                f"Unsupported database type: {database_type}. "
                f"Supported types: 'memory', 'supabase'"
            )

    @staticmethod
    def _create_memory(**kwargs) -> MemoryAdapter:
        """Create in-memory adapter (for demos and testing)."""
        return MemoryAdapter()

    @staticmethod
    def _create_supabase(**kwargs):
        """Create Supabase adapter."""
        from .supabase_adapter import SupabaseAdapter

        supabase_url = kwargs.get("supabase_url", config.SUPABASE_URL)
        if not supabase_url:
            raise ValueError("Supabase URL is required")

        supabase_key = kwargs.get("supabase_key", config.SUPABASE_KEY)
        if not supabase_key:
            raise ValueError("Supabase key is required")

        return SupabaseAdapter(supabase_url=supabase_url, supabase_key=supabase_key)

    @staticmethod
    async def create_and_initialize(database_type: Optional[str] = None, **kwargs) -> DatabaseInterface:
        """
        Create database adapter and initialize it.

        Args:
            database_type: Type of database
            **kwargs: Additional arguments

        Returns:
            Initialized DatabaseInterface instance
        """
        db = DatabaseFactory.create(database_type, **kwargs)
        await db.initialize()
        return db
