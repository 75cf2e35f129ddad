"""
Abstract base class for database adapters.
All database implementations must inherit from this class.
"""
from abc import ABC, abstractmethod
from typing import List, Dict, Optional, Any


class DatabaseInterface(ABC):
    """
    Abstract interface for database operations.
    All database adapters must implement these methods.
    This allows plug-and-play database support without changing business logic.

    Document reads and writes made on behalf of a user are scoped by
    (document id, user id) so a stale or forged id never touches another
    user's row.
    """

    # Document operations
    @abstractmethod
    async def create_document(self, doc_data: Dict) -> Dict:
        """Create a new document record."""
        pass

    @abstractmethod
    async def get_owned_document(self, doc_id: str, user_id: str) -> Optional[Dict]:
        """Get a document by ID if it belongs to user_id."""
        pass

    @abstractmethod
    async def update_owned_document(self, doc_id: str, user_id: str, updates: Dict) -> Optional[Dict]:
        """Update a document owned by user_id. Returns None if no such row."""
        pass

    @abstractmethod
    async def update_document_in_status(self, doc_id: str, expected_status: str, updates: Dict) -> Optional[Dict]:
        """Update a document by ID only while its status equals expected_status. Returns None otherwise."""
        pass

    # Profile operations
    @abstractmethod
    async def get_user_plan(self, user_id: str) -> Optional[str]:
        """Get the user's current subscription plan name."""
        pass

    # Usage operations
    @abstractmethod
    async def find_usage_event(self, user_id: str, action_type: str, document_id: str) -> Optional[Dict]:
        """Find the usage event for (user, action, document) if one exists."""
        pass

    @abstractmethod
    async def create_usage_event(self, event_data: Dict) -> Dict:
        """Append a usage event."""
        pass

    @abstractmethod
    async def list_usage_events(self, user_id: str, start: str, end: str) -> List[Dict]:
        """List a user's usage events with start <= created_at < end (ISO timestamps)."""
        pass

    @abstractmethod
    async def upsert_daily_summary(self, summary: Dict[str, Any]) -> Dict:
        """Insert or replace the (user_id, date) daily usage summary."""
        pass

    @abstractmethod
    async def get_daily_summary(self, user_id: str, date: str) -> Optional[Dict]:
        """Get the daily usage summary for (user_id, date)."""
        pass

    @abstractmethod
    async def initialize(self):
        """Initialize database (create tables/collections, indexes, etc.)."""
        pass

    @abstractmethod
    async def close(self):
        """Close database connection."""
        pass
