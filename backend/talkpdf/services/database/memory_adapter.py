"""
In-memory adapter implementing DatabaseInterface.
Perfect for demos and testing - stores all data in memory using Python dicts/lists.
Data is lost on restart (on-demand, no persistence).
"""
from typing import List, Dict, Optional, Any
from datetime import datetime, timezone
import copy
import uuid

from .base import DatabaseInterface
from ...core.logging_config import get_logger

logger = get_logger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class MemoryAdapter(DatabaseInterface):
    """
    In-memory database adapter using Python dictionaries and lists.
    Stores all data in memory - perfect for demos and testing.
    Data is lost when the application restarts.
    """

    def __init__(self):
        """
        Initialize in-memory adapter.
        Creates empty data structures for documents, profiles and usage.
        """
        self._documents: Dict[str, Dict] = {}
        self._profiles: Dict[str, Dict] = {}  # user_id -> profile
        self._usage_events: List[Dict] = []
        self._daily_summaries: Dict[tuple, Dict] = {}  # (user_id, date) -> summary

    async def initialize(self):
        """Initialize database (no-op for in-memory, but required by interface)."""
        # Clear any existing data (useful for testing)
        self._documents.clear()
        self._profiles.clear()
        self._usage_events.clear()
        self._daily_summaries.clear()

    async def close(self):
        """Close database connection (no-op for in-memory)."""
        pass

    # Document operations
    async def create_document(self, doc_data: Dict) -> Dict:
        """Create a new document record."""
        doc_id = doc_data.get("id")
        if not doc_id:
            raise ValueError("Document must have an 'id' field")
        if not doc_data.get("user_id"):
            raise ValueError("Document must have a 'user_id' field")

        now = _now()
        record = {"status": "uploaded", **doc_data}
        record.setdefault("created_at", now)
        record.setdefault("updated_at", now)

        # Store document (deep copy to avoid reference issues)
        self._documents[doc_id] = copy.deepcopy(record)
        return copy.deepcopy(record)

    async def get_owned_document(self, doc_id: str, user_id: str) -> Optional[Dict]:
        """Get a document by ID if it belongs to user_id."""
        doc = self._documents.get(doc_id)
        if doc is None or doc.get("user_id") != user_id:
            return None
        return copy.deepcopy(doc)

    async def update_owned_document(self, doc_id: str, user_id: str, updates: Dict) -> Optional[Dict]:
        """Update a document owned by user_id."""
        doc = self._documents.get(doc_id)
        if doc is None or doc.get("user_id") != user_id:
            return None
        return self._apply_updates(doc, updates)

    async def update_document_in_status(self, doc_id: str, expected_status: str, updates: Dict) -> Optional[Dict]:
        """Update a document by ID if it is still in expected_status."""
        doc = self._documents.get(doc_id)
        if doc is None or doc.get("status") != expected_status:
            return None
        return self._apply_updates(doc, updates)

    def _apply_updates(self, doc: Dict, updates: Dict) -> Dict:
        for key, value in updates.items():
            doc[key] = copy.deepcopy(value)
        doc["updated_at"] = _now()
        return copy.deepcopy(doc)

    # Profile operations
    async def set_user_plan(self, user_id: str, plan: str) -> None:
        """Seed or change a profile's plan (demo and test helper)."""
        self._profiles[user_id] = {"user_id": user_id, "subscription_plan": plan}

    async def get_user_plan(self, user_id: str) -> Optional[str]:
        profile = self._profiles.get(user_id)
        return profile.get("subscription_plan") if profile else None

    # Usage operations
    async def find_usage_event(self, user_id: str, action_type: str, document_id: str) -> Optional[Dict]:
        for event in self._usage_events:
            if (
                event["user_id"] == user_id
                and event["action_type"] == action_type
                and (event.get("metadata") or {}).get("document_id") == document_id
            ):
                return copy.deepcopy(event)
        return None

    async def create_usage_event(self, event_data: Dict) -> Dict:
        record = copy.deepcopy(event_data)
        record.setdefault("id", str(uuid.uuid4()))
        record.setdefault("created_at", _now())
        record.setdefault("audio_minutes_used", 0.0)
        record.setdefault("metadata", {})
        self._usage_events.append(record)
        return copy.deepcopy(record)

    async def list_usage_events(self, user_id: str, start: str, end: str) -> List[Dict]:
        return [
            copy.deepcopy(event)
            for event in self._usage_events
            if event["user_id"] == user_id and start <= event["created_at"] < end
        ]

    async def upsert_daily_summary(self, summary: Dict[str, Any]) -> Dict:
        key = (summary["user_id"], summary["date"])
        self._daily_summaries[key] = copy.deepcopy(summary)
        return copy.deepcopy(summary)

    async def get_daily_summary(self, user_id: str, date: str) -> Optional[Dict]:
        summary = self._daily_summaries.get((user_id, date))
        return copy.deepcopy(summary) if summary else None
