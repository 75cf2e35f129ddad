"""
Supabase (PostgREST) adapter implementing DatabaseInterface.

Tables:
- documents: processing state and results
- profiles: subscription_plan per user_id (read only here)
- usage_tracking: append-only usage events, metadata jsonb
- daily_usage_summary: one row per (user_id, date)

The supabase client is synchronous; every call runs in the default executor.
"""
import asyncio
from typing import List, Dict, Optional, Any, Callable

from supabase import create_client, Client
from supabase.lib.client_options import ClientOptions

from .base import DatabaseInterface
from ...core.logging_config import get_logger

logger = get_logger(__name__)

DOCUMENTS_TABLE = "documents"
PROFILES_TABLE = "profiles"
USAGE_TABLE = "usage_tracking"
DAILY_SUMMARY_TABLE = "daily_usage_summary"


class SupabaseAdapter(DatabaseInterface):
    """Database adapter backed by a Supabase Postgres project."""

    def __init__(self, supabase_url: str, supabase_key: str, client: Optional[Client] = None):
        """
        Initialize Supabase adapter.

        Args:
            supabase_url: Supabase project URL
            supabase_key: Service role key (the pipeline writes on behalf of users)
            client: Pre-built client (tests)
        """
        self.supabase: Client = client or create_client(
            supabase_url,
            supabase_key,
            options=ClientOptions(
                auto_refresh_token=False,
                persist_session=False
            )
        )

    async def _run(self, fn: Callable[[], Any]) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, fn)

    @staticmethod
    def _first(response) -> Optional[Dict]:
        rows = response.data or []
        return rows[0] if rows else None

    async def initialize(self):
        """Verify the documents table is reachable."""
        try:
            await self._run(lambda: self.supabase.table(DOCUMENTS_TABLE).select("id").limit(1).execute())
        except Exception as e:
            raise ValueError(f"Error accessing Supabase database: {e}")

    async def close(self):
        """Close database connection (no-op for Supabase, but included for interface)."""
        pass

    # Document operations
    async def create_document(self, doc_data: Dict) -> Dict:
        response = await self._run(
            lambda: self.supabase.table(DOCUMENTS_TABLE).insert(doc_data).execute()
        )
        return self._first(response) or doc_data

    async def get_owned_document(self, doc_id: str, user_id: str) -> Optional[Dict]:
        response = await self._run(
            lambda: self.supabase.table(DOCUMENTS_TABLE)
            .select("*")
            .eq("id", doc_id)
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        return self._first(response)

    async def update_owned_document(self, doc_id: str, user_id: str, updates: Dict) -> Optional[Dict]:
        response = await self._run(
            lambda: self.supabase.table(DOCUMENTS_TABLE)
            .update(updates)
            .eq("id", doc_id)
            .eq("user_id", user_id)
            .execute()
        )
        return self._first(response)

    async def update_document_in_status(self, doc_id: str, expected_status: str, updates: Dict) -> Optional[Dict]:
        response = await self._run(
            lambda: self.supabase.table(DOCUMENTS_TABLE)
            .update(updates)
            .eq("id", doc_id)
            .eq("status", expected_status)
            .execute()
        )
        return self._first(response)

    # Profile operations
    async def get_user_plan(self, user_id: str) -> Optional[str]:
        response = await self._run(
            lambda: self.supabase.table(PROFILES_TABLE)
            .select("subscription_plan")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        profile = self._first(response)
        return profile.get("subscription_plan") if profile else None

    # Usage operations
    async def find_usage_event(self, user_id: str, action_type: str, document_id: str) -> Optional[Dict]:
        response = await self._run(
            lambda: self.supabase.table(USAGE_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .eq("action_type", action_type)
            .contains("metadata", {"document_id": document_id})
            .limit(1)
            .execute()
        )
        return self._first(response)

    async def create_usage_event(self, event_data: Dict) -> Dict:
        response = await self._run(
            lambda: self.supabase.table(USAGE_TABLE).insert(event_data).execute()
        )
        return self._first(response) or event_data

    async def list_usage_events(self, user_id: str, start: str, end: str) -> List[Dict]:
        response = await self._run(
            lambda: self.supabase.table(USAGE_TABLE)
            .select("action_type, audio_minutes_used, created_at, metadata")
            .eq("user_id", user_id)
            .gte("created_at", start)
            .lt("created_at", end)
            .execute()
        )
        return response.data or []

    async def upsert_daily_summary(self, summary: Dict[str, Any]) -> Dict:
        response = await self._run(
            lambda: self.supabase.table(DAILY_SUMMARY_TABLE)
            .upsert(summary, on_conflict="user_id,date")
            .execute()
        )
        return self._first(response) or summary

    async def get_daily_summary(self, user_id: str, date: str) -> Optional[Dict]:
        response = await self._run(
            lambda: self.supabase.table(DAILY_SUMMARY_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .eq("date", date)
            .limit(1)
            .execute()
        )
        return self._first(response)
