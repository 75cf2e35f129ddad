"""
Usage Service - idempotent usage events and the derived daily summary.

Events are keyed by (user, action, document id): a lookup precedes every
insert so re-processing a document never bills it twice. The daily summary
is always recomputed from that day's events, never incremented.
"""
import asyncio
import uuid
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Dict, Iterable, Optional

from .database.base import DatabaseInterface
from ..models.document import UsageAction
from ..core.logging_config import get_logger

logger = get_logger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def aggregate_events(user_id: str, day: date, events: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    """Build a daily_usage_summary row from a day's usage events."""
    pdfs = 0
    explain_back = 0
    ai_questions = 0
    audio_minutes = 0.0
    for event in events:
        action = event.get("action_type")
        if action == UsageAction.PDF_UPLOAD.value:
            pdfs += 1
        elif action == UsageAction.EXPLAIN_BACK.value:
            explain_back += 1
        elif action == UsageAction.AI_QUESTION.value:
            ai_questions += 1
        audio_minutes += float(event.get("audio_minutes_used") or 0)

    return {
        "user_id": user_id,
        "date": day.isoformat(),
        "pdfs_uploaded": pdfs,
        "audio_minutes_used": round(audio_minutes, 2),
        "explain_back_count": explain_back,
        "ai_questions_asked": ai_questions,
    }


class UsageService:
    """
    Records billable actions and keeps the daily summary consistent with them.
    """

    def __init__(self, db_service: DatabaseInterface, clock=utc_now):
        self.db_service = db_service
        self._clock = clock
        # Serializes lookup-then-insert within this process
        self._lock = asyncio.Lock()

    async def record_once(
        self,
        user_id: str,
        action: UsageAction,
        document_id: str,
        audio_minutes: float = 0.0,
        metadata: Optional[Dict[str, Any]] = None
    ) -> bool:
        """
        Insert a usage event unless one exists for (user, action, document).

        Returns:
            True if a new event was written
        """
        async with self._lock:
            existing = await self.db_service.find_usage_event(user_id, action.value, document_id)
            if existing is not None:
                logger.info(f"Usage '{action.value}' already recorded for document {document_id}, skipping")
                return False

            await self.db_service.create_usage_event({
                "id": str(uuid.uuid4()),
                "user_id": user_id,
                "action_type": action.value,
                "audio_minutes_used": round(audio_minutes, 2),
                "metadata": {**(metadata or {}), "document_id": document_id},
                "created_at": self._clock().isoformat(),
            })
            logger.info(f"Recorded usage '{action.value}' for document {document_id}")
            return True

    def today(self) -> date:
        """Current UTC date."""
        return self._clock().date()

    async def recompute_daily_summary(self, user_id: str, day: Optional[date] = None) -> Dict[str, Any]:
        """
        Re-aggregate one UTC day of events and upsert the summary row.

        Args:
            user_id: Owner of the events
            day: UTC date (defaults to today)

        Returns:
            The summary row written
        """
        day = day or self.today()
        start = datetime.combine(day, time.min, tzinfo=timezone.utc)
        end = start + timedelta(days=1)

        events = await self.db_service.list_usage_events(user_id, start.isoformat(), end.isoformat())
        summary = aggregate_events(user_id, day, events)
        await self.db_service.upsert_daily_summary(summary)
        logger.debug(f"Daily usage summary for {user_id} on {summary['date']}: {summary}")
        return summary

    async def get_daily_summary(self, user_id: str, day: date) -> Dict[str, Any]:
        """Stored summary for the day, or an all-zero row when none exists."""
        stored = await self.db_service.get_daily_summary(user_id, day.isoformat())
        return stored or aggregate_events(user_id, day, [])
