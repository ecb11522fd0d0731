"""
Mood analytics over a recent period
"""
from collections import Counter, defaultdict
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from reflect.core.logging_config import LoggingConfig
from reflect.core.moods import get_mood_by_id, get_mood_trend
from reflect.models.journal import JournalEntry
from reflect.utils.datetime_utils import period_start, utc_now

logger = LoggingConfig.get_logger(__name__)

PERIODS = {"7d": 7, "15d": 15, "30d": 30}
DEFAULT_PERIOD = "30d"


class AnalyticsService:
    """Aggregates a user's entries into a mood timeline and summary stats"""

    def __init__(self, db: Session, user_id: UUID):
        self.db = db
        self.user_id = user_id

    def get_analytics(self, period: str = DEFAULT_PERIOD, now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Build analytics for one of the supported periods

        Raises:
            ValueError: If period is not one of PERIODS
        """
        if period not in PERIODS:
            raise ValueError(f"Invalid period '{period}'. Allowed: {sorted(PERIODS)}")

        days = PERIODS[period]
        now = now or utc_now()
        start = period_start(days, now)

        entries = (
            self.db.query(JournalEntry)
            .filter(
                JournalEntry.user_id == self.user_id,
                JournalEntry.created_at >= start,
                JournalEntry.created_at <= now,
            )
            .order_by(JournalEntry.created_at.asc())
            .all()
        )

        by_day = defaultdict(list)
        for entry in entries:
            by_day[entry.created_at.date()].append(entry)

        timeline = []
        for day in sorted(by_day):
            day_entries = by_day[day]
            total = sum(e.mood_score for e in day_entries)
            timeline.append({
                "date": day.isoformat(),
                "count": len(day_entries),
                "average_score": round(total / len(day_entries), 1),
            })

        total_entries = len(entries)
        average_score = (
            round(sum(e.mood_score for e in entries) / total_entries, 1)
            if total_entries else 0.0
        )

        most_frequent_mood = None
        if entries:
            # Counter keeps first-seen order on ties, so the earliest mood wins
            most_frequent_mood = Counter(e.mood for e in entries).most_common(1)[0][0]

        mood = get_mood_by_id(most_frequent_mood)
        stats = {
            "total_entries": total_entries,
            "average_score": average_score,
            "most_frequent_mood": most_frequent_mood,
            "most_frequent_mood_data": mood.to_dict() if mood else None,
            "daily_average": round(total_entries / days, 1),
            "mood_trend": get_mood_trend(average_score) if total_entries else None,
        }

        logger.debug(
            "Computed analytics",
            extra={"period": period, "total_entries": total_entries}
        )
        return {"period": period, "timeline": timeline, "stats": stats}
