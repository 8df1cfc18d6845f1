"""
Aggregation Engine

Computes dashboard summaries and daily rollups by scanning the session
store. Every call re-reads the store; nothing is cached.
"""

import logging
from collections import Counter, defaultdict
from datetime import date, datetime, time, timedelta
from typing import Callable, Dict, List, Optional

from .models import DailySummary, DashboardSummary, DeviceType, QuickStats, Session
from .recorder import local_now
from .session_store import SessionStore
from .validation import validate_window_days

logger = logging.getLogger(__name__)


def _local_date(ts: datetime) -> date:
    if ts.tzinfo is not None:
        ts = ts.astimezone()
    return ts.date()


def _top_pages(sessions: List[Session], limit: int) -> List[Dict[str, object]]:
    # Counter keeps insertion order and most_common() sorts stably,
    # so equal counts stay in first-seen order
    counter = Counter(pv.page for s in sessions for pv in s.page_views)
    return [{"page": page, "views": views} for page, views in counter.most_common(limit)]


def _conversion_rate(hires: int, visitors: int) -> float:
    if visitors == 0:
        return 0
    return round(hires / visitors * 100, 2)


class AggregationEngine:
    """Read-only roll-ups over session records."""

    def __init__(
        self,
        store: SessionStore,
        top_pages_limit: int = 10,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.top_pages_limit = top_pages_limit
        self.clock = clock or local_now

    def _sessions_since(self, start: datetime) -> List[Session]:
        return [s for s in self.store.list_sessions() if s.visit_date >= start]

    def compute_dashboard(self, window_days: int) -> DashboardSummary:
        """Summarize sessions that started within the last ``window_days`` days.

        Args:
            window_days: Size of the window in days, must be positive

        Returns:
            DashboardSummary for the window
        """
        window_days = validate_window_days(window_days)
        start = self.clock() - timedelta(days=window_days)
        sessions = self._sessions_since(start)

        summary = DashboardSummary(window_days=window_days)
        summary.total_visitors = len(sessions)
        summary.unique_visitors = len({s.ip_address for s in sessions})
        summary.hire_requests = sum(1 for s in sessions if s.hired_me)
        summary.newsletter_subscriptions = sum(1 for s in sessions if s.subscribed_newsletter)
        summary.contact_messages = sum(1 for s in sessions if s.contacted_me)
        summary.cv_downloads = sum(1 for s in sessions if s.downloaded_cv)
        summary.conversion_rate = _conversion_rate(summary.hire_requests, summary.total_visitors)

        device_counter = Counter(s.device for s in sessions)
        summary.device_breakdown = [
            {"device": device, "count": count} for device, count in device_counter.items()
        ]

        summary.top_pages = _top_pages(sessions, self.top_pages_limit)

        daily = defaultdict(list)
        for s in sessions:
            daily[_local_date(s.visit_date)].append(s)
        summary.daily_visitors = [
            {
                "date": day.isoformat(),
                "visitors": len(bucket),
                "uniqueVisitors": len({s.ip_address for s in bucket}),
            }
            for day, bucket in sorted(daily.items())
        ]

        logger.debug(f"Dashboard for {window_days}d: {summary.total_visitors} visitors")
        return summary

    def compute_quick_stats(self) -> QuickStats:
        """Today's visitors plus all-time headline counts."""
        now = self.clock()
        start_of_day = datetime.combine(_local_date(now), time.min)
        if now.tzinfo is not None:
            start_of_day = start_of_day.replace(tzinfo=now.astimezone().tzinfo)

        sessions = self.store.list_sessions()
        return QuickStats(
            today_visitors=sum(1 for s in sessions if s.visit_date >= start_of_day),
            total_visitors=len(sessions),
            total_hires=sum(1 for s in sessions if s.hired_me),
            total_newsletter_subscriptions=sum(1 for s in sessions if s.subscribed_newsletter),
        )

    # =====================
    # Daily rollups
    # =====================

    def compute_daily_summary(self, day: date) -> DailySummary:
        """Aggregate all sessions whose visit falls on ``day`` (local date)."""
        sessions = [s for s in self.store.list_sessions() if _local_date(s.visit_date) == day]

        summary = DailySummary(date=day, generated_at=self.clock())
        summary.total_visitors = len(sessions)
        summary.unique_visitors = len({s.ip_address for s in sessions})
        summary.total_page_views = sum(len(s.page_views) for s in sessions)
        if sessions:
            summary.average_time_spent = round(
                sum(s.total_time_spent for s in sessions) / len(sessions), 2
            )
        summary.hire_requests = sum(1 for s in sessions if s.hired_me)
        summary.newsletter_subscriptions = sum(1 for s in sessions if s.subscribed_newsletter)
        summary.contact_messages = sum(1 for s in sessions if s.contacted_me)
        summary.cv_downloads = sum(1 for s in sessions if s.downloaded_cv)
        summary.top_pages = _top_pages(sessions, self.top_pages_limit)

        referrers = Counter(s.referrer for s in sessions if s.referrer)
        summary.top_referrers = [
            {"referrer": ref, "count": count} for ref, count in referrers.most_common(self.top_pages_limit)
        ]

        breakdown = {d.value: 0 for d in DeviceType}
        for s in sessions:
            breakdown[s.device] = breakdown.get(s.device, 0) + 1
        summary.device_breakdown = breakdown

        return summary

    def materialize_daily_summary(self, day: date) -> DailySummary:
        """Compute the rollup for ``day`` and overwrite the stored copy."""
        summary = self.compute_daily_summary(day)
        self.store.save_daily_summary(summary)
        logger.info(f"Materialized daily summary {day}: {summary.total_visitors} visitors")
        return summary

    def materialize_range(self, days: int) -> List[DailySummary]:
        """Roll up the last ``days`` local dates, oldest first, today included."""
        days = validate_window_days(days)
        today = _local_date(self.clock())
        return [
            self.materialize_daily_summary(today - timedelta(days=offset))
            for offset in range(days - 1, -1, -1)
        ]
