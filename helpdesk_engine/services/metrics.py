"""
Helpdesk Metrics Engine

Orchestrates window resolution, bucketing and resolution statistics
into one MetricsResult. Stateless: every call recomputes from the
supplied collections and has no side effects, so callers may run it on
every upstream data change.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional

from ..config import Settings, get_settings
from ..models.metrics import MetricsQuery, MetricsResult, MetricsSummary
from ..models.ticket import Ticket, User
from .buckets import BucketSeriesBuilder
from .calendar import BusinessCalendar
from .resolution import (
    ResolutionStatsCalculator,
    hours_to_days,
    percent,
    round_hours,
)
from .time_window import TimeWindowResolver


logger = logging.getLogger(__name__)


class MetricsEngine:
    """
    Computes ticket metrics for one query.

    InvalidRangeError from the resolver propagates unchanged; no partial
    result is produced for an invalid custom range.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.calendar = BusinessCalendar(self.settings)
        self.resolver = TimeWindowResolver(self.settings, self.calendar)
        self.buckets = BucketSeriesBuilder(calendar=self.calendar)
        self.resolution = ResolutionStatsCalculator()

    def compute(
        self,
        tickets: Iterable[Ticket],
        query: MetricsQuery,
        users: Iterable[User] = (),
        now: Optional[datetime] = None
    ) -> MetricsResult:
        tickets = list(tickets)
        window = self.resolver.resolve(query.time_range, query.start, query.end, now)

        series = self.buckets.build(window, tickets, query.type_filter)
        overall = self.resolution.overall_hours(tickets, query.type_filter)
        by_type = self.resolution.by_type(tickets, query.type_filter)
        by_assignee = self.resolution.by_assignee(
            tickets, users, window, query.type_filter
        )

        opened_total = sum(bucket.opened for bucket in series)
        closed_total = sum(bucket.closed for bucket in series)

        result = MetricsResult(
            window=window,
            type_filter=query.type_filter,
            series=series,
            overall_resolution_hours=round_hours(overall),
            by_type=by_type,
            by_assignee=by_assignee,
            summary=MetricsSummary(
                opened_total=opened_total,
                closed_total=closed_total,
                resolution_rate_percent=percent(closed_total, opened_total),
                overall_resolution_days=hours_to_days(overall)
            )
        )

        logger.info(
            "Computed metrics range=%s type=%s buckets=%d opened=%d closed=%d",
            query.time_range.value, getattr(query.type_filter, "value", query.type_filter),
            len(series), opened_total, closed_total
        )
        return result

    # =========================================================================
    # Export
    # =========================================================================

    @staticmethod
    def export_document(result: MetricsResult) -> Dict[str, Any]:
        """Lossless JSON-compatible document for file downloads."""
        return result.model_dump(mode="json")

    @staticmethod
    def export_filename(now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        return f"ticket-statistics-{now.strftime('%Y-%m-%d')}.json"
