"""
Helpdesk Bucket Series Builder

Partitions a resolved window into calendar sub-periods and counts the
tickets opened and closed in each.

Sub-period boundaries come from the calendar (start of day, week or
month), not from equal-width slices of the window. A weekly window that
starts mid-week still gets buckets aligned to calendar weeks; the first
and last bucket are clipped to the window so every instant inside the
window belongs to exactly one bucket.
"""

import logging
from datetime import date, timedelta
from typing import Iterable, Iterator, List, Optional, Tuple

from ..config import Settings
from ..models.metrics import (
    ALL_TYPES,
    Granularity,
    PeriodBucket,
    ResolvedWindow,
    TypeFilter,
    matches_type,
)
from ..models.ticket import Ticket
from .calendar import BusinessCalendar


logger = logging.getLogger(__name__)


class BucketSeriesBuilder:
    """
    Builds the opened/closed time series.

    Tickets are scanned once per bucket; the data volumes of a single
    helpdesk keep this well within budget.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        calendar: Optional[BusinessCalendar] = None
    ):
        self.calendar = calendar or BusinessCalendar(settings)

    def build(
        self,
        window: ResolvedWindow,
        tickets: Iterable[Ticket],
        type_filter: TypeFilter = ALL_TYPES
    ) -> List[PeriodBucket]:
        matching = [t for t in tickets if matches_type(t, type_filter)]
        buckets = []

        for period_start, period_end in self.iter_periods(window):
            sub_start = max(self.calendar.start_of_day(period_start), window.start)
            sub_end = min(self.calendar.start_of_day(period_end), window.end)

            opened = sum(
                1 for t in matching
                if sub_start <= t.created_at < sub_end
            )
            closed = sum(
                1 for t in matching
                if t.is_resolved and sub_start <= t.updated_at < sub_end
            )

            buckets.append(PeriodBucket(
                label=self.label(period_start, window.granularity),
                start=sub_start,
                end=sub_end,
                opened=opened,
                closed=closed
            ))

        logger.debug("Built %d %s buckets over %d tickets",
                     len(buckets), window.granularity.value, len(matching))
        return buckets

    def iter_periods(self, window: ResolvedWindow) -> Iterator[Tuple[date, date]]:
        """
        Yield (calendar_start, calendar_end) date pairs, end exclusive,
        for every period that overlaps the window.
        """
        first_day = window.start.astimezone(self.calendar.tz).date()
        last_day = window.end.astimezone(self.calendar.tz).date()
        if window.end.astimezone(self.calendar.tz) > self.calendar.start_of_day(last_day):
            last_day += timedelta(days=1)

        cursor = self._period_start(first_day, window.granularity)
        while cursor < last_day:
            following = self._next_period(cursor, window.granularity)
            yield cursor, following
            cursor = following

    def label(self, period_start: date, granularity: Granularity) -> str:
        if granularity == Granularity.MONTHLY:
            return self.calendar.month_label(period_start)
        return self.calendar.day_label(period_start)

    def _period_start(self, day: date, granularity: Granularity) -> date:
        if granularity == Granularity.WEEKLY:
            return self.calendar.week_start(day)
        if granularity == Granularity.MONTHLY:
            return self.calendar.month_start(day)
        return day

    def _next_period(self, period_start: date, granularity: Granularity) -> date:
        if granularity == Granularity.WEEKLY:
            return period_start + timedelta(weeks=1)
        if granularity == Granularity.MONTHLY:
            return self.calendar.add_months(period_start, 1)
        return period_start + timedelta(days=1)
