"""
Helpdesk Time Window Resolver

Turns a time-range selection into a concrete [start, end) interval and
a bucket granularity.

Presets are fixed:
- day   -> last 7 calendar days ending today, daily buckets
- week  -> last 4 calendar weeks ending this week, weekly buckets
- month -> last 12 calendar months ending this month, monthly buckets
- custom -> caller dates, granularity chosen from the span
"""

import logging
from datetime import MAXYEAR, MINYEAR, date, datetime, timedelta
from typing import Optional

from ..config import Settings, get_settings
from ..models.metrics import Granularity, ResolvedWindow, TimeRange
from .calendar import BusinessCalendar


logger = logging.getLogger(__name__)

# Bucket and timezone arithmetic needs a year of headroom on either side.
EARLIEST_DATE = date(MINYEAR + 1, 1, 1)
LATEST_DATE = date(MAXYEAR - 1, 12, 31)


class InvalidRangeError(ValueError):
    """Raised when a custom range is missing a bound, ends before it starts,
    or falls outside the supported calendar."""
    pass


class TimeWindowResolver:
    """
    Resolves MetricsQuery ranges against a reference "now".

    Custom span is counted in calendar days, both ends inclusive:
    1 Jan to 31 Jan spans 31 days.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        calendar: Optional[BusinessCalendar] = None
    ):
        self.settings = settings or get_settings()
        self.calendar = calendar or BusinessCalendar(self.settings)

    def resolve(
        self,
        time_range: TimeRange,
        start: Optional[date] = None,
        end: Optional[date] = None,
        now: Optional[datetime] = None
    ) -> ResolvedWindow:
        if time_range == TimeRange.CUSTOM:
            return self._resolve_custom(start, end)

        today = self.calendar.today(now)

        if time_range == TimeRange.DAY:
            first_day = today - timedelta(days=self.settings.DAY_WINDOW_DAYS - 1)
            last_day = today + timedelta(days=1)
            granularity = Granularity.DAILY

        elif time_range == TimeRange.WEEK:
            current_week = self.calendar.week_start(today)
            first_day = current_week - timedelta(weeks=self.settings.WEEK_WINDOW_WEEKS - 1)
            last_day = current_week + timedelta(weeks=1)
            granularity = Granularity.WEEKLY

        else:  # MONTH
            current_month = self.calendar.month_start(today)
            first_day = self.calendar.add_months(
                current_month, -(self.settings.MONTH_WINDOW_MONTHS - 1)
            )
            last_day = self.calendar.add_months(current_month, 1)
            granularity = Granularity.MONTHLY

        return ResolvedWindow(
            start=self.calendar.start_of_day(first_day),
            end=self.calendar.start_of_day(last_day),
            granularity=granularity
        )

    def granularity_for_span(self, span_days: int) -> Granularity:
        if span_days <= self.settings.DAILY_MAX_SPAN_DAYS:
            return Granularity.DAILY
        if span_days <= self.settings.WEEKLY_MAX_SPAN_DAYS:
            return Granularity.WEEKLY
        return Granularity.MONTHLY

    def _resolve_custom(
        self,
        start: Optional[date],
        end: Optional[date]
    ) -> ResolvedWindow:
        if start is None or end is None:
            raise InvalidRangeError("Custom range requires both start and end dates.")

        if end < start:
            raise InvalidRangeError(
                f"Custom range ends ({end.isoformat()}) before it starts "
                f"({start.isoformat()})."
            )

        if start < EARLIEST_DATE or end > LATEST_DATE:
            raise InvalidRangeError(
                f"Custom range must lie between {EARLIEST_DATE.isoformat()} and "
                f"{LATEST_DATE.isoformat()}."
            )

        span_days = (end - start).days + 1
        granularity = self.granularity_for_span(span_days)
        logger.debug("Custom range %s..%s spans %d days -> %s",
                     start, end, span_days, granularity.value)

        return ResolvedWindow(
            start=self.calendar.start_of_day(start),
            end=self.calendar.start_of_day(end + timedelta(days=1)),
            granularity=granularity
        )
