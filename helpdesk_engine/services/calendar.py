"""
Helpdesk Calendar Helpers

Calendar-day, week and month boundaries in the configured timezone,
plus the per-locale conventions used for bucketing and labels.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from ..config import Settings, get_settings


@dataclass(frozen=True)
class LocaleConventions:
    first_weekday: int  # datetime.weekday() numbering, Monday == 0
    month_abbreviations: Tuple[str, ...]
    day_label: str = "{day:02d}/{month:02d}"


LOCALES = {
    "fr": LocaleConventions(
        first_weekday=0,
        month_abbreviations=(
            "janv.", "févr.", "mars", "avr.", "mai", "juin",
            "juil.", "août", "sept.", "oct.", "nov.", "déc.",
        ),
    ),
    "en": LocaleConventions(
        first_weekday=6,
        month_abbreviations=(
            "Jan", "Feb", "Mar", "Apr", "May", "Jun",
            "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
        ),
        day_label="{month:02d}/{day:02d}",
    ),
}


class BusinessCalendar:
    """
    Timezone and locale aware calendar arithmetic.

    All boundaries are returned as aware datetimes at local midnight so
    they compare correctly against ticket instants in any zone.
    """

    def __init__(self, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self.tz: tzinfo = ZoneInfo(settings.TIMEZONE)
        self.locale = LOCALES[settings.LOCALE]

    def today(self, now: Optional[datetime] = None) -> date:
        return self.localize(now).date()

    def localize(self, now: Optional[datetime] = None) -> datetime:
        if now is None:
            return datetime.now(self.tz)
        if now.tzinfo is None:
            return now.replace(tzinfo=self.tz)
        return now.astimezone(self.tz)

    def start_of_day(self, day: date) -> datetime:
        return datetime.combine(day, time.min, tzinfo=self.tz)

    def week_start(self, day: date) -> date:
        offset = (day.weekday() - self.locale.first_weekday) % 7
        return day - timedelta(days=offset)

    @staticmethod
    def month_start(day: date) -> date:
        return day.replace(day=1)

    @staticmethod
    def add_months(day: date, months: int) -> date:
        """Shift a first-of-month date by whole months."""
        index = day.year * 12 + (day.month - 1) + months
        return date(index // 12, index % 12 + 1, 1)

    # Labels

    def day_label(self, day: date) -> str:
        return self.locale.day_label.format(day=day.day, month=day.month)

    def month_label(self, day: date) -> str:
        return f"{self.locale.month_abbreviations[day.month - 1]} {day.year}"
