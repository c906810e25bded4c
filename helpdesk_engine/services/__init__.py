"""
Helpdesk Engine Services

Ticket metrics pipeline and per-user notification feed.
"""

from .calendar import BusinessCalendar
from .time_window import TimeWindowResolver, InvalidRangeError
from .buckets import BucketSeriesBuilder
from .resolution import ResolutionStatsCalculator
from .metrics import MetricsEngine
from .notifications import NotificationSynthesizer, LedgerDelta, merge_ledger
from .notification_store import NotificationStore

__all__ = [
    # Metrics
    "BusinessCalendar",
    "TimeWindowResolver", "InvalidRangeError",
    "BucketSeriesBuilder",
    "ResolutionStatsCalculator",
    "MetricsEngine",

    # Notifications
    "NotificationSynthesizer", "LedgerDelta", "merge_ledger",
    "NotificationStore",
]
