"""
Helpdesk Engine Models

Tickets, tasks and users (read-only), metrics queries/results,
notification events and ledgers.
"""

from .ticket import (
    # Enums
    TicketType,
    TicketStatus,
    Priority,
    Origin,
    Channel,
    TaskStatus,

    # Collaborator records
    Ticket,
    PersonalTask,
    User,
)
from .metrics import (
    ALL_TYPES,
    TypeFilter,
    TimeRange,
    Granularity,
    MetricsQuery,
    ResolvedWindow,
    PeriodBucket,
    TypeResolution,
    AssigneeStats,
    MetricsSummary,
    MetricsResult,
)
from .notification import (
    NotificationKind,
    NotificationEvent,
    NotificationLedger,
)

__all__ = [
    "TicketType", "TicketStatus", "Priority", "Origin", "Channel", "TaskStatus",
    "Ticket", "PersonalTask", "User",
    "ALL_TYPES", "TypeFilter", "TimeRange", "Granularity", "MetricsQuery",
    "ResolvedWindow", "PeriodBucket", "TypeResolution", "AssigneeStats",
    "MetricsSummary", "MetricsResult",
    "NotificationKind", "NotificationEvent", "NotificationLedger",
]
