"""
Helpdesk Metrics Models

Query and result shapes for the metrics pipeline. Results are plain
pydantic documents so they serialize losslessly for export.
"""

from datetime import date, datetime
from enum import Enum
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field

from .ticket import Ticket, TicketType


ALL_TYPES = "all"

TypeFilter = Union[TicketType, Literal["all"]]


def matches_type(ticket: Ticket, type_filter: TypeFilter) -> bool:
    return type_filter == ALL_TYPES or ticket.type == type_filter


# =============================================================================
# ENUMS
# =============================================================================

class TimeRange(str, Enum):
    DAY = "day"        # Last 7 days, daily buckets
    WEEK = "week"      # Last 4 weeks, weekly buckets
    MONTH = "month"    # Last 12 months, monthly buckets
    CUSTOM = "custom"  # Caller dates, adaptive buckets


class Granularity(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


# =============================================================================
# QUERY
# =============================================================================

class MetricsQuery(BaseModel):
    """One metrics request. Dates are only read for CUSTOM ranges."""
    time_range: TimeRange = TimeRange.MONTH
    start: Optional[date] = None
    end: Optional[date] = None
    type_filter: TypeFilter = ALL_TYPES


class ResolvedWindow(BaseModel):
    """Concrete half-open interval [start, end) and its bucket size."""
    start: datetime
    end: datetime
    granularity: Granularity

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end


# =============================================================================
# RESULT
# =============================================================================

class PeriodBucket(BaseModel):
    label: str
    start: datetime
    end: datetime
    opened: int = 0
    closed: int = 0


class TypeResolution(BaseModel):
    type: TicketType
    average_resolution_hours: float
    average_resolution_days: float
    count: int


class AssigneeStats(BaseModel):
    user_id: str
    name: str
    created_count: int = 0
    assigned_count: int = 0
    closed_count: int = 0
    average_resolution_hours: float = 0.0
    resolution_rate_percent: int = 0


class MetricsSummary(BaseModel):
    """Headline figures shown above the charts."""
    opened_total: int = 0
    closed_total: int = 0
    resolution_rate_percent: int = 0
    overall_resolution_days: float = 0.0


class MetricsResult(BaseModel):
    window: ResolvedWindow
    type_filter: TypeFilter = ALL_TYPES
    series: List[PeriodBucket] = Field(default_factory=list)
    overall_resolution_hours: float = 0.0
    by_type: List[TypeResolution] = Field(default_factory=list)
    by_assignee: List[AssigneeStats] = Field(default_factory=list)
    summary: MetricsSummary = Field(default_factory=MetricsSummary)
