"""
Helpdesk Resolution Statistics

Resolution-time figures for closed tickets:
- Overall mean resolution hours
- Mean hours and count per ticket type
- Per-assignee workload, closures and resolution rate

Grouping is two-pass: accumulate into a mapping keyed by group, then
materialize sorted rows. Hours accumulate in full precision and are
rounded to one decimal only when result rows are built.
"""

import logging
import math
from typing import Dict, Iterable, List

from ..models.metrics import (
    ALL_TYPES,
    AssigneeStats,
    ResolvedWindow,
    TypeFilter,
    TypeResolution,
    matches_type,
)
from ..models.ticket import Ticket, TicketType, User


logger = logging.getLogger(__name__)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like a spreadsheet does: halves go away from zero."""
    factor = 10 ** digits
    return math.floor(abs(value) * factor + 0.5) / factor * (1 if value >= 0 else -1)


def round_hours(hours: float) -> float:
    return round_half_up(hours, 1)


def hours_to_days(hours: float) -> float:
    return round_half_up(hours / 24, 1)


def percent(part: int, whole: int) -> int:
    if whole == 0:
        return 0
    return int(round_half_up(100 * part / whole))


class _Accumulator:
    """Running sum and count of resolution hours for one group."""

    __slots__ = ("total_hours", "count")

    def __init__(self):
        self.total_hours = 0.0
        self.count = 0

    def add(self, hours: float) -> None:
        self.total_hours += hours
        self.count += 1

    @property
    def mean(self) -> float:
        return self.total_hours / self.count if self.count else 0.0


class ResolutionStatsCalculator:
    """
    Computes resolution statistics from a ticket collection.

    Overall and per-type figures cover every resolved ticket matching the
    type filter. Per-assignee figures are scoped to tickets created inside
    the active window, and produce one row per roster user even when that
    user has no activity.
    """

    def overall_hours(
        self,
        tickets: Iterable[Ticket],
        type_filter: TypeFilter = ALL_TYPES
    ) -> float:
        acc = _Accumulator()
        for ticket in tickets:
            if ticket.is_resolved and matches_type(ticket, type_filter):
                acc.add(ticket.resolution_hours)
        return acc.mean

    def by_type(
        self,
        tickets: Iterable[Ticket],
        type_filter: TypeFilter = ALL_TYPES
    ) -> List[TypeResolution]:
        # Pass 1: accumulate, keeping first-seen group order
        groups: Dict[TicketType, _Accumulator] = {}
        for ticket in tickets:
            if not (ticket.is_resolved and matches_type(ticket, type_filter)):
                continue
            groups.setdefault(ticket.type, _Accumulator()).add(ticket.resolution_hours)

        # Pass 2: materialize, stable on equal means
        ordered = sorted(groups.items(), key=lambda item: item[1].mean, reverse=True)
        return [
            TypeResolution(
                type=ticket_type,
                average_resolution_hours=round_hours(acc.mean),
                average_resolution_days=hours_to_days(acc.mean),
                count=acc.count
            )
            for ticket_type, acc in ordered
        ]

    def by_assignee(
        self,
        tickets: Iterable[Ticket],
        users: Iterable[User],
        window: ResolvedWindow,
        type_filter: TypeFilter = ALL_TYPES
    ) -> List[AssigneeStats]:
        roster = list(users)
        created: Dict[str, int] = {user.id: 0 for user in roster}
        assigned: Dict[str, int] = {user.id: 0 for user in roster}
        closed: Dict[str, _Accumulator] = {user.id: _Accumulator() for user in roster}

        for ticket in tickets:
            if not (window.contains(ticket.created_at) and matches_type(ticket, type_filter)):
                continue

            if ticket.created_by in created:
                created[ticket.created_by] += 1

            if ticket.assigned_to in assigned:
                assigned[ticket.assigned_to] += 1
                if ticket.is_resolved:
                    closed[ticket.assigned_to].add(ticket.resolution_hours)

        rows = [
            AssigneeStats(
                user_id=user.id,
                name=user.name,
                created_count=created[user.id],
                assigned_count=assigned[user.id],
                closed_count=closed[user.id].count,
                average_resolution_hours=round_hours(closed[user.id].mean),
                resolution_rate_percent=percent(closed[user.id].count, assigned[user.id])
            )
            for user in roster
        ]
        rows.sort(key=lambda row: row.closed_count, reverse=True)

        logger.debug("Computed assignee stats for %d users", len(rows))
        return rows
