"""
Helpdesk Notification Synthesizer

Derives candidate notification events from two signals:
1. Tickets assigned to the current user that were never notified
2. Personal tasks of the current user that are actionable today

Pure: no I/O and no state between calls. Merging, dedup-set updates and
persistence belong to the NotificationStore.
"""

from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Set

from pydantic import BaseModel, Field

from ..config import Settings
from ..models.notification import (
    NotificationEvent,
    NotificationKind,
    NotificationLedger,
    assignment_event_id,
    task_event_id,
)
from ..models.ticket import PersonalTask, Ticket
from .calendar import BusinessCalendar


UNKNOWN_SUBSCRIBER = "Unknown customer"
PERSONAL_TASK = "Personal task"
UNTITLED_TASK = "Untitled task"


class NotificationSynthesizer:
    """
    Maps source entities to notification events.

    Event ids depend only on the source entity, so running synthesis
    twice over the same inputs yields the same ids.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        calendar: Optional[BusinessCalendar] = None
    ):
        self.calendar = calendar or BusinessCalendar(settings)

    def synthesize(
        self,
        user_id: str,
        tickets: Iterable[Ticket],
        tasks: Iterable[PersonalTask],
        ledger: NotificationLedger,
        now: Optional[datetime] = None
    ) -> List[NotificationEvent]:
        now = self.calendar.localize(now or datetime.now(timezone.utc))
        today = now.date()
        tickets = list(tickets)
        numbers: Dict[str, int] = {t.id: t.ticket_number for t in tickets}

        events = [
            self.assignment_event(ticket, now)
            for ticket in tickets
            if ticket.assigned_to == user_id
            and ticket.id not in ledger.seen_ticket_ids
        ]
        events.extend(
            self.task_event(task, now, numbers.get(task.ticket_id, 0))
            for task in tasks
            if task.created_by == user_id
            and task.is_actionable_on(today)
            and task.id not in ledger.seen_task_ids
        )
        return events

    @staticmethod
    def assignment_event(ticket: Ticket, now: datetime) -> NotificationEvent:
        return NotificationEvent(
            id=assignment_event_id(ticket.id),
            kind=NotificationKind.ASSIGNMENT,
            ticket_id=ticket.id,
            ticket_number=ticket.ticket_number,
            subscriber=ticket.subscriber_id or UNKNOWN_SUBSCRIBER,
            title=ticket.title,
            message=f"New ticket assigned: {ticket.title}",
            created_at=now
        )

    @staticmethod
    def task_event(
        task: PersonalTask,
        now: datetime,
        ticket_number: int = 0
    ) -> NotificationEvent:
        """
        Task events link to their ticket through linked_ticket_id only, so
        stale-ticket cleanup never touches them.
        """
        title = task.title or UNTITLED_TASK
        return NotificationEvent(
            id=task_event_id(task.id),
            kind=NotificationKind.TASK_DUE,
            task_id=task.id,
            linked_ticket_id=task.ticket_id,
            ticket_number=ticket_number,
            subscriber=PERSONAL_TASK,
            title=title,
            message=f"Task due today: {title}",
            created_at=now
        )


# =============================================================================
# LEDGER MERGE
# =============================================================================

class LedgerDelta(BaseModel):
    """Outcome of one refresh: the new ledger and what changed."""
    ledger: NotificationLedger
    added: List[NotificationEvent] = Field(default_factory=list)
    removed_ids: List[str] = Field(default_factory=list)
    persisted: bool = True

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed_ids)


def merge_ledger(
    ledger: NotificationLedger,
    candidates: Iterable[NotificationEvent],
    tickets: Iterable[Ticket]
) -> LedgerDelta:
    """
    Fold freshly synthesized events into a ledger copy.

    - Appends candidates whose id is not already present
    - Marks their source ids as seen
    - Drops events whose ticket no longer exists; task events carry no
      ticket id and are never dropped here
    """
    merged = ledger.model_copy(deep=True)
    existing_ids: Set[str] = {event.id for event in merged.events}
    live_ticket_ids: Set[str] = {ticket.id for ticket in tickets}

    added = []
    for event in candidates:
        if event.kind == NotificationKind.ASSIGNMENT:
            merged.seen_ticket_ids.add(event.ticket_id)
        elif event.task_id is not None:
            merged.seen_task_ids.add(event.task_id)

        if event.id in existing_ids:
            continue
        existing_ids.add(event.id)
        merged.events.append(event)
        added.append(event)

    removed_ids = [
        event.id for event in merged.events
        if event.ticket_id and event.ticket_id not in live_ticket_ids
    ]
    if removed_ids:
        stale = set(removed_ids)
        merged.events = [e for e in merged.events if e.id not in stale]

    return LedgerDelta(ledger=merged, added=added, removed_ids=removed_ids)
