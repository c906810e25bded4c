"""
Helpdesk Notification Models

Notification events and the per-user ledger that tracks them.

Event ids are derived from the source entity, never from time, so
synthesizing twice over the same inputs cannot create a duplicate.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Set

from pydantic import BaseModel, Field, field_validator

from .ticket import ensure_aware


class NotificationKind(str, Enum):
    ASSIGNMENT = "assignment"  # Ticket newly assigned to the user
    TASK_DUE = "task_due"      # Personal task due today


def assignment_event_id(ticket_id: str) -> str:
    return f"assignment:{ticket_id}"


def task_event_id(task_id: str) -> str:
    return f"task:{task_id}"


class NotificationEvent(BaseModel):
    """
    One entry of a user's notification feed.

    Created once per (user, source entity); mutated only by
    mark-read; removed by clear or when its ticket disappears.
    """
    id: str
    kind: NotificationKind

    ticket_id: str = ""  # Empty for task events
    ticket_number: int = 0  # Linked ticket number for task events, 0 if none
    task_id: Optional[str] = None
    linked_ticket_id: Optional[str] = None  # Task events only
    subscriber: str = ""

    title: str
    message: str
    is_read: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("created_at")
    @classmethod
    def _aware(cls, v: datetime) -> datetime:
        return ensure_aware(v)


class NotificationLedger(BaseModel):
    """
    Persisted notification state for one user.

    seen_ticket_ids is permanent; seen_task_ids is reset by a full
    clear so tasks still due today can surface again.
    """
    user_id: str
    events: List[NotificationEvent] = Field(default_factory=list)
    seen_ticket_ids: Set[str] = Field(default_factory=set)
    seen_task_ids: Set[str] = Field(default_factory=set)
    updated_at: Optional[datetime] = None

    @property
    def unread_count(self) -> int:
        return sum(1 for event in self.events if not event.is_read)
