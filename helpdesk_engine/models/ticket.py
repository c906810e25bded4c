"""
Helpdesk Ticket Models

Read-only views of the records owned by external collaborators:
- Ticket (ticket repository)
- PersonalTask (task repository)
- User (user/contact directory)

The engine never mutates these. Timestamps are timezone-aware instants;
naive values coming from a store are read as UTC.
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator


# =============================================================================
# ENUMS
# =============================================================================

class TicketType(str, Enum):
    TECHNICAL_SUPPORT = "technical_support"
    COLLECTIONS = "collections"
    INSTALLER_COMPLAINT = "installer_complaint"
    BILLING_CHANGE = "billing_change"          # Direct debit date / bank details
    EARLY_TERMINATION = "early_termination"    # Or contract transfer
    CONTRACT_ADDITION = "contract_addition"


class TicketStatus(str, Enum):
    NEW = "new"
    OPEN = "open"
    WAITING_CUSTOMER = "waiting_customer"
    WAITING_INSTALLER = "waiting_installer"
    WAITING_TECHNICAL = "waiting_technical"
    CLOSED = "closed"  # Only terminal state for resolution time


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Origin(str, Enum):
    INSTALLER = "installer"
    COMPANY = "company"
    SUBSCRIBER = "subscriber"


class Channel(str, Enum):
    EMAIL = "email"
    PHONE = "phone"
    CONTACT_FORM = "contact_form"
    SUBSCRIBER_PORTAL = "subscriber_portal"
    MOBILE_APP = "mobile_app"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


CLOSED_TASK_STATUSES = frozenset({TaskStatus.COMPLETED, TaskStatus.CANCELLED})


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# =============================================================================
# CORE MODELS
# =============================================================================

class Ticket(BaseModel):
    """
    A support ticket as supplied by the ticket repository.

    A ticket is resolved iff its status is CLOSED. Its resolution
    duration is updated_at - created_at, defined only when resolved.
    """
    id: str
    ticket_number: int = Field(..., ge=0, description="Sequential display number")

    title: str
    description: str = ""
    type: TicketType
    status: TicketStatus = TicketStatus.NEW
    priority: Priority = Priority.MEDIUM
    origin: Origin = Origin.SUBSCRIBER
    channel: Channel = Channel.EMAIL

    created_at: datetime
    updated_at: datetime

    assigned_to: Optional[str] = None
    created_by: str
    subscriber_id: Optional[str] = None

    @field_validator("created_at", "updated_at")
    @classmethod
    def _aware(cls, v: datetime) -> datetime:
        return ensure_aware(v)

    @model_validator(mode="after")
    def _updated_after_created(self) -> "Ticket":
        if self.updated_at < self.created_at:
            raise ValueError(
                f"Ticket {self.id}: updated_at precedes created_at."
            )
        return self

    @property
    def is_resolved(self) -> bool:
        return self.status == TicketStatus.CLOSED

    @property
    def resolution_hours(self) -> Optional[float]:
        """Full-precision hours from creation to close, None if open."""
        if not self.is_resolved:
            return None
        return (self.updated_at - self.created_at).total_seconds() / 3600


class PersonalTask(BaseModel):
    """
    Personal to-do owned by one user, optionally linked to a ticket.

    Due dates are calendar dates with no time component.
    """
    id: str
    title: str
    description: str = ""
    due_date: date
    status: TaskStatus = TaskStatus.PENDING
    priority: Priority = Priority.MEDIUM

    created_by: str  # Owner
    ticket_id: Optional[str] = None

    def is_actionable_on(self, day: date) -> bool:
        return self.due_date == day and self.status not in CLOSED_TASK_STATUSES


# =============================================================================
# SUPPORTING MODELS
# =============================================================================

class User(BaseModel):
    """Roster entry from the user directory."""
    id: str
    name: str
    email: Optional[str] = None
