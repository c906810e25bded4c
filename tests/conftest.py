"""
Pytest Configuration and Shared Fixtures

Builds tickets, tasks and users relative to a fixed reference instant so
calendar-dependent assertions do not drift with the wall clock.
"""
import os
import sys
from datetime import date, datetime, timedelta, timezone
from itertools import count

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from helpdesk_engine.config import Settings
from helpdesk_engine.models import (
    PersonalTask,
    TaskStatus,
    Ticket,
    TicketStatus,
    TicketType,
    User,
)


# Wednesday
NOW = datetime(2024, 5, 15, 10, 0, tzinfo=timezone.utc)
TODAY = date(2024, 5, 15)


def utc(year, month, day, hour=0, minute=0):
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


_ticket_numbers = count(1)


def make_ticket(
    ticket_id,
    created_at,
    updated_at=None,
    status=TicketStatus.OPEN,
    type=TicketType.TECHNICAL_SUPPORT,
    assigned_to=None,
    created_by="creator",
    title=None,
    subscriber_id=None,
):
    return Ticket(
        id=ticket_id,
        ticket_number=next(_ticket_numbers),
        title=title or f"Ticket {ticket_id}",
        type=type,
        status=status,
        created_at=created_at,
        updated_at=updated_at or created_at,
        assigned_to=assigned_to,
        created_by=created_by,
        subscriber_id=subscriber_id,
    )


def make_closed(ticket_id, created_at, hours, **kwargs):
    return make_ticket(
        ticket_id,
        created_at,
        updated_at=created_at + timedelta(hours=hours),
        status=TicketStatus.CLOSED,
        **kwargs,
    )


def make_task(
    task_id,
    owner,
    due_date=TODAY,
    status=TaskStatus.PENDING,
    title=None,
    ticket_id=None,
):
    return PersonalTask(
        id=task_id,
        title=f"Task {task_id}" if title is None else title,
        ticket_id=ticket_id,
        due_date=due_date,
        status=status,
        created_by=owner,
    )


@pytest.fixture
def settings():
    """UTC calendar with French conventions (weeks start on Monday)"""
    return Settings(TIMEZONE="UTC", LOCALE="fr")


@pytest.fixture
def en_settings():
    """UTC calendar with English conventions (weeks start on Sunday)"""
    return Settings(TIMEZONE="UTC", LOCALE="en")


@pytest.fixture
def users():
    return [
        User(id="alice", name="Alice Martin"),
        User(id="bob", name="Bob Durand"),
        User(id="carol", name="Carol Petit"),
    ]
