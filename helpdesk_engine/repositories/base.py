"""
Collaborator Interfaces

The engine reads tickets, tasks and users from external stores and keeps
one notification ledger per user in a key-scoped persistence facility.
Only the shapes the engine relies on are declared here.
"""

from typing import List, Optional, Protocol

from ..models.notification import NotificationLedger
from ..models.ticket import PersonalTask, Ticket, User


class TicketRepository(Protocol):
    async def list(self) -> List[Ticket]:
        ...


class TaskRepository(Protocol):
    async def list(self, owner_id: str) -> List[PersonalTask]:
        ...


class UserDirectory(Protocol):
    async def list(self) -> List[User]:
        ...


class LedgerRepository(Protocol):
    """
    Per-user ledger storage.

    Must support read-your-writes within one process. get() returns None
    when the user has no ledger yet.
    """

    async def get(self, user_id: str) -> Optional[NotificationLedger]:
        ...

    async def put(self, user_id: str, ledger: NotificationLedger) -> None:
        ...
