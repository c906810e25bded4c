"""
In-Memory Repository Implementations

Process-local stand-ins for the external stores. Used by the API when no
other backend is wired in, and by the tests.
"""

import asyncio
from typing import Dict, Iterable, List, Optional

from ..models.notification import NotificationLedger
from ..models.ticket import PersonalTask, Ticket, User


class MemoryTicketRepository:
    """Ticket list keyed by id."""

    def __init__(self, tickets: Iterable[Ticket] = ()):
        self._storage: Dict[str, Ticket] = {t.id: t for t in tickets}

    async def list(self) -> List[Ticket]:
        return list(self._storage.values())


class MemoryTaskRepository:
    """Personal tasks, listed per owner."""

    def __init__(self, tasks: Iterable[PersonalTask] = ()):
        self._storage: Dict[str, PersonalTask] = {t.id: t for t in tasks}

    async def list(self, owner_id: str) -> List[PersonalTask]:
        return [t for t in self._storage.values() if t.created_by == owner_id]


class MemoryUserDirectory:
    def __init__(self, users: Iterable[User] = ()):
        self._users: List[User] = list(users)

    async def list(self) -> List[User]:
        return list(self._users)


class MemoryLedgerRepository:
    """
    Ledger storage holding JSON snapshots.

    Snapshots keep stored state independent from the objects a caller
    goes on mutating after put().
    """

    def __init__(self):
        self._storage: Dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def get(self, user_id: str) -> Optional[NotificationLedger]:
        raw = self._storage.get(user_id)
        if raw is None:
            return None
        return NotificationLedger.model_validate_json(raw)

    async def put(self, user_id: str, ledger: NotificationLedger) -> None:
        async with self._lock:
            self._storage[user_id] = ledger.model_dump_json()

    async def clear(self) -> None:
        """Clear all data (for testing)"""
        async with self._lock:
            self._storage.clear()
