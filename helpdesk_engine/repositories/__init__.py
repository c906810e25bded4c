"""
Helpdesk Engine Repositories

Collaborator interfaces and their in-memory implementations.
"""

from .base import TicketRepository, TaskRepository, UserDirectory, LedgerRepository
from .memory import (
    MemoryTicketRepository,
    MemoryTaskRepository,
    MemoryUserDirectory,
    MemoryLedgerRepository,
)

__all__ = [
    "TicketRepository", "TaskRepository", "UserDirectory", "LedgerRepository",
    "MemoryTicketRepository", "MemoryTaskRepository", "MemoryUserDirectory",
    "MemoryLedgerRepository",
]
