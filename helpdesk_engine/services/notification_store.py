"""
Helpdesk Notification Store

Owns one user's notification ledger: merges synthesized events,
tracks what was already notified, and exposes read/clear operations.

Persistence rules:
- A missing or unreadable ledger is an empty ledger, never an error
- A failed write keeps the in-memory change for this session and is
  reported through the return value (persisted=False)
- Concurrent sessions for one user are last-write-wins
"""

import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from ..config import Settings
from ..models.notification import NotificationEvent, NotificationLedger
from ..models.ticket import PersonalTask, Ticket
from ..repositories.base import LedgerRepository
from .notifications import LedgerDelta, NotificationSynthesizer, merge_ledger


logger = logging.getLogger(__name__)


class NotificationStore:
    """
    Notification feed for a single user.

    The ledger is loaded lazily on first use and then kept in memory for
    the lifetime of the store; every mutation writes it back through the
    ledger repository.

    clear_all() resets seen_task_ids but keeps seen_ticket_ids: a task
    stays due every day it remains open, while an assignment happens once.
    """

    def __init__(
        self,
        user_id: str,
        ledger_repo: LedgerRepository,
        synthesizer: Optional[NotificationSynthesizer] = None,
        settings: Optional[Settings] = None
    ):
        self.user_id = user_id
        self.ledger_repo = ledger_repo
        self.synthesizer = synthesizer or NotificationSynthesizer(settings)
        self._ledger: Optional[NotificationLedger] = None

    async def refresh(
        self,
        tickets: Iterable[Ticket],
        tasks: Iterable[PersonalTask],
        now: Optional[datetime] = None
    ) -> LedgerDelta:
        """
        Synthesize, merge, clean stale references and persist.

        Safe to call on every upstream change: a second call over the
        same inputs adds nothing.
        """
        tickets = list(tickets)
        ledger = await self._load()

        candidates = self.synthesizer.synthesize(
            self.user_id, tickets, tasks, ledger, now
        )
        delta = merge_ledger(ledger, candidates, tickets)
        self._ledger = delta.ledger

        if delta.added or delta.removed_ids:
            logger.info(
                "Notifications for %s: %d added, %d stale removed",
                self.user_id, len(delta.added), len(delta.removed_ids)
            )

        delta.persisted = await self._persist()
        return delta

    async def mark_read(self, event_id: str) -> bool:
        ledger = await self._load()
        for event in ledger.events:
            if event.id == event_id:
                event.is_read = True
                return await self._persist()
        logger.debug("mark_read: no event %s for %s", event_id, self.user_id)
        return True

    async def mark_all_read(self) -> bool:
        ledger = await self._load()
        for event in ledger.events:
            event.is_read = True
        return await self._persist()

    async def clear(self, event_id: str) -> bool:
        ledger = await self._load()
        remaining = [e for e in ledger.events if e.id != event_id]
        if len(remaining) == len(ledger.events):
            return True
        ledger.events = remaining
        return await self._persist()

    async def clear_all(self) -> bool:
        ledger = await self._load()
        ledger.events = []
        ledger.seen_task_ids = set()
        return await self._persist()

    async def unread_count(self) -> int:
        ledger = await self._load()
        return ledger.unread_count

    async def events(self) -> List[NotificationEvent]:
        """Events newest first."""
        ledger = await self._load()
        return sorted(ledger.events, key=lambda e: e.created_at, reverse=True)

    async def ledger(self) -> NotificationLedger:
        return await self._load()

    # =========================================================================
    # Private methods
    # =========================================================================

    async def _load(self) -> NotificationLedger:
        if self._ledger is not None:
            return self._ledger

        stored = None
        try:
            stored = await self.ledger_repo.get(self.user_id)
        except Exception:
            logger.warning(
                "Ledger read failed for %s, starting from an empty ledger",
                self.user_id, exc_info=True
            )

        if stored is None or stored.user_id != self.user_id:
            stored = NotificationLedger(user_id=self.user_id)

        self._ledger = stored
        return self._ledger

    async def _persist(self) -> bool:
        ledger = self._ledger
        ledger.updated_at = datetime.now(timezone.utc)
        try:
            await self.ledger_repo.put(self.user_id, ledger)
        except Exception:
            logger.error(
                "Ledger write failed for %s; change kept for this session only",
                self.user_id, exc_info=True
            )
            return False
        return True
