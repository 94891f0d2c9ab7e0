"""
Discovery state: the signed-in user's discovered treasures.

Writes are pessimistic. A request is issued, awaited, and only a confirmed
result changes local state, so a failed write never needs rolling back.

Calls for the same treasure id are serialized through a per-id lock. A
rapid double click therefore issues one insert; the second call finds the
treasure already present and returns without writing.
"""

import asyncio
import logging
from enum import Enum
from typing import Dict, List, Optional

from .errors import BackendError
from .models import Treasure, UserIdentity
from .notifications import Notifier
from .session import SessionContext

logger = logging.getLogger(__name__)


class DiscoveryOutcome(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    AUTH_REQUIRED = "authentication_required"
    ALREADY_DISCOVERED = "already_discovered"
    NOT_DISCOVERED = "not_discovered"
    FAILED = "failed"
    SUPERSEDED = "superseded"

    @property
    def ok(self) -> bool:
        return self in (DiscoveryOutcome.ADDED, DiscoveryOutcome.REMOVED)


class DiscoveryState:
    """Keeps the discovered set consistent with the store.

    The state follows the session context: a sign-in triggers a load, a
    sign-out clears the set immediately without touching the store, and a
    switch to another user clears the set before that user's load starts.
    If a user is already signed in at construction, their load is scheduled
    straight away.

    A write that completes after the signed-in user changed is still in the
    store, but it no longer describes this set; add and remove report it as
    SUPERSEDED and leave local state alone.
    """

    def __init__(self, store, session: SessionContext, notifier: Notifier):
        self._store = store
        self._session = session
        self._notifier = notifier
        self._discovered: List[Treasure] = []
        self._locks: Dict[str, asyncio.Lock] = {}
        self._generation = 0
        self._load_task: Optional[asyncio.Task] = None
        self._deferred_user_id: Optional[str] = None
        self.closed = False
        self._unsubscribe = session.subscribe(self._on_user_changed)

        if session.current_user is not None:
            self._schedule_load(session.current_user.id)

    @property
    def treasures(self) -> List[Treasure]:
        return list(self._discovered)

    def has(self, treasure_id: str) -> bool:
        return any(t.id == treasure_id for t in self._discovered)

    # ---- session events ----

    def _on_user_changed(self, user: Optional[UserIdentity]) -> None:
        if self.closed:
            return

        # Invalidate any load still in flight for the previous user
        self._generation += 1
        self._deferred_user_id = None
        self._discovered = []

        if user is not None:
            self._schedule_load(user.id)

    def _schedule_load(self, user_id: str) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._deferred_user_id = user_id
            return
        self._load_task = loop.create_task(self.load(user_id))

    async def settle(self) -> None:
        """Wait for a load triggered by a session change to finish."""
        if self._deferred_user_id is not None:
            user_id = self._deferred_user_id
            self._deferred_user_id = None
            await self.load(user_id)

        task = self._load_task
        if task is not None and not task.done():
            await task

    def _is_stale(self, generation: int, user_id: str) -> bool:
        user = self._session.current_user
        return (
            self.closed
            or generation != self._generation
            or user is None
            or user.id != user_id
        )

    # ---- operations ----

    async def load(self, user_id: str) -> bool:
        """Replace the discovered set with the user's stored discoveries.

        Returns:
            True if the set was replaced. False on failure (set left empty,
            notification emitted) or when the result arrived too late to
            apply.
        """
        self._generation += 1
        generation = self._generation

        try:
            treasures = await self._store.list_discoveries(user_id)
        except BackendError as e:
            if self._is_stale(generation, user_id):
                return False
            logger.error("Error fetching user discoveries: %s", e)
            self._discovered = []
            self._notifier.error("Error", "Failed to load your treasures")
            return False

        if self._is_stale(generation, user_id):
            logger.debug("Discarding stale discovery load for %s", user_id)
            return False

        self._discovered = list(treasures)
        return True

    async def add(self, treasure: Treasure) -> DiscoveryOutcome:
        user = self._session.current_user
        if user is None:
            self._notifier.error("Authentication Required", "Please sign in to save treasures")
            return DiscoveryOutcome.AUTH_REQUIRED

        async with self._lock_for(treasure.id):
            if self.has(treasure.id):
                return DiscoveryOutcome.ALREADY_DISCOVERED

            try:
                await self._store.add_discovery(user.id, treasure.id)
            except BackendError as e:
                logger.error("Error adding treasure %s: %s", treasure.id, e)
                self._notifier.error("Error", "Failed to save treasure")
                return DiscoveryOutcome.FAILED

            if not self._owned_by(user):
                logger.info("Discovery of %s saved after the session changed", treasure.id)
                return DiscoveryOutcome.SUPERSEDED

            self._discovered = self._discovered + [treasure]
            self._notifier.notify("Treasure Discovered!", f"You found the {treasure.name}!")

        return DiscoveryOutcome.ADDED

    async def remove(self, treasure_id: str) -> DiscoveryOutcome:
        user = self._session.current_user
        if user is None:
            return DiscoveryOutcome.AUTH_REQUIRED

        async with self._lock_for(treasure_id):
            if not self.has(treasure_id):
                return DiscoveryOutcome.NOT_DISCOVERED

            try:
                await self._store.remove_discovery(user.id, treasure_id)
            except BackendError as e:
                logger.error("Error removing treasure %s: %s", treasure_id, e)
                self._notifier.error("Error", "Failed to remove treasure")
                return DiscoveryOutcome.FAILED

            if not self._owned_by(user):
                logger.info("Removal of %s saved after the session changed", treasure_id)
                return DiscoveryOutcome.SUPERSEDED

            self._discovered = [t for t in self._discovered if t.id != treasure_id]

        return DiscoveryOutcome.REMOVED

    def close(self) -> None:
        """Detach from the session; late results are ignored from now on."""
        self.closed = True
        self._unsubscribe()

    # ---- helpers ----

    def _owned_by(self, user: UserIdentity) -> bool:
        current = self._session.current_user
        return not self.closed and current is not None and current.id == user.id

    def _lock_for(self, treasure_id: str) -> asyncio.Lock:
        lock = self._locks.get(treasure_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[treasure_id] = lock
        return lock
