"""
Session context owning a signed-in user's collections.

Nothing outside the SyncCoordinator mutates the collections; readers get
snapshots through the session.
"""

import logging
from typing import Optional

from gated.db.remote_store import RemoteStore
from gated.models.notice import Notice
from gated.sync.collection import SessionStore
from gated.sync.coordinator import SyncCoordinator

logger = logging.getLogger(__name__)


class Session:
    """One signed-in user's optimistic cache."""

    def __init__(self, owner_id: str, remote: RemoteStore):
        self.owner_id = owner_id
        self._store = SessionStore()
        self.coordinator = SyncCoordinator(self._store, remote, owner_id)
        self.active = True

    @property
    def epoch(self) -> int:
        return self._store.epoch

    @property
    def garments(self):
        return self._store.garments.items

    @property
    def orders(self):
        return self._store.orders.items

    @property
    def drops(self):
        return self._store.drops.items

    def drain_notices(self) -> list[Notice]:
        return self._store.drain_notices()

    def end(self) -> None:
        """
        Sign out: clear the collections and bump the epoch.

        Remote calls still in flight resolve later and are discarded.
        """
        epoch = self._store.reset()
        self.active = False
        logger.info(
            "Session ended for %s (epoch %d, %d calls in flight)",
            self.owner_id,
            epoch,
            self.coordinator.pending,
        )


class SessionRegistry:
    """Active sessions keyed by user id."""

    def __init__(self, remote: RemoteStore):
        self.remote = remote
        self._sessions: dict[str, Session] = {}

    def get(self, owner_id: str) -> Optional[Session]:
        return self._sessions.get(owner_id)

    async def start(self, owner_id: str) -> Session:
        """Sign in: reuse the active session or open one and load it."""
        session = self._sessions.get(owner_id)
        if session is not None:
            return session

        session = Session(owner_id, self.remote)
        self._sessions[owner_id] = session
        logger.info("Session started for %s", owner_id)
        await session.coordinator.refresh()
        return session

    def end(self, owner_id: str) -> bool:
        session = self._sessions.pop(owner_id, None)
        if session is None:
            return False
        session.end()
        return True

    async def close(self) -> None:
        """Let outstanding calls settle, then end every session."""
        for session in list(self._sessions.values()):
            await session.coordinator.wait_idle()
        for owner_id in list(self._sessions):
            self.end(owner_id)
