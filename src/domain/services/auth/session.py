import asyncio
import threading
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from structlog import get_logger

from src.core.exceptions import SessionNotFoundError
from src.domain.entities.session import Session
from src.domain.interfaces.repositories import ISessionStore

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _Stripe:
    __slots__ = ("lock", "sessions")

    def __init__(self):
        self.lock = threading.Lock()
        self.sessions: Dict[int, Dict[str, Session]] = {}


class InMemorySessionStore(ISessionStore):
    """In-process session store partitioned into lock stripes by user id.

    Every user maps to exactly one stripe (``user_id % stripes``) and all of
    a user's sessions live in that stripe, so operations on users in
    different stripes never contend. A separate index maps session ids to
    their owner for lookups by id.

    Locks are plain `threading.Lock` objects held only for dictionary
    operations, never across an ``await``, so the store is safe both for
    concurrent coroutines and for code running in worker threads.

    ``delete_by_user_id`` holds the user's stripe lock for the whole removal:
    every session created before the call is gone when it returns. A
    ``create`` for the same user that runs concurrently is ordered either
    before the removal (and deleted) or after it (and kept); callers must not
    rely on which.

    Attributes:
        stripe_count (int): Number of lock stripes.
    """

    def __init__(self, stripes: int = 16, clock: Optional[Callable[[], datetime]] = None):
        if stripes < 1:
            raise ValueError("stripes must be at least 1")
        self.stripe_count = stripes
        self._stripes = [_Stripe() for _ in range(stripes)]
        self._owners: Dict[str, int] = {}
        self._owners_lock = threading.Lock()
        self._clock = clock or _utcnow

    def _stripe(self, user_id: int) -> _Stripe:
        return self._stripes[user_id % self.stripe_count]

    def _owner_of(self, session_id: str) -> Optional[int]:
        with self._owners_lock:
            return self._owners.get(session_id)

    async def create(self, session: Session) -> None:
        stripe = self._stripe(session.user_id)
        with stripe.lock:
            stripe.sessions.setdefault(session.user_id, {})[session.id] = session
            with self._owners_lock:
                self._owners[session.id] = session.user_id
        logger.debug("Session created", session_id=session.id, user_id=session.user_id)

    async def delete(self, session_id: str) -> None:
        user_id = self._owner_of(session_id)
        if user_id is None:
            return
        stripe = self._stripe(user_id)
        with stripe.lock:
            user_sessions = stripe.sessions.get(user_id)
            if user_sessions is not None:
                user_sessions.pop(session_id, None)
                if not user_sessions:
                    del stripe.sessions[user_id]
            with self._owners_lock:
                self._owners.pop(session_id, None)
        logger.debug("Session deleted", session_id=session_id, user_id=user_id)

    async def find_by_id(self, session_id: str) -> Session:
        user_id = self._owner_of(session_id)
        if user_id is not None:
            stripe = self._stripe(user_id)
            with stripe.lock:
                session = stripe.sessions.get(user_id, {}).get(session_id)
            if session is not None:
                return session
        raise SessionNotFoundError()

    async def find_by_user_id(self, user_id: int) -> List[Session]:
        stripe = self._stripe(user_id)
        with stripe.lock:
            return list(stripe.sessions.get(user_id, {}).values())

    async def delete_by_user_id(self, user_id: int) -> int:
        stripe = self._stripe(user_id)
        with stripe.lock:
            removed = stripe.sessions.pop(user_id, {})
            with self._owners_lock:
                for session_id in removed:
                    self._owners.pop(session_id, None)
        if removed:
            logger.info("Sessions deleted for user", user_id=user_id, count=len(removed))
        return len(removed)

    async def delete_expired(self) -> int:
        now = self._clock()
        removed = 0
        for stripe in self._stripes:
            with stripe.lock:
                for user_id in list(stripe.sessions):
                    user_sessions = stripe.sessions[user_id]
                    expired = [sid for sid, s in user_sessions.items() if s.is_expired(now)]
                    for session_id in expired:
                        del user_sessions[session_id]
                    if not user_sessions:
                        del stripe.sessions[user_id]
                    if expired:
                        with self._owners_lock:
                            for session_id in expired:
                                self._owners.pop(session_id, None)
                        removed += len(expired)
            # let request handlers run between stripes
            await asyncio.sleep(0)
        if removed:
            logger.info("Expired sessions swept", count=removed)
        return removed

    def __len__(self) -> int:
        with self._owners_lock:
            return len(self._owners)


async def sweep_expired_sessions(store: ISessionStore, interval_seconds: float) -> None:
    """Runs ``store.delete_expired()`` every ``interval_seconds`` until cancelled.

    Errors of a single sweep are logged and the loop carries on.
    """
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await store.delete_expired()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error("Session sweep failed", error=str(e), exc_info=True)
