"""Per-user ephemeral session storage with lazy expiry."""

import logging
from collections import Counter
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any, Protocol

from manualbot.app.models.session import Session

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class SessionStore(Protocol):
    """Keyed session map with TTL bookkeeping."""

    def get(self, user_key: str) -> Session:
        """Return the live session, or a fresh "no flow" session. Never fails."""
        ...

    def set(self, user_key: str, session: Session, ttl: timedelta | None) -> Session:
        """Replace state and re-arm the expiry deadline (None disables expiry)."""
        ...

    def clear(self, user_key: str) -> None:
        """Remove state."""
        ...


class InMemorySessionStore:
    """In-memory implementation of SessionStore.

    Expiry is a logical deadline stored on the session and checked on
    access; there are no timer callbacks. Re-arming replaces the deadline
    together with the state, so an old deadline can never clear new state.
    `set` also sweeps every expired session once per `sweep_interval`, so
    abandoned sessions do not accumulate.
    """

    def __init__(
        self,
        clock: Clock | None = None,
        sweep_interval: timedelta = timedelta(minutes=1),
    ) -> None:
        self._sessions: dict[str, Session] = {}
        self._clock: Clock = clock or datetime.now
        self._sweep_interval = sweep_interval
        self._last_sweep = self._clock()

    def now(self) -> datetime:
        return self._clock()

    def get(self, user_key: str) -> Session:
        """Get session, dropping it first if its deadline has passed."""
        now = self._clock()
        session = self._sessions.get(user_key)

        if session is not None and session.is_expired(now):
            logger.info("Session expired for %s", user_key)
            del self._sessions[user_key]
            session = None

        if session is None:
            return Session(user_key=user_key, flow=None, created_at=now)

        return session

    def set(self, user_key: str, session: Session, ttl: timedelta | None) -> Session:
        """Store session with a fresh deadline."""
        now = self._clock()
        # Abandoned sessions are only ever dropped by a sweep
        if now - self._last_sweep >= self._sweep_interval:
            self.sweep(now)

        expires_at = now + ttl if ttl is not None and ttl.total_seconds() > 0 else None
        stored = session.model_copy(update={"user_key": user_key, "expires_at": expires_at})
        self._sessions[user_key] = stored
        return stored

    def clear(self, user_key: str) -> None:
        """Remove session if present."""
        self._sessions.pop(user_key, None)

    def sweep(self, now: datetime | None = None) -> int:
        """Drop every expired session.

        Returns:
            Number of sessions removed
        """
        now = now or self._clock()
        self._last_sweep = now
        expired = [key for key, s in self._sessions.items() if s.is_expired(now)]
        for key in expired:
            del self._sessions[key]

        if expired:
            logger.info("Swept %d expired sessions", len(expired))
        return len(expired)

    def stats(self) -> dict[str, Any]:
        """Live session count and distribution per flow/step."""
        distribution: Counter[str] = Counter()
        for session in self._sessions.values():
            if session.flow is None:
                distribution["none"] += 1
            else:
                distribution[f"{session.flow.name.value}:{session.flow.step}"] += 1

        return {
            "total_sessions": len(self._sessions),
            "distribution": dict(distribution),
        }
