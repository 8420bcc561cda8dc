"""Per-session usage accumulation from cumulative message snapshots.

The host re-emits the full cumulative usage of a message every time the
message changes (for example while output is streaming). Summing those
snapshots would count the same tokens many times, so the accumulator keeps
the last snapshot of every message and only adds the difference.
"""

import threading
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from ecostat.events import (
    ASSISTANT_ROLE,
    HostEvent,
    MessageUpdatedEvent,
    SessionDeletedEvent,
)
from ecostat.logger import logger
from ecostat.models import ZERO_SNAPSHOT, SessionStats, UsageSnapshot

logger = logger.getChild("accumulator")

Clock = Callable[[], datetime]

_SNAPSHOT_FIELDS = ("input", "output", "reasoning", "cache_read", "cache_write", "cost")


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SessionAccumulator:
    """Owns every :class:`SessionStats` and the per-message snapshot table.

    All mutation and every read handed out to callers happen under one lock,
    so an update is never observed half-applied. Readers receive deep copies.

    Args:
        clamp_negative_deltas: Treat a snapshot that went backwards as a zero
            change instead of subtracting from the running totals.
        evict_on_session_end: Drop a session's state when the host reports
            the session as deleted.
        clock: Source of the current time, used for session timestamps.
        use_event_time: Stamp sessions with the time carried by each message
            update instead of the clock. Used when replaying recorded logs.
    """

    def __init__(
        self,
        *,
        clamp_negative_deltas: bool = False,
        evict_on_session_end: bool = True,
        clock: Clock | None = None,
        use_event_time: bool = False,
    ) -> None:
        self.clamp_negative_deltas = clamp_negative_deltas
        self.evict_on_session_end = evict_on_session_end
        self._clock = clock or _utcnow
        self.use_event_time = use_event_time
        self._sessions: dict[str, SessionStats] = {}
        self._snapshots: dict[str, dict[str, UsageSnapshot]] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions

    def handle_event(self, event: HostEvent | None) -> None:
        """Apply a host event; kinds other than message updates are ignored."""
        match event:
            case MessageUpdatedEvent():
                info = event.info
                self.apply_update(
                    info.sessionID,
                    info.id,
                    info.role,
                    info.snapshot(),
                    info.modelID,
                    info.providerID,
                    at=info.updated_at if self.use_event_time else None,
                )
            case SessionDeletedEvent():
                if self.evict_on_session_end:
                    self.end_session(event.session_id)
            case _:
                return

    def apply_update(
        self,
        session_id: str,
        message_id: str,
        role: str,
        snapshot: UsageSnapshot,
        model_id: str | None = None,
        provider_id: str | None = None,
        *,
        at: datetime | None = None,
    ) -> None:
        """Fold one cumulative message snapshot into its session's totals.

        ``at`` is the time of the update; the clock is used when it is absent.
        """
        if role != ASSISTANT_ROLE:
            return

        with self._lock:
            now = at or self._clock()
            stats = self._sessions.get(session_id)
            if stats is None:
                stats = SessionStats(
                    session_id=session_id, first_seen=now, last_updated=now
                )
                self._sessions[session_id] = stats
                logger.debug(f"tracking new session {session_id}")

            messages = self._snapshots.setdefault(session_id, {})
            prior = messages.get(message_id)
            is_new = prior is None
            deltas = self._compute_deltas(
                session_id, message_id, snapshot, prior or ZERO_SNAPSHOT
            )

            stats.add_usage(**deltas)
            if is_new:
                stats.messages += 1
            if model_id:
                stats.models.add(model_id)
            if provider_id:
                stats.providers.add(provider_id)
            stats.first_seen = min(stats.first_seen, now)
            stats.last_updated = max(stats.last_updated, now)

            messages[message_id] = snapshot

    def _compute_deltas(
        self,
        session_id: str,
        message_id: str,
        current: UsageSnapshot,
        prior: UsageSnapshot,
    ) -> dict[str, float]:
        deltas: dict[str, float] = {}
        for field in _SNAPSHOT_FIELDS:
            delta = getattr(current, field) - getattr(prior, field)
            if delta < 0:
                logger.warning(
                    f"{field} went backwards for {session_id}:{message_id} "
                    f"({getattr(prior, field)} -> {getattr(current, field)})"
                )
                if self.clamp_negative_deltas:
                    delta = 0
            deltas[field] = delta
        return deltas

    def get(self, session_id: str) -> SessionStats | None:
        """Return a copy of the stats for ``session_id``, if any were recorded."""
        with self._lock:
            stats = self._sessions.get(session_id)
            return None if stats is None else stats.model_copy(deep=True)

    def sessions(self) -> list[SessionStats]:
        """Return copies of all tracked sessions, most recently updated first."""
        with self._lock:
            copies = [stats.model_copy(deep=True) for stats in self._sessions.values()]
        return sorted(copies, key=lambda stats: stats.last_updated, reverse=True)

    def tracked_messages(self, session_id: str) -> int:
        """Return how many message snapshots are held for ``session_id``."""
        with self._lock:
            return len(self._snapshots.get(session_id, {}))

    def end_session(self, session_id: str) -> bool:
        """Forget a session and all of its message snapshots.

        Returns True when the session was being tracked.
        """
        with self._lock:
            removed = self._sessions.pop(session_id, None)
            self._snapshots.pop(session_id, None)
        if removed is not None:
            logger.debug(f"evicted session {session_id}")
        return removed is not None

    def evict_idle(self, max_idle: timedelta) -> list[str]:
        """Forget sessions that have not been updated within ``max_idle``."""
        with self._lock:
            cutoff = self._clock() - max_idle
            expired = [
                session_id
                for session_id, stats in self._sessions.items()
                if stats.last_updated < cutoff
            ]
            for session_id in expired:
                self.end_session(session_id)
        return expired
