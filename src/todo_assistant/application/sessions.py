"""
application.sessions - Per-session agents with serialised turns.

Each session id maps to its own SessionContext and AgentExecutor (and so its
own Conversation). Turns on the same session run one at a time under the
session's lock; different sessions run concurrently. Idle sessions expire
after a TTL, and the least recently used idle sessions are dropped when the
table is full. A session with a turn running or queued is never evicted.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from todo_assistant.agent.executor import AgentExecutor, TurnResult
from todo_assistant.application.context import SessionContext
from todo_assistant.domain.exceptions import ServiceUnavailable

logger = logging.getLogger(__name__)

AgentFactory = Callable[[SessionContext], AgentExecutor]

DEFAULT_SESSION_ID = "default"


@dataclass
class SessionEntry:
    """Everything one session owns."""
    ctx: SessionContext
    agent: AgentExecutor
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    last_used: float = 0.0
    # Turns that have claimed this session, running or queued on the lock.
    pending: int = 0

    @property
    def busy(self) -> bool:
        return self.pending > 0 or self.lock.locked()


class SessionManager:
    """Creates, serialises and evicts agent sessions."""

    def __init__(
        self,
        agent_factory: AgentFactory,
        ttl_seconds: float = 3600.0,
        max_sessions: int = 1000,
        turn_timeout: Optional[float] = 120.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._agent_factory = agent_factory
        self._ttl = ttl_seconds
        self._max_sessions = max_sessions
        self._turn_timeout = turn_timeout
        self._clock = clock
        self._sessions: dict[str, SessionEntry] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def get(self, session_id: str) -> Optional[SessionEntry]:
        return self._sessions.get(session_id)

    def get_or_create(self, session_id: str = DEFAULT_SESSION_ID) -> SessionEntry:
        """Return the live session for ``session_id``, creating it if needed."""
        self.evict_expired()
        entry = self._sessions.get(session_id)
        if entry is not None:
            entry.last_used = self._clock()
            return entry

        if len(self._sessions) >= self._max_sessions:
            self._evict_least_recently_used(len(self._sessions) - self._max_sessions + 1)

        ctx = SessionContext(session_id=session_id)
        entry = SessionEntry(
            ctx=ctx,
            agent=self._agent_factory(ctx),
            last_used=self._clock(),
        )
        self._sessions[session_id] = entry
        logger.info("Created session %s (%d active)", session_id, len(self._sessions))
        return entry

    async def run_turn(self, session_id: str, text: str) -> TurnResult:
        """Run one turn on a session, after any turn already in progress.

        Raises:
            ServiceUnavailable: The turn did not finish within the turn timeout.
            Anything AgentExecutor.run raises.
        """
        entry = self.get_or_create(session_id)
        entry.pending += 1
        try:
            async with entry.lock:
                entry.ctx.new_request()
                try:
                    return await asyncio.wait_for(
                        entry.agent.run(entry.ctx, text),
                        timeout=self._turn_timeout,
                    )
                except asyncio.TimeoutError as e:
                    logger.error(
                        "Turn timed out after %.1fs (session=%s)",
                        self._turn_timeout, session_id,
                    )
                    raise ServiceUnavailable(
                        f"AI model did not answer within {self._turn_timeout:.0f}s",
                    ) from e
                finally:
                    entry.last_used = self._clock()
        finally:
            entry.pending -= 1

    def drop(self, session_id: str) -> bool:
        """Forget a session. Returns False if it is unknown or mid-turn."""
        entry = self._sessions.get(session_id)
        if entry is None or entry.busy:
            return False
        del self._sessions[session_id]
        logger.info("Dropped session %s", session_id)
        return True

    def evict_expired(self) -> int:
        """Remove idle sessions older than the TTL. Returns how many went."""
        now = self._clock()
        expired = [
            sid for sid, entry in self._sessions.items()
            if not entry.busy and now - entry.last_used > self._ttl
        ]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.info("Evicted %d expired session(s)", len(expired))
        return len(expired)

    def _evict_least_recently_used(self, count: int) -> None:
        idle = sorted(
            (entry.last_used, sid)
            for sid, entry in self._sessions.items()
            if not entry.busy
        )
        for _, sid in idle[:count]:
            del self._sessions[sid]
            logger.info("Evicted least recently used session %s", sid)
        if len(idle) < count:
            logger.warning(
                "Session table over capacity (%d/%d): every session is busy",
                len(self._sessions) + 1, self._max_sessions,
            )
