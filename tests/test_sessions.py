"""SessionManager: per-session isolation, serialised turns, eviction and timeouts."""

import asyncio

import pytest

from todo_assistant.agent.executor import TurnResult
from todo_assistant.application.sessions import SessionManager
from todo_assistant.domain.exceptions import ServiceUnavailable
from tests.helpers import output


class SlowAgent:
    """Echoes the user text after a short pause, tracking overlap."""

    def __init__(self, delay: float = 0.01):
        self.delay = delay
        self.active = 0
        self.max_active = 0
        self.seen = []

    async def run(self, ctx, text):
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(self.delay)
            self.seen.append((ctx.session_id, text))
            return TurnResult(reply=text)
        finally:
            self.active -= 1


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class TestConcurrency:
    @pytest.mark.asyncio
    async def test_turns_on_one_session_run_one_at_a_time_in_order(self):
        agent = SlowAgent()
        sessions = SessionManager(lambda ctx: agent)

        results = await asyncio.gather(*(sessions.run_turn("s", t) for t in ("a", "b", "c")))

        assert [r.reply for r in results] == ["a", "b", "c"]
        assert agent.seen == [("s", "a"), ("s", "b"), ("s", "c")]
        assert agent.max_active == 1

    @pytest.mark.asyncio
    async def test_different_sessions_run_concurrently(self):
        agent = SlowAgent()
        sessions = SessionManager(lambda ctx: agent)

        await asyncio.gather(sessions.run_turn("one", "x"), sessions.run_turn("two", "y"))

        assert agent.max_active == 2

    @pytest.mark.asyncio
    async def test_sessions_have_separate_conversations(self, make_agent):
        built = []

        def factory(ctx):
            agent, _ = make_agent([output(f"hello {ctx.session_id}")])
            built.append(agent)
            return agent

        sessions = SessionManager(factory)

        await sessions.run_turn("alice", "hi")
        await sessions.run_turn("bob", "hi")

        assert len(built) == 2
        assert built[0].conversation is not built[1].conversation
        assert len(built[0].conversation) == 3
        assert len(built[1].conversation) == 3

    @pytest.mark.asyncio
    async def test_same_session_reuses_its_agent(self):
        created = []
        sessions = SessionManager(lambda ctx: created.append(ctx) or SlowAgent(0))

        await sessions.run_turn("s", "a")
        await sessions.run_turn("s", "b")

        assert len(created) == 1
        assert len(sessions) == 1

    @pytest.mark.asyncio
    async def test_each_turn_gets_a_new_request_id(self):
        request_ids = []

        class RecordingAgent:
            async def run(self, ctx, text):
                request_ids.append(ctx.request_id)
                return TurnResult(reply=text)

        sessions = SessionManager(lambda ctx: RecordingAgent())
        await sessions.run_turn("s", "a")
        await sessions.run_turn("s", "b")

        assert len(set(request_ids)) == 2


class TestTimeout:
    @pytest.mark.asyncio
    async def test_slow_turn_becomes_service_unavailable(self):
        sessions = SessionManager(lambda ctx: SlowAgent(delay=1.0), turn_timeout=0.05)

        with pytest.raises(ServiceUnavailable):
            await sessions.run_turn("s", "hello")

        # The session is usable again afterwards.
        assert not sessions.get("s").busy

    @pytest.mark.asyncio
    async def test_no_timeout_when_disabled(self):
        sessions = SessionManager(lambda ctx: SlowAgent(delay=0.01), turn_timeout=None)

        result = await sessions.run_turn("s", "hello")

        assert result.reply == "hello"


class TestEviction:
    def test_idle_sessions_expire_after_ttl(self):
        clock = FakeClock()
        sessions = SessionManager(lambda ctx: SlowAgent(), ttl_seconds=60, clock=clock)
        sessions.get_or_create("old")
        clock.now = 30
        sessions.get_or_create("young")

        clock.now = 61
        assert sessions.evict_expired() == 1

        assert "old" not in sessions
        assert "young" in sessions

    def test_least_recently_used_is_dropped_when_full(self):
        clock = FakeClock()
        sessions = SessionManager(lambda ctx: SlowAgent(), max_sessions=2, clock=clock)
        sessions.get_or_create("a")
        clock.now = 1
        sessions.get_or_create("b")
        clock.now = 2
        sessions.get_or_create("a")  # touch

        clock.now = 3
        sessions.get_or_create("c")

        assert "a" in sessions
        assert "b" not in sessions
        assert "c" in sessions

    @pytest.mark.asyncio
    async def test_busy_session_is_never_evicted(self):
        clock = FakeClock()
        sessions = SessionManager(lambda ctx: SlowAgent(), ttl_seconds=10, clock=clock)
        entry = sessions.get_or_create("busy")

        async with entry.lock:
            clock.now = 100
            assert sessions.evict_expired() == 0
            assert sessions.drop("busy") is False

        assert sessions.drop("busy") is True
        assert "busy" not in sessions

    @pytest.mark.asyncio
    async def test_session_with_a_queued_turn_is_not_evicted(self):
        sessions = SessionManager(lambda ctx: SlowAgent(0), max_sessions=1)
        entry = sessions.get_or_create("s")
        agent = entry.agent

        await entry.lock.acquire()
        queued = asyncio.create_task(sessions.run_turn("s", "queued"))
        await asyncio.sleep(0)
        # Released, but the queued turn has not woken up yet.
        entry.lock.release()

        assert entry.busy
        sessions.get_or_create("other")
        assert sessions.evict_expired() == 0
        assert "s" in sessions

        await queued
        assert agent.seen == [("s", "queued")]
        assert sessions.get("s") is entry
        assert not entry.busy

    def test_drop_unknown_session(self):
        sessions = SessionManager(lambda ctx: SlowAgent())

        assert sessions.drop("nobody") is False
