"""Tests for the transport-side services: session store and rate limiter."""

import threading
from types import SimpleNamespace

from app.services import rate_limiter
from app.services.rate_limiter import RateLimiter
from app.services.session_store import SessionStore


# =============================================================================
# SESSION STORE
# =============================================================================

class TestSessionStore:
    def test_new_session_gets_an_id(self):
        store = SessionStore()
        with store.session() as conversation:
            session_id = conversation.conversation_id
        assert session_id
        assert store.get(session_id) is conversation

    def test_same_id_same_conversation(self):
        store = SessionStore()
        with store.session("abc") as first:
            first.add_message("user", "hello")
        with store.session("abc") as second:
            assert second is first
            assert len(second.history) == 1
        assert len(store) == 1

    def test_seed_applies_to_new_sessions_only(self):
        store = SessionStore()
        seed = [
            {"role": "user", "content": "My dishwasher model is WDT780SAEM1"},
            {"role": "assistant", "content": "Thanks! How can I help?"},
        ]
        with store.session("abc", seed=seed) as conversation:
            assert len(conversation.history) == 2
            assert conversation.last_model_number == "WDT780SAEM1"
            assert conversation.conversation_topic == "dishwasher"

        with store.session("abc", seed=[{"role": "user", "content": "ignored"}]) as conversation:
            assert len(conversation.history) == 2

    def test_reset(self):
        store = SessionStore()
        with store.session("abc"):
            pass
        assert store.reset("abc")
        assert store.get("abc") is None
        assert not store.reset("abc")

    def test_idle_sessions_expire(self):
        store = SessionStore(ttl_seconds=-1)
        with store.session("old"):
            pass
        with store.session("new"):
            pass
        assert store.get("old") is None

    def test_turns_of_one_session_do_not_interleave(self):
        store = SessionStore()
        order = []
        entered = threading.Event()

        def first_turn():
            with store.session("abc"):
                entered.set()
                order.append("first-start")
                release.wait(timeout=2)
                order.append("first-end")

        def second_turn():
            entered.wait(timeout=2)
            with store.session("abc"):
                order.append("second")

        release = threading.Event()
        threads = [threading.Thread(target=first_turn), threading.Thread(target=second_turn)]
        for thread in threads:
            thread.start()
        entered.wait(timeout=2)
        release.set()
        for thread in threads:
            thread.join(timeout=2)

        assert order == ["first-start", "first-end", "second"]

    def test_context_window_applies(self):
        store = SessionStore(context_window=1)
        with store.session("abc") as conversation:
            for i in range(5):
                conversation.add_message("user", str(i))
            assert len(conversation.history) == 2


# =============================================================================
# RATE LIMITER
# =============================================================================

class TestRateLimiter:
    def test_limit_per_key(self):
        limiter = RateLimiter(max_requests=2, window_seconds=60)
        assert limiter.allow("1.2.3.4")
        assert limiter.allow("1.2.3.4")
        assert not limiter.allow("1.2.3.4")
        assert limiter.allow("5.6.7.8")

    def test_window_slides(self):
        limiter = RateLimiter(max_requests=1, window_seconds=0)
        assert limiter.allow("client")
        assert limiter.allow("client")

    def test_reset(self):
        limiter = RateLimiter(max_requests=1, window_seconds=60)
        limiter.allow("client")
        limiter.reset()
        assert limiter.allow("client")

    def test_idle_clients_are_forgotten(self, monkeypatch):
        clock = {"now": 1000.0}
        monkeypatch.setattr(rate_limiter, "time", SimpleNamespace(monotonic=lambda: clock["now"]))
        limiter = RateLimiter(max_requests=5, window_seconds=60)

        for i in range(3):
            limiter.allow(f"10.0.0.{i}")
        assert len(limiter) == 3

        clock["now"] += 61
        assert limiter.allow("10.0.0.99")
        assert len(limiter) == 1

    def test_active_clients_keep_their_history(self, monkeypatch):
        clock = {"now": 1000.0}
        monkeypatch.setattr(rate_limiter, "time", SimpleNamespace(monotonic=lambda: clock["now"]))
        limiter = RateLimiter(max_requests=2, window_seconds=60)

        limiter.allow("busy")
        clock["now"] += 30
        limiter.allow("busy")
        clock["now"] += 31
        # First hit left the window, second is still counted
        assert limiter.allow("busy")
        assert not limiter.allow("busy")
