"""
Tests for the browser session registry.

Run with: python -m pytest tests/test_user_context.py
"""

from conftest import FakeStore
from logic.config import get_default_config
from user_context import SessionRegistry, serializer, session_id_from_cookie


class StubView:

    def __init__(self):
        self.unmounted = False

    def unmount(self):
        self.unmounted = True


class FakeClock:

    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def make_registry(clock, max_idle=60):
    return SessionRegistry(FakeStore(), get_default_config(), max_idle=max_idle, clock=clock)


def test_idle_sessions_are_evicted_on_create():
    clock = FakeClock()
    registry = make_registry(clock)
    for _ in range(50):
        registry.create()
    assert len(registry) == 50

    clock.now += 61
    fresh = registry.create()

    assert len(registry) == 1
    assert registry.get(fresh.session_id) is fresh


def test_evicted_session_is_closed():
    clock = FakeClock()
    registry = make_registry(clock)
    session = registry.create()
    view = StubView()
    session.view = view

    clock.now += 61

    assert registry.evict_idle() == 1
    assert view.unmounted is True
    assert session.view is None
    assert registry.get(session.session_id) is None


def test_lookup_keeps_session_alive():
    clock = FakeClock()
    registry = make_registry(clock)
    session = registry.create()

    clock.now += 40
    assert registry.get(session.session_id) is session
    clock.now += 40

    assert registry.get(session.session_id) is session
    assert len(registry) == 1


def test_session_cookie_round_trip():
    assert session_id_from_cookie(serializer.dumps("abc")) == "abc"
    assert session_id_from_cookie("tampered") is None
    assert session_id_from_cookie(None) is None
