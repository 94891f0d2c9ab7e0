"""
Shared fixtures.

The environment is pointed at a throwaway SQLite database before any
application module is imported, since database.py reads DATABASE_URL at
import time.
"""

import asyncio
import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="treasure_map_tests_")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ.setdefault("SESSION_SECRET_KEY", "test-secret")

import pytest  # noqa: E402

from logic.errors import AuthenticationError, BackendError  # noqa: E402
from logic.models import Treasure, UserIdentity  # noqa: E402
from logic.notifications import Notifier  # noqa: E402
from logic.session import SessionContext  # noqa: E402
from treasure_store import TreasureStore  # noqa: E402


class FakeStore(TreasureStore):
    """In-memory store with a call log, failure injection and gates.

    Attributes:
        calls: (method, *args) for every call, in order.
        fail: Method names that raise BackendError.
        gates: Method name -> asyncio.Event the call waits on before finishing.
    """

    def __init__(self, treasures=()):
        self.treasures = list(treasures)
        self.discoveries = {}
        self.users = {}
        self.calls = []
        self.fail = set()
        self.gates = {}

    async def _call(self, name, *args):
        self.calls.append((name,) + args)
        gate = self.gates.get(name)
        if gate is not None:
            await gate.wait()
        else:
            await asyncio.sleep(0)
        if name in self.fail:
            raise BackendError(f"{name} failed")

    def calls_to(self, name):
        return [c for c in self.calls if c[0] == name]

    async def list_treasures(self):
        await self._call("list_treasures")
        return list(self.treasures)

    async def list_discoveries(self, user_id):
        await self._call("list_discoveries", user_id)
        by_id = {t.id: t for t in self.treasures}
        return [by_id[tid] for tid in self.discoveries.get(user_id, []) if tid in by_id]

    async def add_discovery(self, user_id, treasure_id):
        await self._call("add_discovery", user_id, treasure_id)
        rows = self.discoveries.setdefault(user_id, [])
        if treasure_id not in rows:
            rows.append(treasure_id)

    async def remove_discovery(self, user_id, treasure_id):
        await self._call("remove_discovery", user_id, treasure_id)
        rows = self.discoveries.get(user_id, [])
        if treasure_id in rows:
            rows.remove(treasure_id)

    async def sign_up(self, email, password):
        await self._call("sign_up", email)
        if email in self.users:
            raise AuthenticationError("User already registered")
        user = UserIdentity(id=f"user-{len(self.users) + 1}", email=email)
        self.users[email] = (password, user)
        return user

    async def sign_in(self, email, password):
        await self._call("sign_in", email)
        entry = self.users.get(email)
        if entry is None or entry[0] != password:
            raise AuthenticationError("Invalid login credentials")
        return entry[1]


GOLD_COIN = Treasure(id="a", name="Gold Coin", clue="shiny circle", x=100, y=200, description="A coin")
MAP_SHARD = Treasure(id="b", name="Map Shard", clue="torn paper", x=450, y=300, description="A shard")
SILVER_KEY = Treasure(id="c", name="Silver Key", clue="Cold metal in the well", x=900, y=0)


@pytest.fixture
def catalog():
    return [GOLD_COIN, MAP_SHARD, SILVER_KEY]


@pytest.fixture
def store(catalog):
    return FakeStore(catalog)


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def session():
    return SessionContext()


@pytest.fixture
def user():
    return UserIdentity(id="user-1", email="hunter@example.com")
