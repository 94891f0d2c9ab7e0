"""Data access for treasures, discoveries and accounts.

TreasureStore is the contract the state classes depend on; SqlTreasureStore
implements it on top of the SQLAlchemy models in database.py.

Every call is a coroutine. The SQL work runs in a worker thread under a
timeout so the event loop never blocks on the database, and any failure
(including the timeout) surfaces as BackendError.
"""

import abc
import asyncio
import hashlib
import hmac
import logging
import secrets
from typing import Callable, List, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from database import SessionLocal, TreasureRow, UserDiscoveryRow, UserRow
from logic.errors import AuthenticationError, BackendError
from logic.models import Treasure, UserIdentity

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TIMEOUT = 10.0
PBKDF2_ITERATIONS = 200_000


class TreasureStore(abc.ABC):
    """Backend collaborator: two tables plus an auth provider."""

    @abc.abstractmethod
    async def list_treasures(self) -> List[Treasure]:
        ...

    @abc.abstractmethod
    async def list_discoveries(self, user_id: str) -> List[Treasure]:
        """Treasures the user has discovered, oldest discovery first."""

    @abc.abstractmethod
    async def add_discovery(self, user_id: str, treasure_id: str) -> None:
        ...

    @abc.abstractmethod
    async def remove_discovery(self, user_id: str, treasure_id: str) -> None:
        ...

    @abc.abstractmethod
    async def sign_up(self, email: str, password: str) -> UserIdentity:
        ...

    @abc.abstractmethod
    async def sign_in(self, email: str, password: str) -> UserIdentity:
        ...


# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------

def hash_password(password: str, salt: str = None) -> str:
    """Hash a password as "salt$hexdigest" using PBKDF2-HMAC-SHA256."""
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), PBKDF2_ITERATIONS)
    return f"{salt}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    try:
        salt, _ = stored.split("$", 1)
    except ValueError:
        return False
    return hmac.compare_digest(hash_password(password, salt), stored)


# ---------------------------------------------------------------------------
# SQL implementation
# ---------------------------------------------------------------------------

class SqlTreasureStore(TreasureStore):

    def __init__(self, session_factory=None, timeout: float = DEFAULT_TIMEOUT):
        self._session_factory = session_factory or SessionLocal
        self.timeout = timeout

    async def _run(self, fn: Callable[..., T], *args) -> T:
        try:
            return await asyncio.wait_for(asyncio.to_thread(fn, *args), timeout=self.timeout)
        except asyncio.TimeoutError:
            raise BackendError(f"Backend call timed out after {self.timeout}s")
        except SQLAlchemyError as e:
            raise BackendError(str(e)) from e

    # ---- treasures ----

    def _list_treasures(self) -> List[Treasure]:
        db = self._session_factory()
        try:
            return [Treasure.model_validate(row) for row in db.query(TreasureRow).all()]
        finally:
            db.close()

    async def list_treasures(self) -> List[Treasure]:
        return await self._run(self._list_treasures)

    # ---- discoveries ----

    def _list_discoveries(self, user_id: str) -> List[Treasure]:
        db = self._session_factory()
        try:
            rows = (
                db.query(TreasureRow)
                .join(UserDiscoveryRow, UserDiscoveryRow.treasure_id == TreasureRow.id)
                .filter(UserDiscoveryRow.user_id == user_id)
                .order_by(UserDiscoveryRow.id)
                .all()
            )
            return [Treasure.model_validate(row) for row in rows]
        finally:
            db.close()

    async def list_discoveries(self, user_id: str) -> List[Treasure]:
        return await self._run(self._list_discoveries, user_id)

    def _add_discovery(self, user_id: str, treasure_id: str) -> None:
        """Insert a discovery row; an identical existing row counts as success.

        A worker thread keeps running after its call times out, so an
        earlier insert may have committed after the caller gave up on it.
        """
        db = self._session_factory()
        try:
            db.add(UserDiscoveryRow(user_id=user_id, treasure_id=treasure_id))
            db.commit()
        except IntegrityError as e:
            db.rollback()
            existing = (
                db.query(UserDiscoveryRow)
                .filter(UserDiscoveryRow.user_id == user_id, UserDiscoveryRow.treasure_id == treasure_id)
                .first()
            )
            if existing is None:
                raise BackendError(f"Could not record discovery of {treasure_id}") from e
            logger.info("Discovery of %s by %s was already recorded", treasure_id, user_id)
        finally:
            db.close()

    async def add_discovery(self, user_id: str, treasure_id: str) -> None:
        await self._run(self._add_discovery, user_id, treasure_id)

    def _remove_discovery(self, user_id: str, treasure_id: str) -> None:
        db = self._session_factory()
        try:
            (
                db.query(UserDiscoveryRow)
                .filter(UserDiscoveryRow.user_id == user_id, UserDiscoveryRow.treasure_id == treasure_id)
                .delete(synchronize_session=False)
            )
            db.commit()
        finally:
            db.close()

    async def remove_discovery(self, user_id: str, treasure_id: str) -> None:
        await self._run(self._remove_discovery, user_id, treasure_id)

    # ---- auth ----

    def _sign_up(self, email: str, password: str) -> UserIdentity:
        db = self._session_factory()
        try:
            if db.query(UserRow).filter(UserRow.email == email).first() is not None:
                raise AuthenticationError("User already registered")
            user = UserRow(email=email, password_hash=hash_password(password))
            db.add(user)
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                raise AuthenticationError("User already registered")
            return UserIdentity(id=user.id, email=user.email)
        finally:
            db.close()

    async def sign_up(self, email: str, password: str) -> UserIdentity:
        return await self._run(self._sign_up, email.strip().lower(), password)

    def _sign_in(self, email: str, password: str) -> UserIdentity:
        db = self._session_factory()
        try:
            user = db.query(UserRow).filter(UserRow.email == email).first()
            if user is None or not verify_password(password, user.password_hash):
                raise AuthenticationError("Invalid login credentials")
            return UserIdentity(id=user.id, email=user.email)
        finally:
            db.close()

    async def sign_in(self, email: str, password: str) -> UserIdentity:
        return await self._run(self._sign_in, email.strip().lower(), password)
