"""Browser session management.

Each browser gets a signed "session" cookie that maps to a HuntSession held
in memory. Routes take the session through the get_hunt_session dependency;
the cookie is issued on first use.
"""

import logging
import os
import secrets
import time
from typing import Callable, Dict, Optional

from fastapi import Request, Response
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from logic.hunt import HuntSession

logger = logging.getLogger(__name__)

SESSION_SECRET_KEY = os.getenv("SESSION_SECRET_KEY")

if not SESSION_SECRET_KEY:
    SESSION_SECRET_KEY = secrets.token_urlsafe(32)
    logger.warning("SESSION_SECRET_KEY not set. Using temporary key. Set this in .env for production.")

# Session serializer for secure cookie signing
serializer = URLSafeTimedSerializer(SESSION_SECRET_KEY)

# Session configuration
SESSION_MAX_AGE = 60 * 60 * 24 * 7  # 7 days in seconds
COOKIE_NAME = "session"
COOKIE_SECURE = os.getenv("SESSION_COOKIE_SECURE", "false").lower() == "true"


class SessionRegistry:
    """In-memory HuntSession store keyed by session id.

    Sessions idle for longer than max_idle seconds (the cookie lifetime by
    default) are closed and dropped whenever a session is looked up or
    created.
    """

    def __init__(
            self, store, config: dict, max_idle: float = SESSION_MAX_AGE,
            clock: Callable[[], float] = time.monotonic,
    ):
        self.store = store
        self.config = config
        self.max_idle = max_idle
        self._clock = clock
        self._sessions: Dict[str, HuntSession] = {}
        self._last_seen: Dict[str, float] = {}

    def get(self, session_id: str) -> Optional[HuntSession]:
        self.evict_idle()
        session = self._sessions.get(session_id)
        if session is not None:
            self._last_seen[session_id] = self._clock()
        return session

    def create(self) -> HuntSession:
        self.evict_idle()
        session_id = secrets.token_urlsafe(32)
        session = HuntSession(session_id, self.store, self.config)
        self._sessions[session_id] = session
        self._last_seen[session_id] = self._clock()
        return session

    def evict_idle(self) -> int:
        """Close sessions not seen within max_idle seconds.

        Returns:
            Number of sessions evicted.
        """
        cutoff = self._clock() - self.max_idle
        idle = [sid for sid, seen in self._last_seen.items() if seen < cutoff]
        for session_id in idle:
            self.discard(session_id)
        if idle:
            logger.info("Evicted %d idle sessions", len(idle))
        return len(idle)

    def discard(self, session_id: str) -> None:
        self._last_seen.pop(session_id, None)
        session = self._sessions.pop(session_id, None)
        if session is not None:
            session.close()

    def close_all(self) -> None:
        for session_id in list(self._sessions):
            self.discard(session_id)

    def __len__(self) -> int:
        return len(self._sessions)


def session_id_from_cookie(session_cookie: Optional[str]) -> Optional[str]:
    """Validate the signed cookie and return the session id inside it.

    Args:
        session_cookie: Signed session cookie value.

    Returns:
        The session id if the signature is valid and unexpired, None otherwise.
    """
    if not session_cookie:
        return None

    try:
        return serializer.loads(session_cookie, max_age=SESSION_MAX_AGE)
    except (BadSignature, SignatureExpired):
        return None


def set_session_cookie(response: Response, session_id: str) -> None:
    response.set_cookie(
        key=COOKIE_NAME,
        value=serializer.dumps(session_id),
        max_age=SESSION_MAX_AGE,
        httponly=True,
        secure=COOKIE_SECURE,
        samesite="lax",
    )


def get_hunt_session(request: Request, response: Response) -> HuntSession:
    """Get the HuntSession for this request, creating one if needed.

    Args:
        request: FastAPI request object.
        response: Response the new cookie is attached to.

    Returns:
        The caller's HuntSession.
    """
    registry: SessionRegistry = request.app.state.sessions

    session_id = session_id_from_cookie(request.cookies.get(COOKIE_NAME))
    session = registry.get(session_id) if session_id else None

    if session is None:
        session = registry.create()
        set_session_cookie(response, session.session_id)

    return session
