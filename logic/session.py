"""
Session context: who is signed in, and who wants to know when that changes.

One SessionContext exists per browser session and is handed explicitly to
the state objects that depend on it.
"""

import logging
from typing import Callable, List, Optional

from .models import UserIdentity

logger = logging.getLogger(__name__)

UserListener = Callable[[Optional[UserIdentity]], None]


class SessionContext:
    """Current user plus a subscribe/unsubscribe mechanism for auth changes."""

    def __init__(self, user: Optional[UserIdentity] = None):
        self._user = user
        self._listeners: List[UserListener] = []

    @property
    def current_user(self) -> Optional[UserIdentity]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    def subscribe(self, listener: UserListener) -> Callable[[], None]:
        """Register a listener for sign-in/sign-out events.

        Args:
            listener: Called synchronously with the new user (or None).

        Returns:
            A callable that removes the listener again.
        """
        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: UserListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def set_user(self, user: Optional[UserIdentity]) -> None:
        """Swap the current user and notify listeners if it changed."""
        if user == self._user:
            return

        self._user = user
        logger.info("Session user changed to %s", user.email if user else "anonymous")

        for listener in list(self._listeners):
            listener(user)
