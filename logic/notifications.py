"""
Toast-style notifications.

State objects emit notifications instead of raising, so a failed backend
call never takes the page down. The HTTP layer either drains them
(polling) or forwards them to SSE subscribers as they arrive.
"""

from collections import deque
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Callable, Deque, Dict, List

MAX_PENDING = 50

DEFAULT = "default"
DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    variant: str = DEFAULT
    time: str = field(default_factory=lambda: datetime.now().strftime("%Y-%m-%d %H:%M:%S"))

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


NotificationListener = Callable[[Notification], None]


class Notifier:
    """Collects notifications for one browser session."""

    def __init__(self, max_pending: int = MAX_PENDING):
        self._pending: Deque[Notification] = deque(maxlen=max_pending)
        self._listeners: List[NotificationListener] = []

    def notify(self, title: str, description: str, variant: str = DEFAULT) -> Notification:
        notification = Notification(title=title, description=description, variant=variant)
        self._pending.append(notification)
        for listener in list(self._listeners):
            listener(notification)
        return notification

    def error(self, title: str, description: str) -> Notification:
        return self.notify(title, description, variant=DESTRUCTIVE)

    def pending(self) -> List[Notification]:
        return list(self._pending)

    def drain(self) -> List[Notification]:
        """Return and forget every pending notification."""
        items = list(self._pending)
        self._pending.clear()
        return items

    def subscribe(self, listener: NotificationListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
