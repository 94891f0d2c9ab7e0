"""
Treasure catalog state.

The full treasure table is fetched once when a view mounts. There is no
pagination and no refresh: the catalog is static reference data and is
only reloaded by remounting the page.
"""

import logging
from typing import Dict, List, Optional

from .errors import BackendError
from .models import Treasure
from .notifications import Notifier

logger = logging.getLogger(__name__)


class CatalogState:

    def __init__(self, store, notifier: Notifier):
        self._store = store
        self._notifier = notifier
        self._treasures: List[Treasure] = []
        self._by_id: Dict[str, Treasure] = {}
        self.loading = True
        self.closed = False

    @property
    def treasures(self) -> List[Treasure]:
        return list(self._treasures)

    def get(self, treasure_id: str) -> Optional[Treasure]:
        return self._by_id.get(treasure_id)

    async def load(self) -> bool:
        """Fetch every treasure from the store.

        Returns:
            True if the catalog was populated. On failure the catalog stays
            empty and a notification is emitted; nothing is raised.
        """
        try:
            treasures = await self._store.list_treasures()
        except BackendError as e:
            if self.closed:
                return False
            logger.error("Error fetching treasures: %s", e)
            self._notifier.error("Error", "Failed to load treasures")
            self.loading = False
            return False

        if self.closed:
            logger.debug("Catalog load finished after unmount; discarding result")
            return False

        self._treasures = list(treasures)
        self._by_id = {t.id: t for t in self._treasures}
        self.loading = False
        return True

    def close(self) -> None:
        self.closed = True
