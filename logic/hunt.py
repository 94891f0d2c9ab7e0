"""
Hunt view and hunt session.

A HuntSession lives as long as the browser's session cookie and owns the
auth context and notifications. A HuntView is what one page load sees:
catalog, discoveries, search box, map viewport and the detail modal.
Remounting (a page reload) disposes the old view, so any fetch still in
flight for it is discarded, and the ad hoc local selection is lost.
"""

import asyncio
from typing import Any, Dict, List, Optional

from .catalog import CatalogState
from .discovery import DiscoveryOutcome, DiscoveryState
from .models import Treasure
from .notifications import Notifier
from .search import filter_treasures
from .session import SessionContext
from .viewport import Viewport, layout_scale, marker_positions


def treasure_to_dict(treasure: Treasure) -> Dict[str, Any]:
    return treasure.model_dump()


class HuntView:

    def __init__(self, store, session: SessionContext, notifier: Notifier, config: Dict[str, Any]):
        map_config = config["map"]
        zoom = map_config["zoom"]

        self.session = session
        self.notifier = notifier
        self.reference_width = map_config["reference_width"]
        self.map_image = map_config["image"]
        self.catalog = CatalogState(store, notifier)
        self.discoveries = DiscoveryState(store, session, notifier)
        self.viewport = Viewport(
            min_zoom=zoom["min"], max_zoom=zoom["max"], step=zoom["step"], initial_zoom=zoom["initial"]
        )
        self.query = ""
        self.local_selection: List[Treasure] = []
        self.active_treasure: Optional[Treasure] = None
        self.mounted = False

    async def mount(self) -> None:
        """Fetch the catalog and, if signed in, the user's discoveries."""
        self.mounted = True
        await asyncio.gather(self.catalog.load(), self.discoveries.settle())

    def unmount(self) -> None:
        self.mounted = False
        self.catalog.close()
        self.discoveries.close()

    # ---- search ----

    @property
    def suggestions(self) -> List[Treasure]:
        return filter_treasures(self.catalog.treasures, self.query)

    def set_query(self, query: str) -> List[Treasure]:
        self.query = query
        return self.suggestions

    # ---- selection ----

    @property
    def selected_treasures(self) -> List[Treasure]:
        if self.session.is_authenticated:
            return self.discoveries.treasures
        return list(self.local_selection)

    def is_selected(self, treasure_id: str) -> bool:
        return any(t.id == treasure_id for t in self.selected_treasures)

    async def select(self, treasure: Treasure) -> DiscoveryOutcome:
        """Select a treasure from the suggestions or the clue list.

        Signed-in users get a persisted discovery. Anonymous users get a
        local selection that is dropped on the next mount.
        """
        self.query = ""

        if self.session.is_authenticated:
            return await self.discoveries.add(treasure)

        if any(t.id == treasure.id for t in self.local_selection):
            return DiscoveryOutcome.ALREADY_DISCOVERED
        self.local_selection.append(treasure)
        return DiscoveryOutcome.ADDED

    async def deselect(self, treasure_id: str) -> DiscoveryOutcome:
        if self.session.is_authenticated:
            outcome = await self.discoveries.remove(treasure_id)
        elif any(t.id == treasure_id for t in self.local_selection):
            self.local_selection = [t for t in self.local_selection if t.id != treasure_id]
            outcome = DiscoveryOutcome.REMOVED
        else:
            outcome = DiscoveryOutcome.NOT_DISCOVERED

        if outcome.ok and self.active_treasure is not None and self.active_treasure.id == treasure_id:
            self.active_treasure = None
        return outcome

    # ---- detail modal ----

    def open_treasure(self, treasure: Treasure) -> Treasure:
        self.active_treasure = treasure
        return treasure

    def close_treasure(self) -> None:
        self.active_treasure = None

    # ---- map ----

    def pointer(self, event: str, x: float, y: float, marker: Optional[Treasure] = None) -> Dict[str, Any]:
        """Dispatch a pointer event from the map surface.

        Args:
            event: One of down, move, up, leave.
            x: Pointer x in client coordinates.
            y: Pointer y in client coordinates.
            marker: Treasure whose marker was pressed, if any.

        Returns:
            The viewport transform, plus the opened treasure for a marker press.
        """
        result: Dict[str, Any] = {}

        if event == "down":
            started = self.viewport.pointer_down(x, y, on_marker=marker is not None)
            if marker is not None:
                result["opened"] = treasure_to_dict(self.open_treasure(marker))
            result["drag_started"] = started
        elif event == "move":
            self.viewport.move_drag(x, y)
        else:
            self.viewport.end_drag()

        result["viewport"] = self.viewport.transform()
        return result

    def markers(self, container_width: float) -> Dict[str, Any]:
        return {
            "layout_scale": layout_scale(container_width, self.reference_width),
            "reference_width": self.reference_width,
            "markers": marker_positions(self.selected_treasures, container_width, self.reference_width),
            "viewport": self.viewport.transform(),
        }

    def snapshot(self) -> Dict[str, Any]:
        user = self.session.current_user
        return {
            "user": user.model_dump() if user else None,
            "map_image": self.map_image,
            "loading": self.catalog.loading,
            "catalog": [
                {**treasure_to_dict(t), "selected": self.is_selected(t.id)}
                for t in self.catalog.treasures
            ],
            "query": self.query,
            "suggestions": [treasure_to_dict(t) for t in self.suggestions],
            "selected": [treasure_to_dict(t) for t in self.selected_treasures],
            "active_treasure": treasure_to_dict(self.active_treasure) if self.active_treasure else None,
            "viewport": self.viewport.transform(),
        }


class HuntSession:
    """Everything tied to one browser session cookie."""

    def __init__(self, session_id: str, store, config: Dict[str, Any]):
        self.session_id = session_id
        self.store = store
        self.config = config
        self.context = SessionContext()
        self.notifier = Notifier()
        self.view: Optional[HuntView] = None

    async def mount(self) -> HuntView:
        if self.view is not None:
            self.view.unmount()
        self.view = HuntView(self.store, self.context, self.notifier, self.config)
        await self.view.mount()
        return self.view

    async def ensure_view(self) -> HuntView:
        if self.view is None:
            return await self.mount()
        return self.view

    async def settle(self) -> None:
        if self.view is not None:
            await self.view.discoveries.settle()

    def close(self) -> None:
        if self.view is not None:
            self.view.unmount()
            self.view = None
