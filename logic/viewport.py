"""
Map viewport transform.

Two independent scales apply to every marker:

- the layout scale, rendered container width over the reference width the
  treasure coordinates were authored against (changes on window resize);
- the interactive zoom, applied to the whole container together with the
  pan offset (changes on zoom buttons).

Markers are positioned with the layout scale only; the zoom lives in the
container transform. Keeping them apart means a resize never touches the
zoom state and treasure coordinates never need re-authoring.
"""

from typing import Dict, Iterable, List, Optional, Tuple

from .models import Treasure

REFERENCE_WIDTH = 900
MIN_ZOOM = 0.5
MAX_ZOOM = 3.0
ZOOM_STEP = 1.2


def layout_scale(container_width: float, reference_width: float = REFERENCE_WIDTH) -> float:
    """Ratio of the rendered container width to the reference map width."""
    if reference_width <= 0:
        raise ValueError("reference_width must be positive")
    return container_width / reference_width


def marker_position(treasure: Treasure, scale: float) -> Tuple[float, float]:
    """Position of a marker inside the unscaled container."""
    return treasure.x * scale, treasure.y * scale


def marker_positions(
        treasures: Iterable[Treasure], container_width: float, reference_width: float = REFERENCE_WIDTH
) -> List[Dict]:
    scale = layout_scale(container_width, reference_width)
    markers = []
    for t in treasures:
        left, top = marker_position(t, scale)
        markers.append({"id": t.id, "name": t.name, "left": left, "top": top})
    return markers


class Viewport:
    """Pan offset and zoom factor for one mounted map."""

    def __init__(
            self,
            min_zoom: float = MIN_ZOOM,
            max_zoom: float = MAX_ZOOM,
            step: float = ZOOM_STEP,
            initial_zoom: float = 1.0,
    ):
        if not 0 < min_zoom <= max_zoom:
            raise ValueError("zoom bounds must satisfy 0 < min_zoom <= max_zoom")
        if step <= 1:
            raise ValueError("zoom step must be greater than 1")

        self.min_zoom = min_zoom
        self.max_zoom = max_zoom
        self.step = step
        self.zoom = min(max(initial_zoom, min_zoom), max_zoom)
        self.pan_x = 0.0
        self.pan_y = 0.0
        self.dragging = False
        self._drag_ref: Optional[Tuple[float, float]] = None

    # ---- zoom ----

    def zoom_in(self) -> float:
        self.zoom = min(self.zoom * self.step, self.max_zoom)
        return self.zoom

    def zoom_out(self) -> float:
        self.zoom = max(self.zoom / self.step, self.min_zoom)
        return self.zoom

    # ---- pan ----

    def start_drag(self, px: float, py: float) -> None:
        self.dragging = True
        self._drag_ref = (px - self.pan_x, py - self.pan_y)

    def move_drag(self, px: float, py: float) -> bool:
        """Update the pan offset; ignored unless a drag is in progress."""
        if not self.dragging or self._drag_ref is None:
            return False
        ref_x, ref_y = self._drag_ref
        self.pan_x = px - ref_x
        self.pan_y = py - ref_y
        return True

    def end_drag(self) -> None:
        self.dragging = False
        self._drag_ref = None

    def pointer_down(self, px: float, py: float, on_marker: bool = False) -> bool:
        """Handle a press on the map surface.

        A press on a marker is consumed by the marker and never reaches the
        drag surface underneath.

        Returns:
            True if a drag started.
        """
        if on_marker:
            return False
        self.start_drag(px, py)
        return True

    # ---- output ----

    def transform(self) -> Dict:
        return {
            "zoom": self.zoom,
            "pan": {"x": self.pan_x, "y": self.pan_y},
            "dragging": self.dragging,
            "css": f"translate({self.pan_x:g}px, {self.pan_y:g}px) scale({self.zoom:g})",
        }
