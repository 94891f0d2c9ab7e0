"""
Map viewport routes.

Zoom buttons, pointer events from the drag surface, and marker placement
for the current container size.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from logic.hunt import HuntSession
from logic.validation import sanitise_container_width, sanitise_float, sanitise_pointer_event
from user_context import get_hunt_session

router = APIRouter(prefix="/api/viewport")


class PointerEvent(BaseModel):
    """A pointer or touch event on the map surface."""

    event: str
    x: float = 0.0
    y: float = 0.0
    marker_id: Optional[str] = None


@router.get("")
async def get_viewport(hunt: HuntSession = Depends(get_hunt_session)):
    view = await hunt.ensure_view()
    return view.viewport.transform()


@router.post("/zoom_in")
async def zoom_in(hunt: HuntSession = Depends(get_hunt_session)):
    view = await hunt.ensure_view()
    view.viewport.zoom_in()
    return view.viewport.transform()


@router.post("/zoom_out")
async def zoom_out(hunt: HuntSession = Depends(get_hunt_session)):
    view = await hunt.ensure_view()
    view.viewport.zoom_out()
    return view.viewport.transform()


@router.post("/pointer")
async def pointer(data: PointerEvent, hunt: HuntSession = Depends(get_hunt_session)):
    """Apply a pointer event.

    A press on a marker opens that treasure's detail modal and does not
    start a pan.

    Raises:
        HTTPException: If marker_id names a treasure with no marker on the map.
    """
    view = await hunt.ensure_view()
    event = sanitise_pointer_event(data.event)
    x = sanitise_float(data.x, field="x")
    y = sanitise_float(data.y, field="y")

    marker = None
    if data.marker_id is not None:
        marker = next((t for t in view.selected_treasures if t.id == data.marker_id), None)
        if marker is None:
            raise HTTPException(404, f"No marker for treasure '{data.marker_id}'")

    return view.pointer(event, x, y, marker)


@router.get("/markers")
async def markers(
        container_width: float = Query(..., description="Rendered width of the map container in pixels"),
        hunt: HuntSession = Depends(get_hunt_session),
):
    """Marker positions for the selected treasures.

    Positions are in the unscaled container; the returned viewport transform
    (pan and zoom) is applied to the container as a whole.
    """
    view = await hunt.ensure_view()
    return view.markers(sanitise_container_width(container_width))
