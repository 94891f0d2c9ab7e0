"""
Treasure API routes.

This module contains endpoints for the clue catalog, the search box, the
selection list, persisted discoveries and the treasure detail modal.
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from logic.discovery import DiscoveryOutcome
from logic.errors import AuthenticationRequired
from logic.hunt import HuntSession, HuntView, treasure_to_dict
from logic.models import Treasure
from logic.validation import sanitise_query
from user_context import get_hunt_session

router = APIRouter()


class TreasureRef(BaseModel):
    """Request model referencing a treasure by id."""

    treasure_id: str


class SearchRequest(BaseModel):
    """Request model for updating the search box."""

    query: str = ""


def require_treasure(view: HuntView, treasure_id: str) -> Treasure:
    treasure = view.catalog.get(treasure_id)
    if treasure is None:
        raise HTTPException(404, f"Treasure '{treasure_id}' not found")
    return treasure


def selection_payload(view: HuntView, outcome: DiscoveryOutcome) -> dict:
    return {
        "success": outcome.ok,
        "outcome": outcome.value,
        "persisted": view.session.is_authenticated,
        "selected": [treasure_to_dict(t) for t in view.selected_treasures],
    }


# ---- catalog ----

@router.get("/api/treasures")
async def list_treasures(hunt: HuntSession = Depends(get_hunt_session)):
    """Get the treasure catalog of the mounted view.

    Returns:
        Dictionary with the loading flag and every treasure, each flagged
        with whether it is currently selected.
    """
    view = await hunt.ensure_view()
    return {
        "loading": view.catalog.loading,
        "treasures": [
            {**treasure_to_dict(t), "selected": view.is_selected(t.id)}
            for t in view.catalog.treasures
        ],
    }


@router.get("/api/treasures/{treasure_id}")
async def get_treasure(treasure_id: str, hunt: HuntSession = Depends(get_hunt_session)):
    view = await hunt.ensure_view()
    return treasure_to_dict(require_treasure(view, treasure_id))


# ---- search ----

@router.get("/api/search")
async def get_search(hunt: HuntSession = Depends(get_hunt_session)):
    view = await hunt.ensure_view()
    return {"query": view.query, "suggestions": [treasure_to_dict(t) for t in view.suggestions]}


@router.post("/api/search")
async def update_search(data: SearchRequest, hunt: HuntSession = Depends(get_hunt_session)):
    """Set the search box text and return the matching suggestions.

    A blank query returns no suggestions.
    """
    view = await hunt.ensure_view()
    suggestions = view.set_query(sanitise_query(data.query))
    return {"query": view.query, "suggestions": [treasure_to_dict(t) for t in suggestions]}


# ---- selection ----

@router.get("/api/selection")
async def get_selection(hunt: HuntSession = Depends(get_hunt_session)):
    view = await hunt.ensure_view()
    return {
        "persisted": view.session.is_authenticated,
        "selected": [treasure_to_dict(t) for t in view.selected_treasures],
    }


@router.post("/api/selection")
async def select_treasure(data: TreasureRef, hunt: HuntSession = Depends(get_hunt_session)):
    """Select a treasure from the suggestions or the clue list.

    Signed in, this records a discovery; otherwise the selection is kept
    locally until the page is remounted. The search box is cleared either way.

    Raises:
        HTTPException: If the treasure is not in the catalog.
    """
    view = await hunt.ensure_view()
    treasure = require_treasure(view, data.treasure_id)
    outcome = await view.select(treasure)
    return selection_payload(view, outcome)


@router.delete("/api/selection/{treasure_id}")
async def deselect_treasure(treasure_id: str, hunt: HuntSession = Depends(get_hunt_session)):
    view = await hunt.ensure_view()
    outcome = await view.deselect(treasure_id)
    return selection_payload(view, outcome)


# ---- discoveries ----

@router.get("/api/discoveries")
async def list_discoveries(hunt: HuntSession = Depends(get_hunt_session)):
    view = await hunt.ensure_view()
    return {"discoveries": [treasure_to_dict(t) for t in view.discoveries.treasures]}


@router.post("/api/discoveries")
async def add_discovery(data: TreasureRef, hunt: HuntSession = Depends(get_hunt_session)):
    """Record that the signed-in user found a treasure.

    Returns:
        Dictionary with success status and the discovered set.

    Raises:
        AuthenticationRequired: Not signed in (answered with 401).
        HTTPException: 404 unknown treasure, 409 already discovered or the
            user changed mid-write, 502 the store rejected the write.
    """
    view = await hunt.ensure_view()
    treasure = require_treasure(view, data.treasure_id)

    outcome = await view.discoveries.add(treasure)
    if outcome is DiscoveryOutcome.AUTH_REQUIRED:
        raise AuthenticationRequired()
    if outcome is DiscoveryOutcome.ALREADY_DISCOVERED:
        raise HTTPException(409, f"Treasure '{treasure.id}' already discovered")
    if outcome is DiscoveryOutcome.FAILED:
        raise HTTPException(502, "Failed to save treasure")
    if outcome is DiscoveryOutcome.SUPERSEDED:
        raise HTTPException(409, "Signed-in user changed before the treasure was saved")

    return {
        "success": True,
        "id": treasure.id,
        "discoveries": [treasure_to_dict(t) for t in view.discoveries.treasures],
    }


@router.delete("/api/discoveries/{treasure_id}")
async def remove_discovery(treasure_id: str, hunt: HuntSession = Depends(get_hunt_session)):
    """Forget a discovery.

    Raises:
        AuthenticationRequired: Not signed in (answered with 401).
        HTTPException: 404 not discovered, 409 the user changed mid-delete,
            502 the store rejected the delete.
    """
    view = await hunt.ensure_view()

    outcome = await view.discoveries.remove(treasure_id)
    if outcome is DiscoveryOutcome.AUTH_REQUIRED:
        raise AuthenticationRequired("Please sign in to manage treasures")
    if outcome is DiscoveryOutcome.NOT_DISCOVERED:
        raise HTTPException(404, f"Treasure '{treasure_id}' is not discovered")
    if outcome is DiscoveryOutcome.FAILED:
        raise HTTPException(502, "Failed to remove treasure")
    if outcome is DiscoveryOutcome.SUPERSEDED:
        raise HTTPException(409, "Signed-in user changed before the treasure was removed")

    return {
        "success": True,
        "id": treasure_id,
        "discoveries": [treasure_to_dict(t) for t in view.discoveries.treasures],
    }


# ---- detail modal ----

@router.post("/api/modal/{treasure_id}")
async def open_modal(treasure_id: str, hunt: HuntSession = Depends(get_hunt_session)):
    view = await hunt.ensure_view()
    treasure = view.open_treasure(require_treasure(view, treasure_id))
    return {"active_treasure": treasure_to_dict(treasure)}


@router.delete("/api/modal")
async def close_modal(hunt: HuntSession = Depends(get_hunt_session)):
    view = await hunt.ensure_view()
    view.close_treasure()
    return {"active_treasure": None}
