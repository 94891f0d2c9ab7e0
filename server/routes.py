"""
Basic API routes.

This module contains the page-level endpoints: mounting a view on page
load, reading the full view snapshot, and the application version.
"""

import json
import os

from fastapi import APIRouter, Depends

from logic.hunt import HuntSession
from user_context import get_hunt_session

router = APIRouter()

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
VERSION_PATH = os.path.join(BASE_DIR, "version.json")
DEFAULT_VERSION = "0.1.0"


@router.post("/api/mount")
async def mount(hunt: HuntSession = Depends(get_hunt_session)):
    """Mount a fresh view, as on a full page load.

    The previous view (if any) is disposed: its pending fetches are
    discarded and its local selection, search text and viewport are reset.
    The sign-in state carries over.

    Returns:
        Snapshot of the new view.
    """
    view = await hunt.mount()
    return view.snapshot()


@router.get("/api/state")
async def get_state(hunt: HuntSession = Depends(get_hunt_session)):
    """Get a snapshot of the current view, mounting one if needed."""
    view = await hunt.ensure_view()
    return view.snapshot()


@router.get("/api/version")
def get_version():
    """Get the application version.

    Returns:
        Dictionary with version string.
    """
    try:
        with open(VERSION_PATH, "r", encoding="utf-8") as f:
            version_data = json.load(f)
        return version_data
    except (FileNotFoundError, json.JSONDecodeError, KeyError):
        return {"version": DEFAULT_VERSION}
