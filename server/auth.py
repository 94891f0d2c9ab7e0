"""Email/password authentication routes.

Credentials are validated locally before anything is sent to the store.
A successful sign-in puts the user on the session context, which makes the
mounted view load that user's discoveries; sign-out clears them at once.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from logic.errors import AuthenticationError, BackendError
from logic.hunt import HuntSession
from logic.validation import validate_credentials
from user_context import get_hunt_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth")


class Credentials(BaseModel):
    """Request model for sign-up and sign-in."""

    email: str
    password: str


def _min_password_length(request: Request) -> int:
    return request.app.state.config["auth"]["min_password_length"]


@router.post("/signup")
async def sign_up(
        data: Credentials, request: Request, hunt: HuntSession = Depends(get_hunt_session)
):
    """Create an account.

    The user is not signed in by this call; they sign in afterwards.

    Returns:
        Success message and the new user.

    Raises:
        HTTPException: 400 if the provider rejects the sign-up, 503 if the
            backend is unavailable.
    """
    email, password = validate_credentials(data.email, data.password, _min_password_length(request))

    try:
        user = await hunt.store.sign_up(email, password)
    except AuthenticationError as e:
        logger.warning("Sign-up rejected for %s: %s", email, e)
        hunt.notifier.error("Authentication Error", str(e))
        raise HTTPException(status_code=400, detail=str(e))
    except BackendError as e:
        logger.error("Sign-up failed for %s: %s", email, e)
        hunt.notifier.error("Authentication Error", "Could not reach the server, please try again")
        raise HTTPException(status_code=503, detail="Authentication service unavailable")

    hunt.notifier.notify("Account created", "You can now sign in.")
    return {"success": True, "user": user.model_dump()}


@router.post("/signin")
async def sign_in(
        data: Credentials, request: Request, hunt: HuntSession = Depends(get_hunt_session)
):
    """Sign in and load the user's discoveries into the mounted view.

    Raises:
        HTTPException: 400 on bad credentials, 503 if the backend is unavailable.
    """
    email, password = validate_credentials(data.email, data.password, _min_password_length(request))

    try:
        user = await hunt.store.sign_in(email, password)
    except AuthenticationError as e:
        logger.warning("Sign-in rejected for %s: %s", email, e)
        hunt.notifier.error("Authentication Error", str(e))
        raise HTTPException(status_code=400, detail=str(e))
    except BackendError as e:
        logger.error("Sign-in failed for %s: %s", email, e)
        hunt.notifier.error("Authentication Error", "Could not reach the server, please try again")
        raise HTTPException(status_code=503, detail="Authentication service unavailable")

    hunt.context.set_user(user)
    await hunt.settle()

    return {"success": True, "user": user.model_dump()}


@router.post("/logout")
async def logout(hunt: HuntSession = Depends(get_hunt_session)):
    """Log out the current user.

    The discovered set is cleared immediately; no backend call is made.
    """
    hunt.context.set_user(None)
    return {"success": True, "message": "Logged out successfully"}


@router.get("/me")
async def get_current_user(hunt: HuntSession = Depends(get_hunt_session)):
    """Get current authenticated user information.

    Returns:
        JSON with user data if authenticated, or null user if not.
    """
    user = hunt.context.current_user
    if user:
        return {"authenticated": True, "user": user.model_dump()}

    return {"authenticated": False, "user": None}
