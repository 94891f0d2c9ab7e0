"""
Domain models shared by the store, the state classes and the API.

Both models are frozen: a treasure never changes once fetched, and a
user identity is swapped out wholesale on sign-in or sign-out.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Treasure(BaseModel):
    """A point of interest on the map."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str = Field(..., description="Unique treasure identifier")
    name: str = Field(..., description="Display name")
    clue: str = Field(..., description="Clue text shown in the clue list")
    x: float = Field(..., description="X in native map pixels (reference width space)")
    y: float = Field(..., description="Y in native map pixels (reference width space)")
    description: str = Field("", description="Longer text shown once discovered")
    picture_url: Optional[str] = Field(None, description="Optional picture for the detail modal")


class UserIdentity(BaseModel):
    """The signed-in user as seen by the rest of the app."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    email: str
