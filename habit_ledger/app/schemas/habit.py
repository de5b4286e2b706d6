"""
Pydantic schemas for habit completion records and the derived views.

``HabitRecord`` is what the record store persists and returns; it
carries the owner.  ``HabitRead`` is the API representation and leaves
the owner out, since every route is already scoped to the caller.

Field-level validation of ``date`` and ``name`` is done by the ledger
service rather than here so that the same rules apply to in-process
callers and HTTP clients alike.
"""

from typing import Optional

from pydantic import BaseModel, Field


class HabitRecord(BaseModel):
    """A stored habit completion record."""

    id: str
    owner: str
    date: str
    name: str
    note: Optional[str] = None
    completed: bool = True
    created_at: str


class HabitCreate(BaseModel):
    """Schema for recording a habit completion."""

    date: str = Field(..., examples=["2024-01-05"], description="Calendar day, YYYY-MM-DD")
    name: str = Field(..., examples=["Run"])
    note: Optional[str] = Field(None, examples=["5k around the park"])
    completed: bool = Field(True, description="Whether the habit was done on that day")


class HabitCreated(BaseModel):
    id: str


class HabitRead(BaseModel):
    """Schema for reading a record through the API."""

    id: str
    date: str
    name: str
    note: Optional[str] = None
    completed: bool
    created_at: str

    model_config = {
        "from_attributes": True,
    }


class TrendPoint(BaseModel):
    """Number of completed records on one date."""

    date: str
    count: int


class Suggestion(BaseModel):
    """A previously used habit name and the note first recorded with it."""

    name: str
    note: Optional[str] = None
