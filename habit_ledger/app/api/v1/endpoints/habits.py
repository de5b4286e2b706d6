"""
Habit endpoints for API v1.

Every route is scoped to the owner resolved from the bearer token.
Records are addressed by date for reads and by id for deletion.

``/habits/suggestions`` is declared before ``/habits/{date}`` so that
the literal path is not captured as a date.
"""

from typing import List

from fastapi import APIRouter, Depends, Query, status

from habit_ledger.app.api.deps import get_aggregation_service, get_ledger_service
from habit_ledger.app.core.security import get_current_owner
from habit_ledger.app.schemas.habit import HabitCreate, HabitCreated, HabitRead, Suggestion
from habit_ledger.app.services.aggregation_service import AggregationService
from habit_ledger.app.services.ledger_service import LedgerService

router = APIRouter()


@router.get("/suggestions", response_model=List[Suggestion])
async def list_suggestions(
    owner: str = Depends(get_current_owner),
    aggregation: AggregationService = Depends(get_aggregation_service),
) -> List[Suggestion]:
    """Return previously used habit names, deduplicated case-insensitively."""
    return await aggregation.suggestions(owner)


@router.get("", response_model=List[HabitRead])
async def list_habits_range(
    start: str = Query(..., description="First date, YYYY-MM-DD"),
    end: str = Query(..., description="Last date (inclusive), YYYY-MM-DD"),
    owner: str = Depends(get_current_owner),
    ledger: LedgerService = Depends(get_ledger_service),
) -> List[HabitRead]:
    """Return all records between ``start`` and ``end`` in one call."""
    return await ledger.list_habits_range(owner, start, end)


@router.get("/{date}", response_model=List[HabitRead])
async def list_habits(
    date: str,
    owner: str = Depends(get_current_owner),
    ledger: LedgerService = Depends(get_ledger_service),
) -> List[HabitRead]:
    """Return the records stored for one date (possibly none)."""
    return await ledger.list_habits(owner, date)


@router.post("", response_model=HabitCreated, status_code=status.HTTP_201_CREATED)
async def create_habit(
    habit_in: HabitCreate,
    owner: str = Depends(get_current_owner),
    ledger: LedgerService = Depends(get_ledger_service),
) -> HabitCreated:
    """Record a habit completion and return its id."""
    habit_id = await ledger.create_habit(
        owner,
        habit_in.date,
        habit_in.name,
        note=habit_in.note,
        completed=habit_in.completed,
    )
    return HabitCreated(id=habit_id)


@router.delete("/{habit_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_habit(
    habit_id: str,
    owner: str = Depends(get_current_owner),
    ledger: LedgerService = Depends(get_ledger_service),
) -> None:
    """Delete a record by id.  Responds 404 if it no longer exists."""
    await ledger.delete_habit(owner, habit_id)
    return None
