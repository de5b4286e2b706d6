"""
Trend endpoint for API v1.
"""

from typing import List

from fastapi import APIRouter, Depends

from habit_ledger.app.api.deps import get_aggregation_service
from habit_ledger.app.core.security import get_current_owner
from habit_ledger.app.schemas.habit import TrendPoint
from habit_ledger.app.services.aggregation_service import AggregationService

router = APIRouter()


@router.get("", response_model=List[TrendPoint])
async def get_trends(
    owner: str = Depends(get_current_owner),
    aggregation: AggregationService = Depends(get_aggregation_service),
) -> List[TrendPoint]:
    """Completed habits per date, most recent first, at most 30 dates."""
    return await aggregation.trends(owner)
