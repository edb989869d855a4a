"""
Dashboard statistics route.
"""

from fastapi import APIRouter, Depends

from ..models import StatsResponse
from ..services import StatsService
from .dependencies import get_stats_service

router = APIRouter(tags=["stats"])


@router.get("/stats", response_model=StatsResponse)
async def get_stats(service: StatsService = Depends(get_stats_service)):
    """Task counts by status plus overdue, evaluated now."""
    return StatsResponse(**await service.get_stats())
