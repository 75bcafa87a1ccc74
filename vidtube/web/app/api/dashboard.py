"""
Channel dashboard API endpoints.
"""
from fastapi import APIRouter, Depends

from ..dependencies import get_current_user, get_dashboard_service
from ..models import User
from ..responses import ok
from ..services.dashboard_service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats")
async def get_channel_stats(
    current_user: User = Depends(get_current_user),
    service: DashboardService = Depends(get_dashboard_service)
):
    return ok(await service.get_channel_stats(current_user), "Channel stats fetched successfully")


@router.get("/videos")
async def get_channel_videos(
    current_user: User = Depends(get_current_user),
    service: DashboardService = Depends(get_dashboard_service)
):
    return ok(await service.get_channel_videos(current_user), "Channel videos fetched successfully")
