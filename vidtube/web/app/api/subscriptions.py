"""
Channel subscription API endpoints.
"""
from fastapi import APIRouter, Depends

from ..dependencies import get_current_user, get_subscription_service
from ..models import User
from ..responses import ok
from ..services.subscription_service import SubscriptionService

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


@router.post("/c/{channel_id}")
async def toggle_subscription(
    channel_id: str,
    current_user: User = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service)
):
    if await service.toggle_subscription(channel_id, current_user):
        return ok({}, "Subscribed to channel successfully")
    return ok({}, "Unsubscribed from channel successfully")


@router.get("/c/{channel_id}")
async def get_channel_subscribers(
    channel_id: str,
    current_user: User = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service)
):
    subscribers = await service.get_channel_subscribers(channel_id)
    return ok(subscribers, "Subscribers fetched successfully")


@router.get("/u/{subscriber_id}")
async def get_subscribed_channels(
    subscriber_id: str,
    current_user: User = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service)
):
    channels = await service.get_subscribed_channels(subscriber_id)
    return ok(channels, "Subscribed channels fetched successfully")
