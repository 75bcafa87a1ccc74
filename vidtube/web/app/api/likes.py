"""
Like toggle API endpoints.
"""
from fastapi import APIRouter, Depends

from ..dependencies import get_current_user, get_like_service
from ..models import User
from ..responses import ok
from ..services.like_service import LikeService

router = APIRouter(prefix="/likes", tags=["likes"])


def toggled(liked: bool, target: str):
    state = "liked" if liked else "unliked"
    return ok({}, f"{target} {state} successfully")


@router.post("/toggle/v/{video_id}")
async def toggle_video_like(
    video_id: str,
    current_user: User = Depends(get_current_user),
    service: LikeService = Depends(get_like_service)
):
    return toggled(await service.toggle_video_like(video_id, current_user), "Video")


@router.post("/toggle/c/{comment_id}")
async def toggle_comment_like(
    comment_id: str,
    current_user: User = Depends(get_current_user),
    service: LikeService = Depends(get_like_service)
):
    return toggled(await service.toggle_comment_like(comment_id, current_user), "Comment")


@router.post("/toggle/t/{tweet_id}")
async def toggle_tweet_like(
    tweet_id: str,
    current_user: User = Depends(get_current_user),
    service: LikeService = Depends(get_like_service)
):
    return toggled(await service.toggle_tweet_like(tweet_id, current_user), "Tweet")


@router.get("/videos")
async def get_liked_videos(
    current_user: User = Depends(get_current_user),
    service: LikeService = Depends(get_like_service)
):
    return ok(await service.get_liked_videos(current_user), "Liked videos fetched successfully")
