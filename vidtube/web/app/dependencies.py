"""
Application-wide dependencies for FastAPI.
"""
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from .config import Settings
from .db import get_db
from .errors import InvalidIdentifier, NotFound, Unauthorized
from .models import User
from .services.comment_service import CommentService
from .services.dashboard_service import DashboardService
from .services.like_service import LikeService
from .services.logging_service import user_id_var
from .services.media_service import MediaService
from .services.playlist_service import PlaylistService
from .services.subscription_service import SubscriptionService
from .services.tweet_service import TweetService
from .services.user_service import UserService, decode_access_token
from .services.video_service import VideoService

security = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_media_service(request: Request) -> MediaService:
    settings = request.app.state.settings
    return MediaService(request.app.state.media_host, settings.UPLOAD_TEMP_DIR)


def get_user_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings)
) -> UserService:
    return UserService(db, settings)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    service: UserService = Depends(get_user_service)
) -> User:
    """Resolve the bearer token to a stored user."""
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Unauthorized request")

    payload = decode_access_token(credentials.credentials, service.settings)
    user_id = payload.get("sub")
    if not user_id:
        raise Unauthorized("Invalid access token")

    try:
        user = await service.get_user(user_id)
    except (InvalidIdentifier, NotFound):
        raise Unauthorized("Invalid access token")

    user_id_var.set(str(user.id))
    return user


def get_video_service(
    db: AsyncSession = Depends(get_db),
    media: MediaService = Depends(get_media_service),
    settings: Settings = Depends(get_app_settings)
) -> VideoService:
    return VideoService(db, media, settings.MAX_PAGE_LIMIT)


def get_comment_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings)
) -> CommentService:
    return CommentService(db, settings.MAX_PAGE_LIMIT)


def get_tweet_service(db: AsyncSession = Depends(get_db)) -> TweetService:
    return TweetService(db)


def get_playlist_service(db: AsyncSession = Depends(get_db)) -> PlaylistService:
    return PlaylistService(db)


def get_like_service(db: AsyncSession = Depends(get_db)) -> LikeService:
    return LikeService(db)


def get_subscription_service(db: AsyncSession = Depends(get_db)) -> SubscriptionService:
    return SubscriptionService(db)


def get_dashboard_service(db: AsyncSession = Depends(get_db)) -> DashboardService:
    return DashboardService(db)
