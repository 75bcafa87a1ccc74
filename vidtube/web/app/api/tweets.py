"""
Tweet API endpoints.
"""
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..dependencies import get_current_user, get_tweet_service
from ..models import User
from ..responses import ok
from ..services.tweet_service import TweetService

router = APIRouter(prefix="/tweets", tags=["tweets"])


class TweetContent(BaseModel):
    content: Optional[str] = None


@router.post("")
async def create_tweet(
    payload: TweetContent,
    current_user: User = Depends(get_current_user),
    service: TweetService = Depends(get_tweet_service)
):
    tweet = await service.create_tweet(current_user, payload.content)
    return ok(tweet, "Tweet published successfully")


@router.get("/user/{user_id}")
async def get_user_tweets(
    user_id: str,
    current_user: User = Depends(get_current_user),
    service: TweetService = Depends(get_tweet_service)
):
    tweets = await service.get_user_tweets(user_id)
    return ok(tweets, "All tweets for the user fetched successfully")


@router.patch("/{tweet_id}")
async def update_tweet(
    tweet_id: str,
    payload: TweetContent,
    current_user: User = Depends(get_current_user),
    service: TweetService = Depends(get_tweet_service)
):
    tweet = await service.update_tweet(tweet_id, current_user, payload.content)
    return ok(tweet, "Tweet updated successfully")


@router.delete("/{tweet_id}")
async def delete_tweet(
    tweet_id: str,
    current_user: User = Depends(get_current_user),
    service: TweetService = Depends(get_tweet_service)
):
    await service.delete_tweet(tweet_id, current_user)
    return ok({}, "Tweet deleted successfully")
