"""
Tweet service: short text posts owned by a user.
"""
import logging
from typing import Any, Dict, List

from sqlalchemy.exc import SQLAlchemyError

from ..errors import InternalError
from ..models import Tweet, User
from . import queries
from .base_service import BaseService
from .ownership import guarded_delete, guarded_update
from .validators import get_or_404, parse_object_id, require_fields

logger = logging.getLogger(__name__)


def tweet_record(tweet: Tweet) -> Dict[str, Any]:
    return {
        "id": tweet.id,
        "content": tweet.content,
        "owner": tweet.owner_id,
        "createdAt": tweet.created_at,
        "updatedAt": tweet.updated_at,
    }


class TweetService(BaseService):

    async def create_tweet(self, requester: User, content: str) -> Dict[str, Any]:
        require_fields("Content is required for a tweet", content)

        tweet = Tweet(owner_id=requester.id, content=content.strip())
        self.db.add(tweet)
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("Failed to store tweet for user %s", requester.id)
            raise InternalError("Something went wrong while publishing your tweet")

        await self.db.refresh(tweet)
        return tweet_record(tweet)

    async def get_user_tweets(self, user_id: Any) -> List[Dict[str, Any]]:
        user_uuid = parse_object_id(user_id, "user")
        await get_or_404(self.db, User, user_uuid, "user")

        rows = (await self.db.execute(queries.user_tweets_query(user_uuid))).mappings().all()
        return [queries.post_row(row) for row in rows]

    async def update_tweet(self, tweet_id: Any, requester: User, content: str) -> Dict[str, Any]:
        tweet_uuid = parse_object_id(tweet_id, "tweet")
        require_fields("Content is required for updating the tweet", content)
        tweet = await get_or_404(self.db, Tweet, tweet_uuid, "tweet")

        await guarded_update(
            self.db, tweet, requester.id,
            {"content": content.strip()},
            "update the content of this tweet"
        )
        return tweet_record(tweet)

    async def delete_tweet(self, tweet_id: Any, requester: User) -> None:
        tweet_uuid = parse_object_id(tweet_id, "tweet")
        tweet = await get_or_404(self.db, Tweet, tweet_uuid, "tweet")

        await guarded_delete(self.db, tweet, requester.id, "delete this tweet")
        logger.info("User %s deleted tweet %s", requester.id, tweet_uuid)
