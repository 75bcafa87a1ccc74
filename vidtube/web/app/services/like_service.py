"""
Like service: binary like state on videos, comments and tweets.
"""
from typing import Any, Dict, List

from ..models import Comment, Like, Tweet, User, Video
from . import queries
from .base_service import BaseService
from .toggle import toggle_pair
from .validators import get_or_404, parse_object_id


class LikeService(BaseService):
    """Each toggle returns True when the target is liked after the call."""

    async def toggle_video_like(self, video_id: Any, requester: User) -> bool:
        video_uuid = parse_object_id(video_id, "video")
        await get_or_404(self.db, Video, video_uuid, "video")
        return await toggle_pair(self.db, Like, {"owner_id": requester.id, "video_id": video_uuid})

    async def toggle_comment_like(self, comment_id: Any, requester: User) -> bool:
        comment_uuid = parse_object_id(comment_id, "comment")
        await get_or_404(self.db, Comment, comment_uuid, "comment")
        return await toggle_pair(self.db, Like, {"owner_id": requester.id, "comment_id": comment_uuid})

    async def toggle_tweet_like(self, tweet_id: Any, requester: User) -> bool:
        tweet_uuid = parse_object_id(tweet_id, "tweet")
        await get_or_404(self.db, Tweet, tweet_uuid, "tweet")
        return await toggle_pair(self.db, Like, {"owner_id": requester.id, "tweet_id": tweet_uuid})

    async def get_liked_videos(self, requester: User) -> List[Dict[str, Any]]:
        rows = (await self.db.execute(queries.liked_videos_query(requester.id))).mappings().all()
        return [queries.liked_video_row(row) for row in rows]
