"""
Channel dashboard service.

Aggregates totals for the authenticated user's channel. Like totals count
likes received on the user's content, not likes the user gave.
"""
from typing import Any, Dict, List

from ..models import User
from . import queries
from .base_service import BaseService


class DashboardService(BaseService):

    async def get_channel_stats(self, requester: User) -> Dict[str, Any]:
        video_stats = (await self.db.execute(queries.video_stats_query(requester.id))).mappings().first()
        total_subscribers = await self.db.scalar(queries.subscriber_count_query(requester.id))
        total_video_likes = await self.db.scalar(queries.video_like_count_query(requester.id))
        total_comment_likes = await self.db.scalar(queries.comment_like_count_query(requester.id))
        total_tweet_likes = await self.db.scalar(queries.tweet_like_count_query(requester.id))

        return {
            "totalVideos": video_stats["total_videos"] if video_stats else 0,
            "totalViews": video_stats["total_views"] if video_stats else 0,
            "totalSubscribers": total_subscribers or 0,
            "totalVideoLikes": total_video_likes or 0,
            "totalCommentLikes": total_comment_likes or 0,
            "totalTweetLikes": total_tweet_likes or 0,
        }

    async def get_channel_videos(self, requester: User) -> List[Dict[str, Any]]:
        rows = (await self.db.execute(queries.channel_videos_query(requester.id))).mappings().all()
        return [queries.channel_video_row(row) for row in rows]
