"""
Read statements for listing and detail endpoints.

Every builder returns an executable ``Select``: filter, join the referenced
users projecting only their public fields, project a fixed column whitelist
and, for listings, paginate. The ``*_row`` helpers turn result rows into the
nested JSON shape returned to clients.
"""
import uuid
from typing import Any, Dict, Iterable, Optional, Tuple

from sqlalchemy import Select, asc, desc, func, select

from ..errors import InvalidInput
from ..models import Comment, Like, Playlist, PlaylistVideo, Subscription, Tweet, User, Video

VIDEO_SORT_FIELDS = {
    "title": Video.title,
    "views": Video.views,
    "duration": Video.duration,
    "createdAt": Video.created_at,
    "updatedAt": Video.updated_at,
}


def pagination(page: int, limit: int, max_limit: int = 100) -> Tuple[int, int]:
    """Return ``(skip, limit)`` for a 1-based page."""
    if page < 1:
        raise InvalidInput("Page must be a positive integer")
    if limit < 1 or limit > max_limit:
        raise InvalidInput(f"Limit must be between 1 and {max_limit}")
    return (page - 1) * limit, limit


def user_columns(prefix: str) -> Tuple[Any, ...]:
    return (
        User.id.label(f"{prefix}_id"),
        User.username.label(f"{prefix}_username"),
        User.avatar.label(f"{prefix}_avatar"),
    )


def nest_user(row: Any, prefix: str) -> Dict[str, Any]:
    return {
        "id": row[f"{prefix}_id"],
        "username": row[f"{prefix}_username"],
        "avatar": row[f"{prefix}_avatar"],
    }


# Videos

def _video_columns() -> Tuple[Any, ...]:
    return (
        Video.id, Video.title, Video.description, Video.thumbnail, Video.video_file,
        Video.duration, Video.views, Video.is_published, Video.created_at,
    )


def video_row(row: Any, owner_prefix: str = "owner") -> Dict[str, Any]:
    return {
        "id": row["id"],
        "title": row["title"],
        "description": row["description"],
        "thumbnail": row["thumbnail"],
        "videoFile": row["video_file"],
        "duration": row["duration"],
        "views": row["views"],
        "isPublished": row["is_published"],
        "createdAt": row["created_at"],
        "owner": nest_user(row, owner_prefix),
    }


def video_listing_query(
    skip: int,
    limit: int,
    query: Optional[str] = None,
    sort_by: Optional[str] = None,
    sort_type: Optional[str] = None,
    owner_id: Optional[uuid.UUID] = None
) -> Select:
    stmt = (
        select(*_video_columns(), *user_columns("owner"))
        .join(User, Video.owner_id == User.id)
    )

    if query:
        stmt = stmt.where(Video.title.icontains(query, autoescape=True))
    if owner_id is not None:
        stmt = stmt.where(Video.owner_id == owner_id)

    if sort_by:
        column = VIDEO_SORT_FIELDS.get(sort_by)
        if column is None:
            raise InvalidInput(f"Cannot sort videos by '{sort_by}'")
        stmt = stmt.order_by(asc(column) if sort_type == "asc" else desc(column))

    return stmt.offset(skip).limit(limit)


def video_detail_query(video_id: uuid.UUID) -> Select:
    return (
        select(*_video_columns(), *user_columns("owner"))
        .join(User, Video.owner_id == User.id)
        .where(Video.id == video_id)
    )


def channel_videos_query(owner_id: uuid.UUID) -> Select:
    return (
        select(
            Video.id, Video.title, Video.description, Video.thumbnail,
            Video.views, Video.duration, Video.is_published, Video.created_at,
        )
        .where(Video.owner_id == owner_id)
        .order_by(desc(Video.created_at))
    )


def channel_video_row(row: Any) -> Dict[str, Any]:
    return {
        "id": row["id"],
        "title": row["title"],
        "description": row["description"],
        "thumbnail": row["thumbnail"],
        "views": row["views"],
        "duration": row["duration"],
        "isPublished": row["is_published"],
        "createdAt": row["created_at"],
    }


# Comments and tweets

def video_comments_query(video_id: uuid.UUID, skip: int, limit: int) -> Select:
    return (
        select(Comment.id, Comment.content, Comment.created_at, Comment.updated_at, *user_columns("owner"))
        .join(User, Comment.owner_id == User.id)
        .where(Comment.video_id == video_id)
        .order_by(desc(Comment.created_at))
        .offset(skip)
        .limit(limit)
    )


def user_tweets_query(owner_id: uuid.UUID) -> Select:
    return (
        select(Tweet.id, Tweet.content, Tweet.created_at, Tweet.updated_at, *user_columns("owner"))
        .join(User, Tweet.owner_id == User.id)
        .where(Tweet.owner_id == owner_id)
        .order_by(desc(Tweet.created_at))
    )


def post_row(row: Any) -> Dict[str, Any]:
    """Shape shared by comments and tweets."""
    return {
        "id": row["id"],
        "content": row["content"],
        "createdAt": row["created_at"],
        "updatedAt": row["updated_at"],
        "owner": nest_user(row, "owner"),
    }


# Likes

def liked_videos_query(liker_id: uuid.UUID) -> Select:
    return (
        select(
            Like.id.label("like_id"), Like.created_at.label("liked_at"),
            *_video_columns(), *user_columns("owner"),
        )
        .join(Video, Like.video_id == Video.id)
        .join(User, Video.owner_id == User.id)
        .where(Like.owner_id == liker_id, Like.video_id.is_not(None))
        .order_by(desc(Like.created_at))
    )


def liked_video_row(row: Any) -> Dict[str, Any]:
    return {
        "likeId": row["like_id"],
        "likedAt": row["liked_at"],
        "video": video_row(row),
    }


# Playlists

def _playlist_columns() -> Tuple[Any, ...]:
    return (
        Playlist.id, Playlist.name, Playlist.description,
        Playlist.created_at, Playlist.updated_at, *user_columns("owner"),
    )


def playlist_detail_query(playlist_id: uuid.UUID) -> Select:
    return (
        select(*_playlist_columns())
        .join(User, Playlist.owner_id == User.id)
        .where(Playlist.id == playlist_id)
    )


def user_playlists_query(owner_id: uuid.UUID) -> Select:
    return (
        select(*_playlist_columns())
        .join(User, Playlist.owner_id == User.id)
        .where(Playlist.owner_id == owner_id)
        .order_by(desc(Playlist.created_at))
    )


def playlist_videos_query(playlist_ids: Iterable[uuid.UUID]) -> Select:
    return (
        select(PlaylistVideo.playlist_id, PlaylistVideo.position, *_video_columns(), *user_columns("owner"))
        .join(Video, PlaylistVideo.video_id == Video.id)
        .join(User, Video.owner_id == User.id)
        .where(PlaylistVideo.playlist_id.in_(list(playlist_ids)))
        .order_by(PlaylistVideo.playlist_id, PlaylistVideo.position)
    )


def playlist_row(row: Any, videos: list) -> Dict[str, Any]:
    return {
        "id": row["id"],
        "name": row["name"],
        "description": row["description"],
        "createdAt": row["created_at"],
        "updatedAt": row["updated_at"],
        "owner": nest_user(row, "owner"),
        "videos": videos,
        "totalVideos": len(videos),
    }


# Subscriptions

def channel_subscribers_query(channel_id: uuid.UUID) -> Select:
    return (
        select(Subscription.id, Subscription.created_at, *user_columns("subscriber"))
        .join(User, Subscription.subscriber_id == User.id)
        .where(Subscription.channel_id == channel_id)
        .order_by(desc(Subscription.created_at))
    )


def subscribed_channels_query(subscriber_id: uuid.UUID) -> Select:
    return (
        select(Subscription.id, Subscription.created_at, *user_columns("channel"))
        .join(User, Subscription.channel_id == User.id)
        .where(Subscription.subscriber_id == subscriber_id)
        .order_by(desc(Subscription.created_at))
    )


def subscription_row(row: Any, prefix: str) -> Dict[str, Any]:
    return {
        "id": row["id"],
        "createdAt": row["created_at"],
        prefix: nest_user(row, prefix),
    }


# Dashboard

def video_stats_query(owner_id: uuid.UUID) -> Select:
    return select(
        func.count(Video.id).label("total_videos"),
        func.coalesce(func.sum(Video.views), 0).label("total_views"),
    ).where(Video.owner_id == owner_id)


def subscriber_count_query(channel_id: uuid.UUID) -> Select:
    return select(func.count(Subscription.id)).where(Subscription.channel_id == channel_id)


def video_like_count_query(owner_id: uuid.UUID) -> Select:
    return (
        select(func.count(Like.id))
        .join(Video, Like.video_id == Video.id)
        .where(Video.owner_id == owner_id)
    )


def comment_like_count_query(owner_id: uuid.UUID) -> Select:
    return (
        select(func.count(Like.id))
        .join(Comment, Like.comment_id == Comment.id)
        .where(Comment.owner_id == owner_id)
    )


def tweet_like_count_query(owner_id: uuid.UUID) -> Select:
    return (
        select(func.count(Like.id))
        .join(Tweet, Like.tweet_id == Tweet.id)
        .where(Tweet.owner_id == owner_id)
    )
