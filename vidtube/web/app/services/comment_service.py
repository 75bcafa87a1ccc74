"""
Video comments service.
"""
import logging
from typing import Any, Dict, List

from sqlalchemy.exc import SQLAlchemyError

from ..errors import InternalError
from ..models import Comment, User, Video
from . import queries
from .base_service import BaseService
from .ownership import guarded_delete, guarded_update
from .validators import get_or_404, parse_object_id, require_fields

logger = logging.getLogger(__name__)


def comment_record(comment: Comment) -> Dict[str, Any]:
    return {
        "id": comment.id,
        "content": comment.content,
        "video": comment.video_id,
        "owner": comment.owner_id,
        "createdAt": comment.created_at,
        "updatedAt": comment.updated_at,
    }


class CommentService(BaseService):
    """Service for managing video comments."""

    def __init__(self, db, max_page_limit: int = 100):
        super().__init__(db)
        self.max_page_limit = max_page_limit

    async def get_video_comments(self, video_id: Any, page: int = 1, limit: int = 10) -> List[Dict[str, Any]]:
        """Get comments for a video, newest first."""
        video_uuid = parse_object_id(video_id, "video")
        skip, limit = queries.pagination(page, limit, self.max_page_limit)
        await get_or_404(self.db, Video, video_uuid, "video")

        rows = (await self.db.execute(queries.video_comments_query(video_uuid, skip, limit))).mappings().all()
        return [queries.post_row(row) for row in rows]

    async def add_comment(self, video_id: Any, requester: User, content: str) -> Dict[str, Any]:
        video_uuid = parse_object_id(video_id, "video")
        require_fields("Content is required for a comment", content)
        await get_or_404(self.db, Video, video_uuid, "video")

        comment = Comment(video_id=video_uuid, owner_id=requester.id, content=content.strip())
        self.db.add(comment)
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("Failed to store comment on video %s", video_uuid)
            raise InternalError("Something went wrong while publishing the comment")

        await self.db.refresh(comment)
        logger.info("User %s commented on video %s", requester.id, video_uuid)
        return comment_record(comment)

    async def update_comment(self, comment_id: Any, requester: User, content: str) -> Dict[str, Any]:
        comment_uuid = parse_object_id(comment_id, "comment")
        require_fields("Content is required to update the comment", content)
        comment = await get_or_404(self.db, Comment, comment_uuid, "comment")

        await guarded_update(
            self.db, comment, requester.id,
            {"content": content.strip()},
            "update the content of this comment"
        )
        return comment_record(comment)

    async def delete_comment(self, comment_id: Any, requester: User) -> None:
        comment_uuid = parse_object_id(comment_id, "comment")
        comment = await get_or_404(self.db, Comment, comment_uuid, "comment")

        await guarded_delete(self.db, comment, requester.id, "delete this comment")
        logger.info("User %s deleted comment %s", requester.id, comment_uuid)
