"""
Video service: listing, publishing, metadata updates and removal.

Publishing and thumbnail replacement go through the media service; the
record is only written once the media host has accepted every file.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import InternalError, InvalidInput, NotFound
from ..models import User, Video
from . import queries
from .base_service import BaseService
from .media_service import MediaService
from .ownership import ensure_owner, guarded_delete, guarded_update
from .validators import get_or_404, is_blank, parse_object_id, require_any, require_fields

logger = logging.getLogger(__name__)


class VideoService(BaseService):
    """Service for managing videos."""

    def __init__(self, db: AsyncSession, media: MediaService, max_page_limit: int = 100):
        super().__init__(db)
        self.media = media
        self.max_page_limit = max_page_limit

    async def list_videos(
        self,
        page: int = 1,
        limit: int = 10,
        query: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_type: Optional[str] = None,
        user_id: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """List videos with optional title search, owner filter and sorting."""
        skip, limit = queries.pagination(page, limit, self.max_page_limit)

        owner_id = None
        if user_id:
            owner_id = parse_object_id(user_id, "user")
            await get_or_404(self.db, User, owner_id, "user")

        stmt = queries.video_listing_query(skip, limit, query, sort_by, sort_type, owner_id)
        rows = (await self.db.execute(stmt)).mappings().all()
        return [queries.video_row(row) for row in rows]

    async def publish_video(
        self,
        requester: User,
        title: Optional[str],
        description: Optional[str],
        thumbnail_path: Optional[str],
        video_path: Optional[str]
    ) -> Dict[str, Any]:
        """
        Upload the thumbnail and the video file, then create the record.

        Every input is checked before the first upload so that an invalid
        request never reaches the media host.
        """
        require_fields("Title and description are required", title, description)
        if not thumbnail_path:
            raise InvalidInput("Thumbnail file is required")
        if not video_path:
            raise InvalidInput("Video file is required")

        thumbnail = await self.media.upload(thumbnail_path, "thumbnail")
        video_file = await self.media.upload(video_path, "video file")

        video = Video(
            owner_id=requester.id,
            title=title.strip(),
            description=description.strip(),
            video_file=video_file.url,
            thumbnail=thumbnail.url,
            duration=video_file.duration,
        )
        self.db.add(video)
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("Failed to store published video for user %s", requester.id)
            raise InternalError("Something went wrong while publishing the video")

        logger.info("User %s published video %s", requester.id, video.id)
        return await self.get_video_by_id(video.id)

    async def get_video_by_id(self, video_id: Any) -> Dict[str, Any]:
        video_uuid = parse_object_id(video_id, "video")
        row = (await self.db.execute(queries.video_detail_query(video_uuid))).mappings().first()
        if row is None:
            raise NotFound("No video found with this ID")
        return queries.video_row(row)

    async def update_video(
        self,
        video_id: Any,
        requester: User,
        title: Optional[str] = None,
        description: Optional[str] = None,
        thumbnail_path: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Update title, description and/or thumbnail.

        A new thumbnail replaces the old one on the media host: the old
        object is deleted first, then the replacement is uploaded.
        """
        video_uuid = parse_object_id(video_id, "video")
        require_any("Title, description or thumbnail is required for updating", title, description, thumbnail_path)

        video = await get_or_404(self.db, Video, video_uuid, "video")
        action = "update the details of this video"
        ensure_owner(video, requester.id, action)

        values = {}
        if not is_blank(title):
            values["title"] = title.strip()
        if not is_blank(description):
            values["description"] = description.strip()
        if thumbnail_path:
            await self.media.delete(video.thumbnail, "old thumbnail")
            thumbnail = await self.media.upload(thumbnail_path, "thumbnail")
            values["thumbnail"] = thumbnail.url

        await guarded_update(self.db, video, requester.id, values, action)
        logger.info("User %s updated video %s", requester.id, video.id)
        return await self.get_video_by_id(video.id)

    async def delete_video(self, video_id: Any, requester: User) -> None:
        """Remove both media objects from the host, then the record."""
        video_uuid = parse_object_id(video_id, "video")
        video = await get_or_404(self.db, Video, video_uuid, "video")
        action = "delete this video"
        ensure_owner(video, requester.id, action)

        await self.media.delete(video.thumbnail, "video thumbnail")
        await self.media.delete(video.video_file, "video file")

        await guarded_delete(self.db, video, requester.id, action)
        logger.info("User %s deleted video %s", requester.id, video_uuid)

    async def toggle_publish_status(self, video_id: Any, requester: User) -> Dict[str, Any]:
        video_uuid = parse_object_id(video_id, "video")
        video = await get_or_404(self.db, Video, video_uuid, "video")

        await guarded_update(
            self.db, video, requester.id,
            {"is_published": not video.is_published},
            "modify the publish status of this video"
        )
        logger.info("User %s set video %s published=%s", requester.id, video.id, video.is_published)
        return {"id": video.id, "isPublished": video.is_published}
