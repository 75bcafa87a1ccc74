"""
Playlist service.
"""
import logging
import uuid
from collections import defaultdict
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..errors import Conflict, InternalError, NotFound
from ..models import Playlist, PlaylistVideo, User, Video
from . import queries
from .base_service import BaseService
from .ownership import ensure_owner, guarded_delete, guarded_update
from .validators import get_or_404, is_blank, parse_object_id, require_any, require_fields

logger = logging.getLogger(__name__)

DUPLICATE_NAME = "You already have a playlist with this name"
DUPLICATE_MEMBER = "This video is already in the playlist"


class PlaylistService(BaseService):
    """Service for managing playlists and their ordered videos."""

    async def create_playlist(self, requester: User, name: str, description: str) -> Dict[str, Any]:
        require_fields("Name and description are required for creating a playlist", name, description)
        name = name.strip()

        existing = await self.db.scalar(
            select(Playlist.id).where(and_(Playlist.owner_id == requester.id, Playlist.name == name))
        )
        if existing is not None:
            raise Conflict(DUPLICATE_NAME)

        playlist = Playlist(owner_id=requester.id, name=name, description=description.strip())
        self.db.add(playlist)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise Conflict(DUPLICATE_NAME)
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("Failed to create playlist for user %s", requester.id)
            raise InternalError("Something went wrong while creating the playlist")

        logger.info("User %s created playlist %s", requester.id, playlist.id)
        return await self._playlist_detail(playlist.id)

    async def get_user_playlists(self, user_id: Any) -> List[Dict[str, Any]]:
        user_uuid = parse_object_id(user_id, "user")
        await get_or_404(self.db, User, user_uuid, "user")

        rows = (await self.db.execute(queries.user_playlists_query(user_uuid))).mappings().all()
        videos = await self._videos_by_playlist([row["id"] for row in rows])
        return [queries.playlist_row(row, videos.get(row["id"], [])) for row in rows]

    async def get_playlist_by_id(self, playlist_id: Any) -> Dict[str, Any]:
        playlist_uuid = parse_object_id(playlist_id, "playlist")
        return await self._playlist_detail(playlist_uuid)

    async def add_video_to_playlist(self, playlist_id: Any, video_id: Any, requester: User) -> Dict[str, Any]:
        """Append a video to the end of one of the requester's playlists."""
        playlist_uuid = parse_object_id(playlist_id, "playlist")
        video_uuid = parse_object_id(video_id, "video")

        playlist = await get_or_404(self.db, Playlist, playlist_uuid, "playlist")
        await get_or_404(self.db, Video, video_uuid, "video")
        action = "add videos to this playlist"
        ensure_owner(playlist, requester.id, action)

        if await self._is_member(playlist_uuid, video_uuid):
            raise Conflict(DUPLICATE_MEMBER)

        last_position = await self.db.scalar(
            select(func.coalesce(func.max(PlaylistVideo.position), 0))
            .where(PlaylistVideo.playlist_id == playlist_uuid)
        )
        self.db.add(PlaylistVideo(playlist_id=playlist_uuid, video_id=video_uuid, position=last_position + 1))

        # The membership insert is flushed and committed with the owner-scoped update
        try:
            await guarded_update(
                self.db, playlist, requester.id,
                {"updated_at": datetime.utcnow()},
                action,
                conflict_message=DUPLICATE_MEMBER
            )
        except Conflict:
            if await self._is_member(playlist_uuid, video_uuid):
                raise
            # A concurrent add took the same position
            logger.warning("Position %s in playlist %s was taken concurrently", last_position + 1, playlist_uuid)
            raise InternalError(f"Something went wrong while trying to {action}")
        logger.info("User %s added video %s to playlist %s", requester.id, video_uuid, playlist_uuid)
        return await self._playlist_detail(playlist_uuid)

    async def remove_video_from_playlist(self, playlist_id: Any, video_id: Any, requester: User) -> Dict[str, Any]:
        """Remove a video from a playlist; removing a non-member is a no-op."""
        playlist_uuid = parse_object_id(playlist_id, "playlist")
        video_uuid = parse_object_id(video_id, "video")

        playlist = await get_or_404(self.db, Playlist, playlist_uuid, "playlist")
        action = "remove videos from this playlist"
        ensure_owner(playlist, requester.id, action)

        position = await self.db.scalar(
            select(PlaylistVideo.position).where(
                PlaylistVideo.playlist_id == playlist_uuid,
                PlaylistVideo.video_id == video_uuid
            )
        )
        if position is None:
            return await self._playlist_detail(playlist_uuid)

        try:
            await self.db.execute(
                delete(PlaylistVideo).where(
                    PlaylistVideo.playlist_id == playlist_uuid,
                    PlaylistVideo.video_id == video_uuid
                )
            )
            following = await self.db.scalars(
                select(PlaylistVideo.id)
                .where(PlaylistVideo.playlist_id == playlist_uuid, PlaylistVideo.position > position)
                .order_by(PlaylistVideo.position)
            )
            # Shift one row at a time so no two rows share a position mid-update
            for item_id in following.all():
                await self.db.execute(
                    update(PlaylistVideo)
                    .where(PlaylistVideo.id == item_id)
                    .values(position=PlaylistVideo.position - 1)
                    .execution_options(synchronize_session=False)
                )
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("Failed to remove video %s from playlist %s", video_uuid, playlist_uuid)
            raise InternalError(f"Something went wrong while trying to {action}")

        await guarded_update(self.db, playlist, requester.id, {"updated_at": datetime.utcnow()}, action)
        logger.info("User %s removed video %s from playlist %s", requester.id, video_uuid, playlist_uuid)
        return await self._playlist_detail(playlist_uuid)

    async def delete_playlist(self, playlist_id: Any, requester: User) -> None:
        playlist_uuid = parse_object_id(playlist_id, "playlist")
        playlist = await get_or_404(self.db, Playlist, playlist_uuid, "playlist")

        await guarded_delete(self.db, playlist, requester.id, "delete this playlist")
        logger.info("User %s deleted playlist %s", requester.id, playlist_uuid)

    async def update_playlist(
        self,
        playlist_id: Any,
        requester: User,
        name: Optional[str] = None,
        description: Optional[str] = None
    ) -> Dict[str, Any]:
        playlist_uuid = parse_object_id(playlist_id, "playlist")
        require_any("Name or description is required for updating", name, description)
        playlist = await get_or_404(self.db, Playlist, playlist_uuid, "playlist")

        values = {}
        if not is_blank(name):
            values["name"] = name.strip()
        if not is_blank(description):
            values["description"] = description.strip()

        await guarded_update(
            self.db, playlist, requester.id, values,
            "update the details of this playlist",
            conflict_message=DUPLICATE_NAME
        )
        return await self._playlist_detail(playlist_uuid)

    async def _is_member(self, playlist_uuid: uuid.UUID, video_uuid: uuid.UUID) -> bool:
        member = await self.db.scalar(
            select(PlaylistVideo.id).where(
                PlaylistVideo.playlist_id == playlist_uuid,
                PlaylistVideo.video_id == video_uuid
            )
        )
        return member is not None

    async def _playlist_detail(self, playlist_uuid: uuid.UUID) -> Dict[str, Any]:
        row = (await self.db.execute(queries.playlist_detail_query(playlist_uuid))).mappings().first()
        if row is None:
            raise NotFound("No playlist found with this ID")
        videos = await self._videos_by_playlist([playlist_uuid])
        return queries.playlist_row(row, videos.get(playlist_uuid, []))

    async def _videos_by_playlist(self, playlist_ids: List[uuid.UUID]) -> Dict[uuid.UUID, List[Dict[str, Any]]]:
        grouped = defaultdict(list)
        if not playlist_ids:
            return grouped

        rows = (await self.db.execute(queries.playlist_videos_query(playlist_ids))).mappings().all()
        for row in rows:
            grouped[row["playlist_id"]].append(queries.video_row(row))
        return grouped
