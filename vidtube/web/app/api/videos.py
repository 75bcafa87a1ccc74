"""
Video API endpoints.

Publish and update take multipart forms; uploaded files are staged to disk
for the duration of the request and removed afterwards.
"""
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from ..dependencies import get_current_user, get_video_service
from ..models import User
from ..responses import ok
from ..services.video_service import VideoService

router = APIRouter(prefix="/videos", tags=["videos"])


@router.get("")
async def get_all_videos(
    page: int = Query(1, description="Page number"),
    limit: int = Query(10, description="Videos per page"),
    query: Optional[str] = Query(None, description="Case-insensitive title search"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_type: Optional[str] = Query(None, alias="sortType"),
    user_id: Optional[str] = Query(None, alias="userId"),
    current_user: User = Depends(get_current_user),
    service: VideoService = Depends(get_video_service)
):
    videos = await service.list_videos(page, limit, query, sort_by, sort_type, user_id)
    return ok(videos, "Fetched all videos successfully")


@router.post("")
async def publish_video(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    video_file: Optional[UploadFile] = File(None, alias="videoFile"),
    thumbnail: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    service: VideoService = Depends(get_video_service)
):
    async with service.media.stage_upload(thumbnail) as thumbnail_path, \
            service.media.stage_upload(video_file) as video_path:
        video = await service.publish_video(current_user, title, description, thumbnail_path, video_path)
    return ok(video, "Video published successfully")


@router.get("/{video_id}")
async def get_video_by_id(
    video_id: str,
    current_user: User = Depends(get_current_user),
    service: VideoService = Depends(get_video_service)
):
    return ok(await service.get_video_by_id(video_id), "Video fetched successfully")


@router.patch("/{video_id}")
async def update_video(
    video_id: str,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    thumbnail: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    service: VideoService = Depends(get_video_service)
):
    async with service.media.stage_upload(thumbnail) as thumbnail_path:
        video = await service.update_video(video_id, current_user, title, description, thumbnail_path)
    return ok(video, "Video updated successfully")


@router.delete("/{video_id}")
async def delete_video(
    video_id: str,
    current_user: User = Depends(get_current_user),
    service: VideoService = Depends(get_video_service)
):
    await service.delete_video(video_id, current_user)
    return ok({}, "Video deleted successfully")


@router.patch("/toggle/publish/{video_id}")
async def toggle_publish_status(
    video_id: str,
    current_user: User = Depends(get_current_user),
    service: VideoService = Depends(get_video_service)
):
    result = await service.toggle_publish_status(video_id, current_user)
    return ok(result, "Publish status modified successfully")
