"""
Video comments API endpoints.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from ..dependencies import get_comment_service, get_current_user
from ..models import User
from ..responses import ok
from ..services.comment_service import CommentService

router = APIRouter(prefix="/comments", tags=["comments"])


class CommentContent(BaseModel):
    content: Optional[str] = None


@router.get("/{video_id}")
async def get_video_comments(
    video_id: str,
    page: int = Query(1, description="Page number"),
    limit: int = Query(10, description="Comments per page"),
    current_user: User = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service)
):
    comments = await service.get_video_comments(video_id, page, limit)
    return ok(comments, "Fetched all comments successfully")


@router.post("/{video_id}")
async def add_comment(
    video_id: str,
    payload: CommentContent,
    current_user: User = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service)
):
    comment = await service.add_comment(video_id, current_user, payload.content)
    return ok(comment, "Comment published successfully")


@router.patch("/c/{comment_id}")
async def update_comment(
    comment_id: str,
    payload: CommentContent,
    current_user: User = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service)
):
    comment = await service.update_comment(comment_id, current_user, payload.content)
    return ok(comment, "Comment updated successfully")


@router.delete("/c/{comment_id}")
async def delete_comment(
    comment_id: str,
    current_user: User = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service)
):
    await service.delete_comment(comment_id, current_user)
    return ok({}, "Comment deleted successfully")
