"""
Playlist API endpoints.
"""
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..dependencies import get_current_user, get_playlist_service
from ..models import User
from ..responses import ok
from ..services.playlist_service import PlaylistService

router = APIRouter(prefix="/playlist", tags=["playlists"])


class PlaylistDetails(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


@router.post("")
async def create_playlist(
    payload: PlaylistDetails,
    current_user: User = Depends(get_current_user),
    service: PlaylistService = Depends(get_playlist_service)
):
    playlist = await service.create_playlist(current_user, payload.name, payload.description)
    return ok(playlist, "Playlist created successfully")


@router.get("/user/{user_id}")
async def get_user_playlists(
    user_id: str,
    current_user: User = Depends(get_current_user),
    service: PlaylistService = Depends(get_playlist_service)
):
    playlists = await service.get_user_playlists(user_id)
    return ok(playlists, "User playlists fetched successfully")


@router.get("/{playlist_id}")
async def get_playlist_by_id(
    playlist_id: str,
    current_user: User = Depends(get_current_user),
    service: PlaylistService = Depends(get_playlist_service)
):
    return ok(await service.get_playlist_by_id(playlist_id), "Playlist fetched successfully")


@router.patch("/add/{video_id}/{playlist_id}")
async def add_video_to_playlist(
    video_id: str,
    playlist_id: str,
    current_user: User = Depends(get_current_user),
    service: PlaylistService = Depends(get_playlist_service)
):
    playlist = await service.add_video_to_playlist(playlist_id, video_id, current_user)
    return ok(playlist, "Video added to playlist successfully")


@router.patch("/remove/{video_id}/{playlist_id}")
async def remove_video_from_playlist(
    video_id: str,
    playlist_id: str,
    current_user: User = Depends(get_current_user),
    service: PlaylistService = Depends(get_playlist_service)
):
    playlist = await service.remove_video_from_playlist(playlist_id, video_id, current_user)
    return ok(playlist, "Video removed from playlist successfully")


@router.patch("/{playlist_id}")
async def update_playlist(
    playlist_id: str,
    payload: PlaylistDetails,
    current_user: User = Depends(get_current_user),
    service: PlaylistService = Depends(get_playlist_service)
):
    playlist = await service.update_playlist(playlist_id, current_user, payload.name, payload.description)
    return ok(playlist, "Playlist updated successfully")


@router.delete("/{playlist_id}")
async def delete_playlist(
    playlist_id: str,
    current_user: User = Depends(get_current_user),
    service: PlaylistService = Depends(get_playlist_service)
):
    await service.delete_playlist(playlist_id, current_user)
    return ok({}, "Playlist deleted successfully")
