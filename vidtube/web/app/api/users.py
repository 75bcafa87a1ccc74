"""
User account API endpoints.
"""
from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field

from ..dependencies import get_current_user, get_user_service
from ..models import User
from ..responses import ok
from ..services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


class UserRegistration(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    full_name: Optional[str] = Field(None, alias="fullName")
    email: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    avatar: Optional[str] = None
    cover_image: Optional[str] = Field(None, alias="coverImage")


class UserLogin(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


@router.post("/register")
async def register_user(
    payload: UserRegistration,
    service: UserService = Depends(get_user_service)
):
    user = await service.register_user(
        full_name=payload.full_name,
        email=payload.email,
        username=payload.username,
        password=payload.password,
        avatar=payload.avatar,
        cover_image=payload.cover_image
    )
    return ok(user, "User registered successfully", status.HTTP_201_CREATED)


@router.post("/login")
async def login(
    payload: UserLogin,
    service: UserService = Depends(get_user_service)
):
    result = await service.login(payload.username or payload.email, payload.password)
    return ok(result, "User logged in successfully")


@router.get("/current-user")
async def current_user(
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    return ok(await service.get_current_user(current_user), "Current user fetched successfully")
