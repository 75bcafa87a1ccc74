"""
User service: registration, login and profile lookup.
"""
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

import bcrypt
import jwt
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import Settings
from ..errors import Conflict, InternalError, InvalidInput, Unauthorized
from ..models import User
from .base_service import BaseService
from .validators import get_or_404, parse_object_id, require_fields

logger = logging.getLogger(__name__)

# bcrypt only accepts this many bytes of input
MAX_PASSWORD_BYTES = 72


def check_password_length(password: str) -> None:
    if len(password.encode('utf-8')) > MAX_PASSWORD_BYTES:
        raise InvalidInput(f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes")


def hash_password(password: str, rounds: int = 12) -> str:
    """Hash a password using bcrypt."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')


def verify_password(password: str, hashed: str) -> bool:
    """Verify a password against its hash."""
    return bcrypt.checkpw(password.encode('utf-8'), hashed.encode('utf-8'))


def create_access_token(user_id: str, settings: Settings) -> str:
    """Create a JWT access token."""
    now = datetime.utcnow()
    payload = {
        "sub": user_id,
        "exp": now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        "iat": now
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> Dict[str, Any]:
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise Unauthorized("Access token has expired")
    except jwt.InvalidTokenError:
        raise Unauthorized("Invalid access token")


def public_user(user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "fullName": user.full_name,
        "avatar": user.avatar,
        "coverImage": user.cover_image,
        "createdAt": user.created_at,
        "updatedAt": user.updated_at,
    }


class UserService(BaseService):
    """Service for user accounts."""

    def __init__(self, db: AsyncSession, settings: Settings):
        super().__init__(db)
        self.settings = settings

    async def register_user(
        self,
        full_name: Optional[str],
        email: Optional[str],
        username: Optional[str],
        password: Optional[str],
        avatar: Optional[str] = None,
        cover_image: Optional[str] = None
    ) -> Dict[str, Any]:
        require_fields("All fields are required", full_name, email, username, password)
        check_password_length(password)

        username = username.strip().lower()
        email = email.strip().lower()

        existing = await self.db.scalar(
            select(User.id).where(or_(User.username == username, User.email == email))
        )
        if existing is not None:
            raise Conflict("User with email or username already exists")

        user = User(
            username=username,
            email=email,
            full_name=full_name.strip(),
            password_hash=hash_password(password, self.settings.BCRYPT_ROUNDS),
            avatar=avatar,
            cover_image=cover_image,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise Conflict("User with email or username already exists")
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("Failed to register user %s", username)
            raise InternalError("Something went wrong while registering the user")

        await self.db.refresh(user)
        logger.info("Registered user %s", user.id)
        return public_user(user)

    async def login(self, username_or_email: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        require_fields("Username or email and password are required", username_or_email, password)
        check_password_length(password)

        identifier = username_or_email.strip().lower()
        user = await self.db.scalar(
            select(User).where(or_(User.username == identifier, User.email == identifier))
        )
        if user is None or not verify_password(password, user.password_hash):
            raise Unauthorized("Invalid user credentials")

        return {
            "user": public_user(user),
            "accessToken": create_access_token(str(user.id), self.settings),
        }

    async def get_user(self, user_id: Any) -> User:
        user_uuid = parse_object_id(user_id, "user")
        return await get_or_404(self.db, User, user_uuid, "user")

    async def get_current_user(self, requester: User) -> Dict[str, Any]:
        return public_user(requester)
