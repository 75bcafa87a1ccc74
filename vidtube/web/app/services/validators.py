"""
Identifier, existence and payload checks shared by every service.
"""
import uuid
from typing import Any, Optional, Type, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import InvalidIdentifier, InvalidInput, NotFound

ModelT = TypeVar("ModelT")


def parse_object_id(value: Any, label: str) -> uuid.UUID:
    """Convert a raw identifier into a typed reference or fail with InvalidIdentifier."""
    if isinstance(value, uuid.UUID):
        return value
    if not isinstance(value, str):
        raise InvalidIdentifier(f"Invalid {label} ID")
    try:
        return uuid.UUID(value)
    except ValueError:
        raise InvalidIdentifier(f"Invalid {label} ID")


async def get_or_404(db: AsyncSession, model: Type[ModelT], record_id: uuid.UUID, label: str) -> ModelT:
    record = await db.get(model, record_id)
    if record is None:
        raise NotFound(f"No {label} found with this ID")
    return record


def is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def require_fields(message: str, *values: Optional[str]) -> None:
    """Fail with InvalidInput when any value is missing or blank."""
    if any(is_blank(value) for value in values):
        raise InvalidInput(message)


def require_any(message: str, *values: Optional[str]) -> None:
    """Fail with InvalidInput when every value is missing or blank."""
    if all(is_blank(value) for value in values):
        raise InvalidInput(message)
