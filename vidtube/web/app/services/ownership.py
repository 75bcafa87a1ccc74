"""
Owner authorization for update/delete paths.

The owner comparison runs before the mutation, and the mutation itself is a
conditional write scoped to the owner. A write that matches no row is an
InternalError and leaves the store untouched.
"""
import logging
import uuid
from typing import Any, Dict, Optional

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import Conflict, Forbidden, InternalError

logger = logging.getLogger(__name__)


def ensure_owner(record: Any, requester_id: uuid.UUID, action: str) -> None:
    if record.owner_id != requester_id:
        raise Forbidden(f"You are not allowed to {action}")


async def guarded_update(
    db: AsyncSession,
    record: Any,
    requester_id: uuid.UUID,
    values: Dict[str, Any],
    action: str,
    conflict_message: Optional[str] = None
) -> Any:
    """Apply ``values`` to ``record`` only while it is still owned by the requester."""
    ensure_owner(record, requester_id, action)
    model = type(record)

    try:
        result = await db.execute(
            update(model)
            .where(model.id == record.id, model.owner_id == requester_id)
            .values(**values)
        )
        if result.rowcount == 0:
            await db.rollback()
            raise InternalError(f"Something went wrong while trying to {action}")
        await db.commit()
    except IntegrityError:
        await db.rollback()
        if conflict_message:
            raise Conflict(conflict_message)
        raise InternalError(f"Something went wrong while trying to {action}")
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Conditional update of %s %s failed", model.__tablename__, record.id)
        raise InternalError(f"Something went wrong while trying to {action}")

    await db.refresh(record)
    return record


async def guarded_delete(db: AsyncSession, record: Any, requester_id: uuid.UUID, action: str) -> None:
    """Delete ``record`` only while it is still owned by the requester."""
    ensure_owner(record, requester_id, action)
    model = type(record)

    try:
        result = await db.execute(
            delete(model).where(model.id == record.id, model.owner_id == requester_id)
        )
        if result.rowcount == 0:
            await db.rollback()
            raise InternalError(f"Something went wrong while trying to {action}")
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Conditional delete of %s %s failed", model.__tablename__, record.id)
        raise InternalError(f"Something went wrong while trying to {action}")
