"""
Create-if-absent / delete-if-present primitive behind likes and subscriptions.
"""
import logging
from typing import Any, Dict, Type

from sqlalchemy import and_, delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import InternalError

logger = logging.getLogger(__name__)


async def toggle_pair(db: AsyncSession, model: Type[Any], pair: Dict[str, Any]) -> bool:
    """
    Flip the existence of the row identified by ``pair``.

    Returns True when the pair exists after the call, False when it does not.
    An insert rejected because a concurrent request stored the same pair, or
    a delete that matches no row, means the desired state was already reached.
    Any other rejected insert, such as a vanished foreign key, is an InternalError.
    """
    criteria = and_(*(getattr(model, column) == value for column, value in pair.items()))

    async def lookup():
        try:
            return (await db.execute(select(model.id).where(criteria))).scalar_one_or_none()
        except SQLAlchemyError:
            logger.exception("Lookup on %s failed", model.__tablename__)
            raise InternalError()

    existing = await lookup()

    if existing is None:
        db.add(model(**pair))
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            if await lookup() is None:
                logger.exception("Insert on %s rejected for %s", model.__tablename__, pair)
                raise InternalError()
            logger.info("%s pair %s already present", model.__tablename__, pair)
        except SQLAlchemyError:
            await db.rollback()
            logger.exception("Insert on %s failed", model.__tablename__)
            raise InternalError()
        return True

    try:
        result = await db.execute(delete(model).where(model.id == existing))
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Delete on %s failed", model.__tablename__)
        raise InternalError()

    if result.rowcount == 0:
        logger.info("%s pair %s already removed", model.__tablename__, pair)
    return False
