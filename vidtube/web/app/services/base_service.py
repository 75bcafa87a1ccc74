"""
Base class for services that work against a request-scoped session.
"""
from sqlalchemy.ext.asyncio import AsyncSession


class BaseService:
    """Holds the database session shared by a service's operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
