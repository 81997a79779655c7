"""
Repository Pattern for Database Operations
Provides clean data access layer
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Generic, List, Optional, Type, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cmdb.utils.datetime_utils import utcnow
from cmdb.utils.exceptions import ConflictError, NotFoundError, StorageError

T = TypeVar("T")


@asynccontextmanager
async def storage_errors(db: AsyncSession, action: str) -> AsyncIterator[None]:
    """
    Translate SQLAlchemy failures into the service error taxonomy.

    The session is rolled back first so it stays usable for the rest of
    the request.
    """
    try:
        yield
    except IntegrityError as e:
        await db.rollback()
        raise ConflictError(f"{action}: constraint violated") from e
    except SQLAlchemyError as e:
        await db.rollback()
        raise StorageError(f"{action}: {str(e)}") from e


class BaseRepository(Generic[T]):
    """Base repository with common CRUD operations"""

    # Human readable name used in error messages
    entity_name: Optional[str] = None

    def __init__(self, model: Type[T], db: AsyncSession):
        self.model = model
        self.db = db
        self.entity_name = self.entity_name or model.__name__

    async def get_by_id(self, id: str) -> Optional[T]:
        """Get record by ID"""
        async with storage_errors(self.db, f"load {self.entity_name}"):
            result = await self.db.execute(
                select(self.model)
                .where(self.model.id == id)
                .execution_options(populate_existing=True)
            )
            return result.scalar_one_or_none()

    async def get_existing(self, id: str) -> T:
        """Get record by ID or raise NotFoundError"""
        instance = await self.get_by_id(id)
        if instance is None:
            raise NotFoundError(f"{self.entity_name} not found")
        return instance

    async def get_all(self, *order_by) -> List[T]:
        """Get all records"""
        async with storage_errors(self.db, f"list {self.entity_name}"):
            result = await self.db.execute(select(self.model).order_by(*order_by))
            return list(result.scalars().all())

    async def create(self, **kwargs) -> T:
        """Create new record"""
        instance = self.model(**kwargs)
        async with storage_errors(self.db, f"create {self.entity_name}"):
            self.db.add(instance)
            await self.db.flush()
        return instance

    async def update(self, instance: T, **kwargs) -> T:
        """Update existing record"""
        for key, value in kwargs.items():
            setattr(instance, key, value)
        if hasattr(instance, "updated_at"):
            instance.updated_at = utcnow()
        async with storage_errors(self.db, f"update {self.entity_name}"):
            await self.db.flush()
        return instance

    async def delete_by_id(self, id: str) -> None:
        """Delete record, raising NotFoundError when nothing matched"""
        async with storage_errors(self.db, f"delete {self.entity_name}"):
            result = await self.db.execute(
                delete(self.model).where(self.model.id == id)
            )
        if result.rowcount == 0:
            raise NotFoundError(f"{self.entity_name} not found")
