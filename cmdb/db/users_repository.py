"""
Repository Pattern for Database Operations
Provides clean data access layer
"""

from typing import List, Optional

from sqlalchemy import Boolean, String, delete, exists, func, literal, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cmdb.db.base_repository import BaseRepository, storage_errors
from cmdb.models.user_model import User, UserRole
from cmdb.utils.datetime_utils import utcnow
from cmdb.utils.exceptions import NotFoundError, StorageError


class UserRepository(BaseRepository[User]):
    """Repository for User and UserRole operations"""

    entity_name = "User"

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email"""
        async with storage_errors(self.db, "load user"):
            result = await self.db.execute(select(User).where(User.email == email))
            return result.scalar_one_or_none()

    async def list_users(self) -> List[User]:
        """All users, newest first"""
        return await self.get_all(User.created_at.desc())

    async def update_profile(
        self,
        user_id: str,
        display_name: Optional[str] = None,
        approved: Optional[bool] = None,
    ) -> None:
        """
        Partial update: a None argument leaves the column unchanged.

        Expressed as COALESCE(:value, column) so the statement is the same
        whatever subset of fields is supplied.
        """
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(
                display_name=func.coalesce(
                    literal(display_name, String()), User.display_name
                ),
                approved=func.coalesce(literal(approved, Boolean()), User.approved),
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        async with storage_errors(self.db, "update user"):
            result = await self.db.execute(stmt)
        if result.rowcount == 0:
            raise NotFoundError("User not found")

    async def get_roles(self, user_id: str) -> List[str]:
        """Role names held by the user"""
        async with storage_errors(self.db, "load roles"):
            result = await self.db.execute(
                select(UserRole.role)
                .where(UserRole.user_id == user_id)
                .order_by(UserRole.created_at)
            )
            return list(result.scalars().all())

    async def has_role(self, user_id: str, role: str) -> bool:
        async with storage_errors(self.db, "load roles"):
            result = await self.db.execute(
                select(
                    exists().where(UserRole.user_id == user_id, UserRole.role == role)
                )
            )
            return bool(result.scalar())

    async def set_roles(self, user_id: str, roles: List[str]) -> None:
        """
        Replace the user's role set in one transaction.

        Any failure rolls the whole replacement back before re-raising.
        """
        now = utcnow()
        try:
            await self.db.execute(delete(UserRole).where(UserRole.user_id == user_id))
            self.db.add_all(
                [UserRole(user_id=user_id, role=role, created_at=now) for role in roles]
            )
            await self.db.flush()
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StorageError(f"set roles: {str(e)}") from e


def get_user_repository(db: AsyncSession) -> UserRepository:
    """Get UserRepository instance"""
    return UserRepository(User, db)
