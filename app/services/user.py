"""
User service.
Handles profile updates and user administration.
"""

import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from fastapi import HTTPException, status

from app.core.security import get_password_hash, verify_password
from app.models.user import User
from app.schemas.user import UserAdminUpdate, UserUpdate


logger = logging.getLogger(__name__)


class UserService:
    """Service for user operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, user_id: int) -> User | None:
        result = await self.db.execute(
            select(User).where(User.id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_or_404(self, user_id: int) -> User:
        user = await self.get_by_id(user_id)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Usuario no encontrado",
            )
        return user

    async def update(self, user: User, data: UserUpdate | UserAdminUpdate) -> User:
        """
        Update a user.

        Args:
            user: User to update
            data: Own profile data, or role and active flag for administrators
        """
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)

        for field, value in update_data.items():
            setattr(user, field, value)

        await self.db.flush()
        await self.db.refresh(user)

        if {"role", "is_active"} & update_data.keys():
            logger.info(
                "Usuario %s actualizado: rol %s, activo %s",
                user.email,
                user.role.value,
                user.is_active,
            )
        return user

    async def change_password(
        self,
        user: User,
        current_password: str,
        new_password: str,
    ) -> User:
        """
        Change user password.

        Raises:
            HTTPException: If current password is incorrect
        """
        if not verify_password(current_password, user.hashed_password):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="La contraseña actual es incorrecta",
            )

        user.hashed_password = get_password_hash(new_password)

        await self.db.flush()
        await self.db.refresh(user)

        return user

    async def list(self, skip: int = 0, limit: int = 20):
        total = (await self.db.execute(select(func.count(User.id)))).scalar() or 0
        result = await self.db.execute(
            select(User).order_by(User.id).offset(skip).limit(limit)
        )
        return list(result.scalars().all()), total
