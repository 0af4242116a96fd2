"""
Authentication service.
Handles user registration, login, token refresh and the first admin setup.
"""

import logging
import secrets
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from fastapi import HTTPException, status

from app.core.config import settings
from app.models.user import User, UserRole
from app.schemas.auth import RegisterRequest, LoginRequest, SetupAdminRequest
from app.core.security import (
    REFRESH_TOKEN,
    get_password_hash,
    verify_password,
    create_token_pair,
    decode_token,
    TokenPair,
)


logger = logging.getLogger(__name__)


class AuthService:
    """Service for authentication operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _create_user(self, data: RegisterRequest, role: UserRole) -> User:
        if await self.get_user_by_email(data.email):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Ya existe una cuenta con este email",
            )

        user = User(
            email=data.email,
            hashed_password=get_password_hash(data.password),
            full_name=data.full_name,
            role=role,
        )

        self.db.add(user)
        await self.db.flush()
        await self.db.refresh(user)

        logger.info("Usuario creado: %s (%s)", user.email, role.value)
        return user

    async def register(self, data: RegisterRequest) -> User:
        """
        Register a new user with the ``user`` role.

        Raises:
            HTTPException: If email already exists
        """
        return await self._create_user(data, UserRole.USER)

    async def create_admin(self, data: SetupAdminRequest) -> User:
        """
        Create the first administrator.

        Raises:
            HTTPException: 401 on a wrong or unset setup token, 400 if an
                administrator already exists
        """
        expected = settings.SETUP_TOKEN
        if not expected or not secrets.compare_digest(data.setup_token, expected):
            logger.warning("Intento de creación de administrador con token inválido")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token de configuración inválido",
            )

        result = await self.db.execute(
            select(User.id).where(User.role == UserRole.ADMIN).limit(1)
        )
        if result.first():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Ya existe un usuario administrador",
            )

        return await self._create_user(data, UserRole.ADMIN)

    async def login(self, data: LoginRequest) -> tuple[User, TokenPair]:
        """
        Authenticate user and generate tokens.

        Raises:
            HTTPException: If credentials are invalid or the account is inactive
        """
        user = await self.get_user_by_email(data.email)

        if not user or not verify_password(data.password, user.hashed_password):
            logger.info("Inicio de sesión fallido para %s", data.email)
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Email o contraseña incorrectos",
            )

        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Cuenta desactivada",
            )

        return user, create_token_pair(user.id, user.email, user.role.value)

    async def refresh_token(self, refresh_token: str) -> TokenPair:
        """New token pair from a valid refresh token."""
        token_data = decode_token(refresh_token)

        if token_data is None or token_data.token_type != REFRESH_TOKEN:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token de actualización inválido",
            )

        user = await self.get_user_by_id(token_data.user_id)

        if not user:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Usuario no encontrado",
            )

        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Cuenta desactivada",
            )

        return create_token_pair(user.id, user.email, user.role.value)

    async def get_user_by_id(self, user_id: int) -> User | None:
        result = await self.db.execute(
            select(User).where(User.id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.email == email)
        )
        return result.scalar_one_or_none()
