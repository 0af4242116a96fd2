"""
API Dependencies.
Authentication, role checks, database sessions and the AFIP client.
"""

import logging
from typing import Annotated
import httpx
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.core.database import get_db
from app.core.security import ACCESS_TOKEN, decode_token
from app.models.user import User, UserRole
from app.services.afip import AfipClient


logger = logging.getLogger(__name__)

# Bearer token scheme
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Resolve the authenticated user from the JWT bearer token.

    Raises:
        HTTPException: 401 if the token is missing, invalid or the user is gone
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Token de autenticación inválido o expirado",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not credentials:
        logger.warning("Acceso sin token")
        raise credentials_exception

    token_data = decode_token(credentials.credentials)

    if token_data is None:
        logger.warning("Token inválido o expirado")
        raise credentials_exception

    if token_data.token_type != ACCESS_TOKEN:
        logger.warning("Tipo de token inválido: %s", token_data.token_type)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Tipo de token inválido",
            headers={"WWW-Authenticate": "Bearer"},
        )

    result = await db.execute(
        select(User).where(User.id == token_data.user_id)
    )
    user = result.scalar_one_or_none()

    if user is None:
        logger.warning("Usuario %s no encontrado", token_data.user_id)
        raise credentials_exception

    logger.debug("Usuario autenticado: %s", user.email)
    return user


async def get_current_active_user(
    current_user: User = Depends(get_current_user),
) -> User:
    """
    Resolve the authenticated user, rejecting disabled accounts.

    Raises:
        HTTPException: 403 if the account is disabled
    """
    if not current_user.is_active:
        logger.warning("Cuenta desactivada: %s", current_user.email)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Cuenta desactivada",
        )
    return current_user


def require_roles(*roles: UserRole):
    """Dependency factory restricting an endpoint to the given roles."""

    async def checker(
        current_user: User = Depends(get_current_active_user),
    ) -> User:
        if current_user.role not in roles:
            logger.warning(
                "Permiso denegado para %s (rol %s)",
                current_user.email,
                current_user.role.value,
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="No tiene permisos para realizar esta acción",
            )
        return current_user

    return checker


def get_afip_client(request: Request) -> AfipClient:
    """
    Return the AFIP client configured on the application.

    Raises:
        HTTPException: 503 when no client has been configured
    """
    client = getattr(request.app.state, "afip_client", None)
    if client is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="El servicio de AFIP no está configurado",
        )
    return client


def get_optional_afip_client(request: Request) -> AfipClient | None:
    """AFIP client for automatic invoicing, None when not configured."""
    return getattr(request.app.state, "afip_client", None)


def get_http_client(request: Request) -> httpx.AsyncClient | None:
    """Shared HTTP client created at startup, if any."""
    return getattr(request.app.state, "http_client", None)


# Type aliases for cleaner route signatures
CurrentUser = Annotated[User, Depends(get_current_active_user)]
WriterUser = Annotated[
    User,
    Depends(require_roles(UserRole.ADMIN, UserRole.MANAGER, UserRole.USER)),
]
ManagerUser = Annotated[User, Depends(require_roles(UserRole.ADMIN, UserRole.MANAGER))]
AdminUser = Annotated[User, Depends(require_roles(UserRole.ADMIN))]
DbSession = Annotated[AsyncSession, Depends(get_db)]
Afip = Annotated[AfipClient, Depends(get_afip_client)]
OptionalAfip = Annotated[AfipClient | None, Depends(get_optional_afip_client)]
HttpClient = Annotated[httpx.AsyncClient | None, Depends(get_http_client)]
