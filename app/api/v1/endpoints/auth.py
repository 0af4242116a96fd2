"""
Authentication endpoints.
Login, register, refresh token and first admin setup.
"""

from fastapi import APIRouter, status

from app.api.deps import DbSession, CurrentUser
from app.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    SetupAdminRequest,
    TokenPair,
    RefreshTokenRequest,
)
from app.schemas.user import UserResponse
from app.services.auth import AuthService


router = APIRouter()
setup_router = APIRouter()


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Registro",
    description="Crear una cuenta de usuario con rol básico",
)
async def register(
    data: RegisterRequest,
    db: DbSession,
) -> UserResponse:
    """Registro de un nuevo usuario."""
    service = AuthService(db)
    user = await service.register(data)
    return UserResponse.model_validate(user)


@router.post(
    "/login",
    response_model=TokenPair,
    summary="Iniciar sesión",
    description="Iniciar sesión con email y contraseña",
)
async def login(
    data: LoginRequest,
    db: DbSession,
) -> TokenPair:
    """Inicio de sesión y obtención de los tokens JWT."""
    service = AuthService(db)
    _, tokens = await service.login(data)
    return tokens


@router.post(
    "/refresh",
    response_model=TokenPair,
    summary="Renovar token",
    description="Obtener nuevos tokens con el refresh token",
)
async def refresh_token(
    data: RefreshTokenRequest,
    db: DbSession,
) -> TokenPair:
    service = AuthService(db)
    return await service.refresh_token(data.refresh_token)


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Usuario actual",
    description="Obtener los datos del usuario autenticado",
)
async def get_current_user(
    current_user: CurrentUser,
) -> UserResponse:
    return UserResponse.model_validate(current_user)


@setup_router.post(
    "/create-admin",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Crear administrador",
    description="Crear el primer administrador; requiere el token de configuración",
)
async def create_admin(
    data: SetupAdminRequest,
    db: DbSession,
) -> UserResponse:
    service = AuthService(db)
    user = await service.create_admin(data)
    return UserResponse.model_validate(user)
