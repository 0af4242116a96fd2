"""
User management endpoints.
Own profile and password; user administration for admins.
"""

from fastapi import APIRouter, Query

from app.api.deps import DbSession, CurrentUser, AdminUser
from app.schemas.user import (
    PasswordChangeRequest,
    UserAdminUpdate,
    UserListResponse,
    UserResponse,
    UserUpdate,
)
from app.schemas.base import MessageResponse, page_count
from app.services.user import UserService


router = APIRouter()


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Mi perfil",
    description="Obtener mi perfil de usuario",
)
async def get_my_profile(
    current_user: CurrentUser,
) -> UserResponse:
    return UserResponse.model_validate(current_user)


@router.patch(
    "/me",
    response_model=UserResponse,
    summary="Actualizar mi perfil",
    description="Actualizar los datos de mi perfil",
)
async def update_my_profile(
    data: UserUpdate,
    current_user: CurrentUser,
    db: DbSession,
) -> UserResponse:
    service = UserService(db)
    user = await service.update(current_user, data)
    return UserResponse.model_validate(user)


@router.post(
    "/me/change-password",
    response_model=MessageResponse,
    summary="Cambiar contraseña",
    description="Cambiar mi contraseña",
)
async def change_password(
    data: PasswordChangeRequest,
    current_user: CurrentUser,
    db: DbSession,
) -> MessageResponse:
    service = UserService(db)
    await service.change_password(
        current_user,
        data.current_password,
        data.new_password,
    )
    return MessageResponse(message="Contraseña modificada correctamente")


@router.get(
    "",
    response_model=UserListResponse,
    summary="Listar usuarios",
    description="Listado paginado de usuarios (solo administradores)",
)
async def list_users(
    current_user: AdminUser,
    db: DbSession,
    page: int = Query(1, ge=1, description="Número de página"),
    per_page: int = Query(20, ge=1, le=100, description="Elementos por página"),
) -> UserListResponse:
    service = UserService(db)
    users, total = await service.list(skip=(page - 1) * per_page, limit=per_page)

    return UserListResponse(
        items=[UserResponse.model_validate(u) for u in users],
        total=total,
        page=page,
        per_page=per_page,
        pages=page_count(total, per_page),
    )


@router.patch(
    "/{user_id}",
    response_model=UserResponse,
    summary="Actualizar usuario",
    description="Cambiar nombre, rol o estado de un usuario (solo administradores)",
)
async def update_user(
    user_id: int,
    data: UserAdminUpdate,
    current_user: AdminUser,
    db: DbSession,
) -> UserResponse:
    service = UserService(db)
    user = await service.get_or_404(user_id)
    user = await service.update(user, data)
    return UserResponse.model_validate(user)
