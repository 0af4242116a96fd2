"""
Category endpoints.
"""

from fastapi import APIRouter, Query, status

from app.api.deps import DbSession, CurrentUser, WriterUser
from app.models.category import CategoryType
from app.schemas.category import (
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
    CategoryTreeNode,
)
from app.schemas.base import MessageResponse
from app.services.category import CategoryService


router = APIRouter()


# Levels of subcategories loaded with each root
MAX_TREE_DEPTH = 3


def _tree_node(category, depth: int = 0) -> CategoryTreeNode:
    children = []
    if depth < MAX_TREE_DEPTH:
        children = [
            _tree_node(child, depth + 1)
            for child in category.children
            if child.is_active
        ]
    return CategoryTreeNode(
        **CategoryResponse.model_validate(category).model_dump(),
        children=children,
    )


@router.get(
    "",
    response_model=list[CategoryResponse],
    summary="Listar categorías",
)
async def list_categories(
    current_user: CurrentUser,
    db: DbSession,
    type: CategoryType | None = Query(None, description="Filtrar por tipo"),
    include_inactive: bool = Query(False, description="Incluir categorías inactivas"),
) -> list[CategoryResponse]:
    service = CategoryService(db)
    categories = await service.list(category_type=type, include_inactive=include_inactive)
    return [CategoryResponse.model_validate(c) for c in categories]


@router.get(
    "/tree",
    response_model=list[CategoryTreeNode],
    summary="Árbol de categorías",
    description="Categorías raíz activas con sus subcategorías",
)
async def category_tree(
    current_user: CurrentUser,
    db: DbSession,
    type: CategoryType | None = Query(None, description="Filtrar por tipo"),
) -> list[CategoryTreeNode]:
    service = CategoryService(db)
    return [_tree_node(c) for c in await service.tree(type)]


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Crear categoría",
)
async def create_category(
    data: CategoryCreate,
    current_user: WriterUser,
    db: DbSession,
) -> CategoryResponse:
    service = CategoryService(db)
    category = await service.create(data)
    return CategoryResponse.model_validate(category)


@router.post(
    "/defaults",
    response_model=list[CategoryResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Crear categorías por defecto",
    description="Crea marcas, tipos, rubros y materiales habituales que no existan",
)
async def create_default_categories(
    current_user: WriterUser,
    db: DbSession,
) -> list[CategoryResponse]:
    service = CategoryService(db)
    created = await service.create_defaults()
    return [CategoryResponse.model_validate(c) for c in created]


@router.get(
    "/{category_id}",
    response_model=CategoryResponse,
    summary="Detalle de categoría",
)
async def get_category(
    category_id: int,
    current_user: CurrentUser,
    db: DbSession,
) -> CategoryResponse:
    service = CategoryService(db)
    return CategoryResponse.model_validate(await service.get_or_404(category_id))


@router.patch(
    "/{category_id}",
    response_model=CategoryResponse,
    summary="Actualizar categoría",
)
async def update_category(
    category_id: int,
    data: CategoryUpdate,
    current_user: WriterUser,
    db: DbSession,
) -> CategoryResponse:
    service = CategoryService(db)
    category = await service.get_or_404(category_id)
    category = await service.update(category, data)
    return CategoryResponse.model_validate(category)


@router.delete(
    "/{category_id}",
    response_model=MessageResponse,
    summary="Desactivar categoría",
)
async def delete_category(
    category_id: int,
    current_user: WriterUser,
    db: DbSession,
) -> MessageResponse:
    service = CategoryService(db)
    category = await service.get_or_404(category_id)
    await service.deactivate(category)
    return MessageResponse(message="Categoría desactivada correctamente")
