"""
Category service.
"""

import logging
import re
import unicodedata
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from fastapi import HTTPException, status

from app.models.category import Category, CategoryType
from app.schemas.category import CategoryCreate, CategoryUpdate


logger = logging.getLogger(__name__)


DEFAULT_CATEGORIES = (
    ("Samsung", CategoryType.MARCA, "#1f77d0"),
    ("Apple", CategoryType.MARCA, "#000000"),
    ("Xiaomi", CategoryType.MARCA, "#ff6900"),
    ("Huawei", CategoryType.MARCA, "#ff0000"),
    ("Smartphones", CategoryType.TIPO, "#4caf50"),
    ("Tablets", CategoryType.TIPO, "#2196f3"),
    ("Auriculares", CategoryType.TIPO, "#9c27b0"),
    ("Cargadores", CategoryType.TIPO, "#ff9800"),
    ("Electrónicos", CategoryType.RUBRO, "#607d8b"),
    ("Accesorios", CategoryType.RUBRO, "#795548"),
    ("Audio", CategoryType.RUBRO, "#e91e63"),
    ("Plástico", CategoryType.MATERIAL, "#9e9e9e"),
    ("Metal", CategoryType.MATERIAL, "#424242"),
    ("Vidrio", CategoryType.MATERIAL, "#03a9f4"),
)


def slugify(name: str) -> str:
    """``"Electrónicos Básicos"`` -> ``"electronicos-basicos"``."""
    value = unicodedata.normalize("NFD", name.lower())
    value = "".join(c for c in value if not unicodedata.combining(c))
    value = re.sub(r"[^a-z0-9\s-]", "", value).strip()
    value = re.sub(r"\s+", "-", value)
    return re.sub(r"-+", "-", value)


class CategoryService:
    """Service for category operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _slug_exists(self, slug: str, exclude_id: int | None = None) -> bool:
        query = select(Category.id).where(Category.slug == slug)
        if exclude_id is not None:
            query = query.where(Category.id != exclude_id)
        return (await self.db.execute(query)).first() is not None

    async def unique_slug(self, name: str, exclude_id: int | None = None) -> str:
        """Slug for ``name``, suffixed with -2, -3... until unused."""
        base = slugify(name) or "categoria"
        slug = base
        counter = 1
        while await self._slug_exists(slug, exclude_id):
            counter += 1
            slug = f"{base}-{counter}"
        return slug

    async def _check_parent(self, parent_id: int | None, category_id: int | None = None) -> None:
        if parent_id is None:
            return
        if parent_id == category_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Una categoría no puede ser su propia categoría padre",
            )
        if await self.db.get(Category, parent_id) is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Categoría padre no encontrada",
            )

    async def create(self, data: CategoryCreate) -> Category:
        await self._check_parent(data.parent_id)

        category = Category(
            **data.model_dump(),
            slug=await self.unique_slug(data.name),
        )
        self.db.add(category)
        await self.db.flush()

        return await self.get_or_404(category.id)

    async def get_by_id(self, category_id: int) -> Category | None:
        result = await self.db.execute(
            select(Category)
            .where(Category.id == category_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_or_404(self, category_id: int) -> Category:
        category = await self.get_by_id(category_id)
        if not category:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Categoría no encontrada",
            )
        return category

    async def update(self, category: Category, data: CategoryUpdate) -> Category:
        """Update a category; renaming regenerates the slug."""
        update_data = data.model_dump(exclude_unset=True)

        if "parent_id" in update_data:
            await self._check_parent(update_data["parent_id"], category.id)

        if "name" in update_data and update_data["name"] != category.name:
            category.slug = await self.unique_slug(update_data["name"], category.id)

        for field, value in update_data.items():
            setattr(category, field, value)

        await self.db.flush()
        return await self.get_or_404(category.id)

    async def deactivate(self, category: Category) -> None:
        category.is_active = False
        await self.db.flush()

    async def create_defaults(self) -> list[Category]:
        """Create the default categories whose slug does not exist yet."""
        created = []
        for name, category_type, color in DEFAULT_CATEGORIES:
            if await self._slug_exists(slugify(name)):
                continue
            category = Category(
                name=name,
                slug=slugify(name),
                type=category_type,
                color=color,
            )
            self.db.add(category)
            created.append(category)

        await self.db.flush()
        logger.info("Categorías por defecto creadas: %s", len(created))
        return created

    async def tree(self, category_type: CategoryType | None = None) -> list[Category]:
        """Active root categories; children are loaded with them."""
        query = select(Category).where(
            Category.parent_id.is_(None),
            Category.is_active.is_(True),
        )
        if category_type:
            query = query.where(Category.type == category_type)

        result = await self.db.execute(
            query.order_by(Category.name).execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def list(
        self,
        category_type: CategoryType | None = None,
        include_inactive: bool = False,
    ):
        query = select(Category)
        if category_type:
            query = query.where(Category.type == category_type)
        if not include_inactive:
            query = query.where(Category.is_active.is_(True))

        result = await self.db.execute(query.order_by(Category.type, Category.name))
        return list(result.scalars().all())
