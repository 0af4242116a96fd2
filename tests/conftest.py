"""
Pytest configuration and fixtures.
"""

from decimal import Decimal
from typing import AsyncGenerator
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import settings
from app.core.database import Base, get_db
from app.core.security import get_password_hash
from app.main import app
from app.models.customer import Customer
from app.models.enums import CustomerType, IvaType
from app.models.product import Product
from app.models.user import User, UserRole
from app.services.currency import dolar_blue_cache


# In-memory SQLite shared by every connection of a test
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

PASSWORD = "testpassword123"


@pytest.fixture
async def test_engine():
    """Create a fresh database for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session


@pytest.fixture(autouse=True)
def isolated_state(tmp_path, monkeypatch):
    """Keep PDFs, the quote cache and app.state clients local to each test."""
    monkeypatch.setattr(settings, "PDF_STORAGE_PATH", str(tmp_path / "comprobantes"))
    dolar_blue_cache.clear()
    yield
    dolar_blue_cache.clear()
    for name in ("afip_client", "http_client"):
        if hasattr(app.state, name):
            delattr(app.state, name)


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database session override."""

    async def override_get_db():
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


async def create_user(db: AsyncSession, email: str, role: UserRole, **kwargs) -> User:
    user = User(
        email=email,
        hashed_password=get_password_hash(PASSWORD),
        full_name=kwargs.pop("full_name", "Test User"),
        role=role,
        is_active=kwargs.pop("is_active", True),
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def login_headers(client: AsyncClient, email: str) -> dict[str, str]:
    response = await client.post(
        "/api/v1/auth/login",
        json={"email": email, "password": PASSWORD},
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Regular user allowed to write."""
    return await create_user(db_session, "test@example.com", UserRole.USER)


@pytest.fixture
async def auth_client(
    client: AsyncClient,
    test_user: User,
) -> AsyncClient:
    """Create authenticated test client."""
    client.headers.update(await login_headers(client, "test@example.com"))
    return client


@pytest.fixture
async def admin_headers(client: AsyncClient, db_session: AsyncSession) -> dict[str, str]:
    await create_user(db_session, "admin@example.com", UserRole.ADMIN, full_name="Admin")
    return await login_headers(client, "admin@example.com")


@pytest.fixture
async def manager_headers(client: AsyncClient, db_session: AsyncSession) -> dict[str, str]:
    await create_user(db_session, "manager@example.com", UserRole.MANAGER, full_name="Manager")
    return await login_headers(client, "manager@example.com")


@pytest.fixture
async def viewer_headers(client: AsyncClient, db_session: AsyncSession) -> dict[str, str]:
    await create_user(db_session, "viewer@example.com", UserRole.VIEWER, full_name="Viewer")
    return await login_headers(client, "viewer@example.com")


@pytest.fixture
async def customer_id(db_session: AsyncSession) -> int:
    """Final consumer without CUIT."""
    customer = Customer(
        business_name="Juan Pérez",
        customer_type=CustomerType.CONSUMIDOR_FINAL,
    )
    db_session.add(customer)
    await db_session.commit()
    return customer.id


@pytest.fixture
async def ri_customer_id(db_session: AsyncSession) -> int:
    """Responsable inscripto with a valid CUIT."""
    customer = Customer(
        business_name="Ferretería del Sur SRL",
        tax_id="30-71234567-1",
        customer_type=CustomerType.RESPONSABLE_INSCRIPTO,
    )
    db_session.add(customer)
    await db_session.commit()
    return customer.id


@pytest.fixture
async def product_id(db_session: AsyncSession) -> int:
    """Product priced at 1000 ARS + IVA 21% with 10 units."""
    product = Product(
        name="Taladro percutor",
        internal_code="TAL-001",
        price=Decimal("1000.00"),
        markup_percentage=Decimal("30.00"),
        iva_type=IvaType.IVA_21,
        stock=10,
        min_stock=2,
    )
    db_session.add(product)
    await db_session.commit()
    return product.id
