import os
from decimal import Decimal
from pathlib import Path
from typing import Optional

import pytest

# Settings are read once at import time
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("DATABASE_URL", "sqlite:///./.pytest-storefront.db")

from httpx import ASGITransport, AsyncClient  # noqa: E402

from storefront.core.database import build_engine, build_sessionmaker, close_db, get_db, init_db  # noqa: E402
from storefront.core.security import SecurityUtils  # noqa: E402
from storefront.main import app  # noqa: E402
from storefront.models import Address, CartItem, Category, Product, User, UserRole  # noqa: E402

PASSWORD = "Secret123"


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture
async def engine(tmp_path):
    """File-backed SQLite so separate sessions see each other's commits"""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'storefront.db'}")
    await init_db(engine)
    yield engine
    await close_db(engine)


@pytest.fixture
def session_factory(engine):
    return build_sessionmaker(engine)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as ac:
        yield ac
    app.dependency_overrides.clear()


def auth_headers(user: User) -> dict:
    token = SecurityUtils.create_access_token({
        "sub": str(user.id),
        "email": user.email,
        "role": UserRole(user.role).value,
    })
    return {"Authorization": f"Bearer {token}"}


class Seeder:
    """Inserts fixtures rows, each in its own committed session"""

    def __init__(self, session_factory):
        self.session_factory = session_factory
        self._counter = 0

    def _next(self) -> int:
        self._counter += 1
        return self._counter

    async def _save(self, obj):
        async with self.session_factory() as session:
            session.add(obj)
            await session.commit()
        return obj

    async def user(self, email: Optional[str] = None, role: UserRole = UserRole.CUSTOMER) -> User:
        n = self._next()
        return await self._save(User(
            email=email or f"user{n}@example.com",
            password_hash=SecurityUtils.hash_password(PASSWORD),
            first_name="Test",
            last_name=f"User{n}",
            role=role,
            is_active=True,
        ))

    async def admin(self) -> User:
        return await self.user(role=UserRole.ADMIN)

    async def category(self, name: str = "General") -> Category:
        return await self._save(Category(name=name, description=f"{name} products"))

    async def product(
        self,
        category: Category,
        name: Optional[str] = None,
        price: str = "100.00",
        sale_price: Optional[str] = None,
        is_on_sale: bool = False,
        stock_quantity: int = 10,
        rating: str = "0",
        description: Optional[str] = None,
    ) -> Product:
        return await self._save(Product(
            name=name or f"Product {self._next()}",
            description=description,
            category_id=category.id,
            price=Decimal(price),
            sale_price=Decimal(sale_price) if sale_price is not None else None,
            is_on_sale=is_on_sale,
            stock_quantity=stock_quantity,
            rating=Decimal(rating),
        ))

    async def address(self, user: User, is_default: bool = False) -> Address:
        return await self._save(Address(
            user_id=user.id,
            full_name=f"{user.first_name} {user.last_name}",
            address_line1="1 Market Street",
            city="Istanbul",
            state="Istanbul",
            postal_code="34000",
            country="Turkey",
            phone_number="+905551112233",
            is_default=is_default,
        ))

    async def cart_item(self, user: User, product: Product, quantity: int = 1) -> CartItem:
        return await self._save(CartItem(user_id=user.id, product_id=product.id, quantity=quantity))


@pytest.fixture
def seed(session_factory):
    return Seeder(session_factory)
