"""Shared fixtures: an in-memory SQLite catalog and an HTTP client bound to it."""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ.setdefault("DB_CREATE_TABLES", "false")

from decimal import Decimal
from typing import Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from app.core.database import get_async_session
from app.main import app
from app.models import (
    Product,
    ProductCategory,
    ProductDescription,
    ProductModel,
    ProductModelProductDescription,
)


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
async def client(session_maker):
    async def override_session():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.clear()


def make_product(name: str, number: str, category: Optional[ProductCategory] = None, **fields) -> Product:
    values = {
        "name": name,
        "productNumber": number,
        "standardCost": Decimal("10.00"),
        "listPrice": Decimal("19.99"),
        "productCategoryId": category.productCategoryId if category else None,
    }
    values.update(fields)
    return Product(**values)


async def add_products(db: AsyncSession, count: int, prefix: str, category: Optional[ProductCategory] = None):
    products = [
        make_product(f"{prefix} {index:02d}", f"{prefix[:2].upper()}-{index:04d}", category)
        for index in range(1, count + 1)
    ]
    db.add_all(products)
    await db.commit()
    return products


@pytest.fixture
async def categories(db):
    """Three categories keyed by name."""
    rows = {
        name: ProductCategory(name=name)
        for name in ("Mountain Bikes", "Road Bikes", "Helmets")
    }
    db.add_all(rows.values())
    await db.commit()
    return rows


@pytest.fixture
async def catalog(db, categories):
    """A small catalog: 4 mountain bikes, 3 road bikes, 2 helmets and 1 uncategorized part."""
    model = ProductModel(name="Mountain-100", catalogDescription="Top of the line trail bike")
    english = ProductDescription(description="Light aluminium frame.")
    french = ProductDescription(description="Cadre léger en aluminium.")
    db.add_all([model, english, french])
    await db.commit()

    db.add_all([
        ProductModelProductDescription(
            productModelId=model.productModelId,
            productDescriptionId=english.productDescriptionId,
            culture="en",
        ),
        ProductModelProductDescription(
            productModelId=model.productModelId,
            productDescriptionId=french.productDescriptionId,
            culture="fr",
        ),
    ])

    mountain = [
        make_product(f"Mountain-100 Silver, {size}", f"BK-M82S-{size}", categories["Mountain Bikes"],
                     productModelId=model.productModelId, size=str(size), color="Silver",
                     listPrice=Decimal("3399.99"))
        for size in (38, 42, 44, 48)
    ]
    road = [
        make_product(f"Road-150 Red, {size}", f"BK-R93R-{size}", categories["Road Bikes"],
                     size=str(size), color="Red", listPrice=Decimal("3578.27"))
        for size in (44, 48, 52)
    ]
    helmets = [
        make_product("Sport-100 Helmet, Red", "HL-U509-R", categories["Helmets"], color="Red",
                     listPrice=Decimal("34.99"), thumbNailPhoto=b"GIF89a helmet"),
        make_product("Sport-100 Helmet, Blue", "HL-U509-B", categories["Helmets"], color="Blue",
                     listPrice=Decimal("34.99")),
    ]
    loose = [make_product("HL Road Frame - Black, 58", "FR-R92B-58")]

    db.add_all(mountain + road + helmets + loose)
    await db.commit()
    return {
        "model": model,
        "mountain": mountain,
        "road": road,
        "helmets": helmets,
        "loose": loose,
    }
