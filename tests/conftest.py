# tests/conftest.py
from __future__ import annotations

import pytest
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import NullPool

from models.hateoas import LinkTemplates
from models.resource import Entity, RelationDescriptor
from services.hal import HALBuilder
from services.jsongraph import JSONGraphBuilder
from services.links import LinkResolver

TEMPLATES = {
    "order": {
        "self": "/orders/{id}",
        "items": "/orders/{id}/items",
        "customer": "/orders/{id}/customer",
        "highlights": "/orders/{id}/highlights",
    },
    "item": {
        "self": "/items/{id}",
        "order": "/items/{id}/order",
        "supplier": "/items/{id}/supplier",
    },
    "customer": {
        "self": "/customers/{id}",
        "orders": "/customers/{id}/orders",
    },
    "supplier": {
        "self": "/suppliers/{id}",
    },
}


@pytest.fixture
def templates() -> LinkTemplates:
    return LinkTemplates(templates=TEMPLATES)


@pytest.fixture
def resolver(templates: LinkTemplates) -> LinkResolver:
    return LinkResolver(templates)


@pytest.fixture
def hal(resolver: LinkResolver) -> HALBuilder:
    return HALBuilder(resolver)


@pytest.fixture
def jsongraph(resolver: LinkResolver) -> JSONGraphBuilder:
    return JSONGraphBuilder(resolver)


def make_item(item_id: int, qty: int) -> Entity:
    return Entity(type="item", id=item_id, attributes={"qty": qty})


def make_order(embed: bool = False, items: list[Entity] | None = None) -> Entity:
    """order/1 with a to-many 'items' relation targeting item/5 and item/3."""
    if items is None:
        items = [make_item(5, 2), make_item(3, 1)]
    return Entity(
        type="order",
        id=1,
        attributes={"total": 42},
        relations=[RelationDescriptor.to_many("items", items, embed=embed)],
    )


# -- HTTP fixtures --------------------------------------------------------


@pytest.fixture
def session_factory(tmp_path):
    """
    Seeded SQLite catalog. Seeding goes through a synchronous engine so no
    event loop is touched here; NullPool keeps the async connections off any
    single loop.
    """
    from services.database import Base
    from scripts.seed_catalog import catalog_rows, load_seed_data

    path = tmp_path / "catalog.db"
    sync_engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(sync_engine)
    with Session(sync_engine) as db:
        for rows in catalog_rows(load_seed_data()):
            db.add_all(rows)
            db.flush()
        db.commit()
    sync_engine.dispose()

    engine = create_async_engine(f"sqlite+aiosqlite:///{path}", poolclass=NullPool)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


def build_app(session_factory, link_templates: LinkTemplates | None = None):
    from main import create_app
    from services.database import get_db

    app = create_app(link_templates=link_templates, init_database=False)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
def app(session_factory):
    return build_app(session_factory)
