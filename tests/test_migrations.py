"""
Tests for the startup migrations.
"""

import pytest
from sqlalchemy import inspect, text
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from jamoneria.database import init_db


def column_names(connection, table):
    return {c["name"] for c in inspect(connection).get_columns(table)}


@pytest.fixture
def empty_engine(tmp_path):
    return create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'migrate.sqlite'}",
        poolclass=NullPool,
    )


@pytest.mark.asyncio
async def test_fresh_database(empty_engine):
    await init_db(empty_engine)
    
    async with empty_engine.connect() as conn:
        columns = await conn.run_sync(column_names, "orders")
        version = (await conn.execute(text("SELECT version_num FROM alembic_version"))).scalar_one()
    
    assert {"order_id", "payment_method", "payment_status", "checkout_session_id"} <= columns
    assert version == "002_add_payment_method"
    await empty_engine.dispose()


@pytest.mark.asyncio
async def test_running_twice_is_harmless(empty_engine):
    await init_db(empty_engine)
    await init_db(empty_engine)
    
    async with empty_engine.connect() as conn:
        versions = (await conn.execute(text("SELECT version_num FROM alembic_version"))).scalars().all()
    
    assert versions == ["002_add_payment_method"]
    await empty_engine.dispose()


@pytest.mark.asyncio
async def test_legacy_table_gets_payment_method(empty_engine):
    async with empty_engine.begin() as conn:
        await conn.execute(text(
            "CREATE TABLE orders ("
            " id INTEGER PRIMARY KEY AUTOINCREMENT,"
            " order_id TEXT UNIQUE,"
            " customer_name TEXT NOT NULL,"
            " customer_email TEXT NOT NULL,"
            " address TEXT NOT NULL,"
            " city TEXT NOT NULL,"
            " postal_code TEXT NOT NULL,"
            " product_name TEXT NOT NULL,"
            " quantity INTEGER NOT NULL,"
            " amount REAL NOT NULL,"
            " payment_status TEXT DEFAULT 'pending',"
            " checkout_session_id TEXT,"
            " created_at DATETIME DEFAULT CURRENT_TIMESTAMP)"
        ))
        await conn.execute(text(
            "INSERT INTO orders (order_id, customer_name, customer_email, address, city,"
            " postal_code, product_name, quantity, amount)"
            " VALUES ('OLD00001', 'Eva', 'e@x.com', 'Calle 2', 'Sevilla', '41001', 'Pack 3', 3, 16)"
        ))
    
    await init_db(empty_engine)
    
    async with empty_engine.connect() as conn:
        columns = await conn.run_sync(column_names, "orders")
        method = (await conn.execute(
            text("SELECT payment_method FROM orders WHERE order_id = 'OLD00001'")
        )).scalar_one()
    
    assert "payment_method" in columns
    assert method == "card"
    await empty_engine.dispose()
