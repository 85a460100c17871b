"""
Pytest configuration and fixtures.
"""

from decimal import Decimal
from typing import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool

from jamoneria.database import Base, get_db
from jamoneria.main import app
from jamoneria.api.deps import get_payment_service, get_telegram_service
from jamoneria.models.order import PaymentMethod
from jamoneria.services.dodo_service import CheckoutSession, DodoPaymentsService
from jamoneria.services.order_store import OrderStore
from jamoneria.services.telegram_service import TelegramService


@pytest_asyncio.fixture
async def test_engine(tmp_path):
    """File-backed SQLite so separate sessions really are separate connections."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.sqlite'}",
        poolclass=NullPool,
        echo=False,
    )
    
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    
    yield engine
    
    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )


@pytest_asyncio.fixture
async def db(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for a test."""
    async with session_maker() as session:
        yield session


@pytest.fixture
def telegram():
    """Telegram double: every notification succeeds."""
    mock = AsyncMock(spec=TelegramService)
    mock.notify.return_value = True
    mock.is_configured = True
    return mock


@pytest.fixture
def payments():
    """Dodo Payments double returning a usable checkout session."""
    mock = AsyncMock(spec=DodoPaymentsService)
    mock.create_checkout_session.return_value = CheckoutSession(
        session_id="cks_test_123",
        checkout_url="https://test.checkout.dodopayments.com/session/cks_test_123",
    )
    return mock


@pytest_asyncio.fixture
async def client(session_maker, telegram, payments):
    async def override_get_db():
        async with session_maker() as session:
            yield session
            await session.commit()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_telegram_service] = lambda: telegram
    app.dependency_overrides[get_payment_service] = lambda: payments

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def card_order(session_maker):
    """A pending card order waiting for payment confirmation."""
    async with session_maker() as session:
        return await OrderStore(session).create_order(
            order_id="A1B2C3D4",
            customer_name="Ana",
            customer_email="a@x.com",
            address="Calle 1",
            city="Madrid",
            postal_code="28001",
            product_name="Pack 6",
            quantity=6,
            amount=Decimal("30.00"),
            payment_method=PaymentMethod.CARD,
            checkout_session_id="cks_test_123",
        )
