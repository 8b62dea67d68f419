"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import date
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from temple_stuart.config import Settings
from temple_stuart.core.database import Database, get_db
from temple_stuart.main import create_app
from temple_stuart.models import LotStatus, StockLot, User

# Test database URL (use SQLite for testing)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

LotFactory = Callable[..., Awaitable[StockLot]]


@pytest.fixture(scope="function")
async def database() -> AsyncGenerator[Database, None]:
    """Create a fresh in-memory database for each test."""
    db = Database(TEST_DATABASE_URL)
    await db.create_all()

    yield db

    await db.drop_all()
    await db.dispose()


@pytest.fixture(scope="function")
async def db_session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with database.session_factory() as session:
        yield session


@pytest.fixture(scope="function")
async def user(db_session: AsyncSession) -> User:
    """Create the calling user."""
    user = User(email="trader@example.com", name="Test Trader")
    db_session.add(user)
    await db_session.commit()
    return user


@pytest.fixture(scope="function")
async def other_user(db_session: AsyncSession) -> User:
    """Create a second user whose data must stay untouched."""
    user = User(email="someone.else@example.com")
    db_session.add(user)
    await db_session.commit()
    return user


@pytest.fixture(scope="function")
def make_lot(db_session: AsyncSession) -> LotFactory:
    """Factory for committed stock lots."""

    async def _make_lot(
        user: User,
        symbol: str = "XYZ",
        acquired_date: date = date(2023, 1, 1),
        quantity: str = "10",
        cost_per_share: str = "20",
        status: LotStatus = LotStatus.OPEN,
        remaining_quantity: str | None = None,
    ) -> StockLot:
        qty = Decimal(quantity)
        cps = Decimal(cost_per_share)
        lot = StockLot(
            user_id=user.id,
            investment_txn_id=f"TXN-{symbol}-{acquired_date.isoformat()}",
            symbol=symbol,
            acquired_date=acquired_date,
            original_quantity=qty,
            remaining_quantity=Decimal(remaining_quantity) if remaining_quantity is not None else qty,
            cost_per_share=cps,
            total_cost_basis=(qty * cps).quantize(Decimal("0.01")),
            fees=Decimal("0.00"),
            status=status.value,
        )
        db_session.add(lot)
        await db_session.commit()
        return lot

    return _make_lot


@pytest.fixture(scope="function")
async def client(db_session: AsyncSession, user: User) -> AsyncGenerator[AsyncClient, None]:
    """Create an API client authenticated as ``user``.

    Requests share ``db_session`` with the test so seeded rows are visible.
    """
    app = create_app(Settings(database_url=TEST_DATABASE_URL))

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        cookies={"userEmail": user.email},
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    await app.state.database.dispose()
