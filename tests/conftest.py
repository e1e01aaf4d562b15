"""Pytest configuration and shared fixtures."""

import os
from collections.abc import AsyncGenerator, Awaitable, Callable
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

from remiwire.core.auth.backend import create_access_token, hash_password
from remiwire.core.database import Base, get_db
from remiwire.core.permissions.models import Permission, Role
from remiwire.core.permissions.seed import SeedResult, seed_defaults
from remiwire.main import create_app

# Import all models to ensure they're registered with Base.metadata
from remiwire.modules.staff.models import Staff, StaffTier


# In-memory SQLite unless a real database is provided
TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

TEST_PASSWORD = "Str0ng!Passw0rd"
TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _enable_sqlite_savepoints(engine: AsyncEngine) -> None:
    """Let pysqlite emit BEGIN itself so SAVEPOINT works, and turn on FKs."""

    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):  # noqa: ARG001
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")


@pytest.fixture(scope="function")
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create test database engine."""
    if _is_sqlite(TEST_DATABASE_URL):
        engine = create_async_engine(
            TEST_DATABASE_URL,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
        _enable_sqlite_savepoints(engine)
    else:
        engine = create_async_engine(TEST_DATABASE_URL, poolclass=NullPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a transactional database session for tests.

    Each test runs in its own transaction that is rolled back
    after the test completes, ensuring test isolation.
    """
    session_factory = async_sessionmaker(
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with engine.connect() as conn:
        await conn.begin()

        async with session_factory(bind=conn) as session:
            yield session

        await conn.rollback()


@pytest.fixture
async def app(db: AsyncSession):
    """Create test application instance."""
    application = create_app()

    # Override database dependency
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    application.dependency_overrides[get_db] = override_get_db

    yield application

    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


# ============================================================
# Access-control Fixtures
# ============================================================


@pytest.fixture
async def seeded(db: AsyncSession) -> SeedResult:
    """Seed the default permissions, system roles and super admin."""
    return await seed_defaults(db)


@pytest.fixture
async def super_admin(db: AsyncSession, seeded: SeedResult) -> Staff:
    """The seeded super admin account."""
    assert seeded.super_admin is not None
    staff = await db.get(Staff, seeded.super_admin.id)
    assert staff is not None
    await db.refresh(staff)
    return staff


StaffMaker = Callable[..., Awaitable[Staff]]


@pytest.fixture
def make_staff(db: AsyncSession) -> StaffMaker:
    """Factory fixture that persists a staff member.

    The staff member gets ``role`` and, unless ``permissions`` is given,
    a snapshot of the role's permissions.
    """

    async def _make(
        role: Role | None = None,
        permissions: list[Permission] | None = None,
        email: str | None = None,
        is_active: bool = True,
        is_blocked: bool = False,
        tier: StaffTier = StaffTier.STAFF,
    ) -> Staff:
        if permissions is None:
            permissions = list(role.permissions) if role else []
        staff = Staff(
            email=email or f"staff-{uuid4().hex[:8]}@example.com",
            password_hash=TEST_PASSWORD_HASH,
            first_name="Test",
            last_name="Staff",
            tier=tier,
            role=role,
            permissions=permissions,
            is_active=is_active,
            is_blocked=is_blocked,
        )
        db.add(staff)
        await db.flush()
        await db.refresh(staff)
        return staff

    return _make


@pytest.fixture
async def role_by_name(db: AsyncSession, seeded: SeedResult):  # noqa: ARG001
    """Look up a seeded role by name."""
    async def _get(name: str) -> Role:
        result = await db.execute(select(Role).where(Role.name == name))
        return result.scalar_one()

    return _get


@pytest.fixture
async def permission_by_name(db: AsyncSession, seeded: SeedResult):  # noqa: ARG001
    """Look up a seeded permission by name."""
    async def _get(name: str) -> Permission:
        result = await db.execute(select(Permission).where(Permission.name == name))
        return result.scalar_one()

    return _get


def _auth_headers(staff: Staff) -> dict[str, str]:
    token = create_access_token(staff.id, str(staff.tier))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers_for() -> Callable[[Staff], dict[str, str]]:
    """Build authorization headers with a valid access token for a staff member."""
    return _auth_headers


@pytest.fixture
def super_admin_headers(super_admin: Staff) -> dict[str, str]:
    return _auth_headers(super_admin)
