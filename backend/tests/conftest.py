"""
Shared test fixtures and configuration for HRIS backend tests.
"""
import os
from datetime import date, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment before importing app modules
os.environ["ENVIRONMENT"] = "development"
os.environ["DEBUG"] = "true"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only-min-32-chars"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.pop("REDIS_URL", None)


@pytest.fixture
def mock_db_session():
    """Create a mock async database session."""
    session = AsyncMock(spec=AsyncSession)
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.refresh = AsyncMock()
    session.flush = AsyncMock()
    session.add = MagicMock()
    session.delete = AsyncMock()
    session.close = AsyncMock()
    return session


@pytest.fixture
def mock_user():
    """Create a mock user for testing."""
    user = MagicMock()
    user.id = 1
    user.email = "hr@example.com"
    user.full_name = "HR Admin"
    user.hashed_password = "$2b$12$LQv3c1yqBWVHxkd0LHAkCOYz6TtxMQJqhN8/X4.F/S.Z5.S5.S5.S"  # bcrypt hash
    user.is_active = True
    user.is_super_admin = False
    user.employee_id = 10
    user.company_id = 1
    user.role_names = ["hr_admin"]
    user.permission_names = ["employee:read", "movement:read", "movement:approve"]
    user.created_at = datetime.utcnow()
    user.last_login = None
    return user


@pytest.fixture
def mock_super_admin(mock_user):
    """Create a mock super admin for testing."""
    mock_user.is_super_admin = True
    mock_user.role_names = ["super_admin"]
    return mock_user


@pytest.fixture
def mock_request():
    """Create a mock FastAPI request."""
    request = MagicMock()
    request.client.host = "127.0.0.1"
    request.headers = {"user-agent": "pytest"}
    return request


@pytest_asyncio.fixture
async def db_session():
    """An AsyncSession bound to a fresh in-memory SQLite schema."""
    from hris.db.base import Base

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def company(db_session):
    from hris.models.company import Company

    company = Company(name="PT Maju Bersama", code="MB", company_type="holding", status="active")
    db_session.add(company)
    await db_session.commit()
    await db_session.refresh(company)
    return company


@pytest_asyncio.fixture
async def employee(db_session, company):
    from hris.models.employee import Employee

    employee = Employee(
        employee_id="MB-0001",
        first_name="Budi",
        last_name="Santoso",
        email="budi@example.com",
        company_id=company.id,
        grade_level="G3",
        employment_status="active",
        employment_type="permanent",
        join_date=date(2021, 3, 1),
        basic_salary=Decimal("10000000"),
    )
    db_session.add(employee)
    await db_session.commit()
    await db_session.refresh(employee)
    return employee


@pytest_asyncio.fixture
async def actor(db_session, company):
    """A persisted HR user performing workflow actions."""
    from hris.core.security import get_password_hash
    from hris.models.user import User

    user = User(
        email="hr@example.com",
        hashed_password=get_password_hash("Secret123!"),
        full_name="HR Admin",
        company_id=company.id,
        is_active=True,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def employee_user(db_session, employee):
    """The user account linked to ``employee``; receives workflow notifications."""
    from hris.core.security import get_password_hash
    from hris.models.user import User

    user = User(
        email="budi@example.com",
        hashed_password=get_password_hash("Secret123!"),
        full_name="Budi Santoso",
        employee_id=employee.id,
        company_id=employee.company_id,
        is_active=True,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user
