"""
PayDesk - Test Configuration

Pytest fixtures and configuration.

Tests run against an in-memory SQLite database (aiosqlite); each test gets
fresh tables.
"""

from decimal import Decimal
from typing import AsyncGenerator, Dict

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_async_session
from app.models.company import Company
from app.models.payroll import Employee, EmploymentType
from app.models.user import User, UserRole
from app.services.change_feed import get_change_feed
from app.services.company_service import CompanyService
from app.utils.security import create_access_token, get_password_hash
from main import app


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

ADMIN_PASSWORD = "AdminPass123!"
EMPLOYEE_PASSWORD = "EmployeePass123!"


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test."""
    session_factory = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with database session override."""

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_async_session] = override_get_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_change_feed():
    """The change feed is process-wide; start every test without listeners."""
    feed = get_change_feed()
    feed.clear()
    yield feed
    feed.clear()


# ===========================================
# DATA FIXTURES
# ===========================================

@pytest_asyncio.fixture
async def test_company(db_session: AsyncSession) -> Company:
    """Create a company with onboarding defaults."""
    return await CompanyService(db_session).create_company("Acme Corp")


@pytest_asyncio.fixture
async def other_company(db_session: AsyncSession) -> Company:
    """A second, unrelated company."""
    return await CompanyService(db_session).create_company("Globex")


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession, test_company: Company) -> User:
    """Create an admin principal."""
    user = User(
        email="admin@acme.com",
        hashed_password=get_password_hash(ADMIN_PASSWORD),
        name="Ada Admin",
        role=UserRole.ADMIN,
        company_id=test_company.id,
        is_active=True,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def manager_user(db_session: AsyncSession, test_company: Company) -> User:
    """Create a manager principal."""
    user = User(
        email="manager@acme.com",
        hashed_password=get_password_hash(ADMIN_PASSWORD),
        name="Max Manager",
        role=UserRole.MANAGER,
        company_id=test_company.id,
        is_active=True,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


async def _create_employee(
    db_session: AsyncSession,
    company: Company,
    employee_id: str,
    name: str,
    email: str,
    salary: Decimal,
    employment_type: EmploymentType = EmploymentType.SALARIED,
) -> Employee:
    user = User(
        email=email,
        hashed_password=get_password_hash(EMPLOYEE_PASSWORD),
        name=name,
        role=UserRole.EMPLOYEE,
        company_id=company.id,
        employee_id=employee_id,
        is_active=True,
    )
    db_session.add(user)
    await db_session.flush()

    employee = Employee(
        company_id=company.id,
        user_id=user.id,
        employee_id=employee_id,
        name=name,
        email=email,
        job_title="Accountant",
        employment_type=employment_type,
        salary=salary,
        bank_name="Bank of Kigali",
        account_number="000123456789",
        role=UserRole.EMPLOYEE,
    )
    db_session.add(employee)
    await db_session.commit()
    await db_session.refresh(employee)
    return employee


@pytest_asyncio.fixture
async def test_employee(db_session: AsyncSession, test_company: Company) -> Employee:
    """Salaried employee EMP001 earning 1000 with a linked login."""
    return await _create_employee(
        db_session, test_company, "EMP001", "Jane Doe", "jane@acme.com", Decimal("1000.00")
    )


@pytest_asyncio.fixture
async def second_employee(db_session: AsyncSession, test_company: Company) -> Employee:
    """Daily-rate employee EMP002 with a rate of 50."""
    return await _create_employee(
        db_session,
        test_company,
        "EMP002",
        "John Smith",
        "john@acme.com",
        Decimal("50.00"),
        employment_type=EmploymentType.DAILY_RATE,
    )


@pytest_asyncio.fixture
async def employee_user(db_session: AsyncSession, test_employee: Employee) -> User:
    """The login principal of test_employee."""
    return await db_session.get(User, test_employee.user_id)


def _headers(user: User) -> Dict[str, str]:
    token = create_access_token({"sub": user.id, "company_id": user.company_id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(admin_user: User) -> Dict[str, str]:
    """Auth headers for the admin."""
    return _headers(admin_user)


@pytest.fixture
def manager_headers(manager_user: User) -> Dict[str, str]:
    """Auth headers for the manager."""
    return _headers(manager_user)


@pytest.fixture
def employee_headers(employee_user: User) -> Dict[str, str]:
    """Auth headers for test_employee."""
    return _headers(employee_user)
