"""Shared pytest fixtures for backend tests."""

import os
from datetime import timedelta
from typing import AsyncGenerator
from uuid import uuid4

# Settings are read at import time
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-workhub-tests")
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite+aiosqlite:///:memory:")

import bcrypt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from workhub.database import Base, get_db
from workhub.main import app
from workhub.models import Member, MemberRole, Project, Task, TaskStatus, User, Workspace
from workhub.services.auth_service import create_access_token
from workhub.services.lifecycle_service import create_project, create_workspace
from workhub.utils.dates import utcnow

TEST_PASSWORD = "TestPassword123!"


def get_test_password_hash(password: str) -> str:
    """
    Generate a password hash for testing.

    Uses bcrypt directly so fixtures don't pay for passlib's backend detection.
    """
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


# Use in-memory SQLite for testing
SQLALCHEMY_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def engine():
    """Create a test database engine with SQLite."""
    engine = create_async_engine(SQLALCHEMY_DATABASE_URL, poolclass=StaticPool)

    # Enable foreign key support for SQLite
    @event.listens_for(engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with database dependency override."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client

    app.dependency_overrides.clear()


async def _make_user(db_session: AsyncSession, email: str, name: str) -> User:
    user = User(
        id=uuid4(),
        email=email,
        password_hash=get_test_password_hash(TEST_PASSWORD),
        name=name,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a test user."""
    return await _make_user(db_session, "test@example.com", "Test User")


@pytest_asyncio.fixture
async def test_user_2(db_session: AsyncSession) -> User:
    """Create a second test user."""
    return await _make_user(db_session, "test2@example.com", "Test User 2")


@pytest.fixture
def auth_token(test_user: User) -> str:
    """Create an authentication token for the test user."""
    return create_access_token(data={"sub": str(test_user.id), "email": test_user.email})


@pytest.fixture
def auth_token_2(test_user_2: User) -> str:
    """Create an authentication token for the second test user."""
    return create_access_token(data={"sub": str(test_user_2.id), "email": test_user_2.email})


@pytest.fixture
def auth_headers(auth_token: str) -> dict:
    """Create authorization headers."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def auth_headers_2(auth_token_2: str) -> dict:
    """Create authorization headers for second user."""
    return {"Authorization": f"Bearer {auth_token_2}"}


@pytest_asyncio.fixture
async def test_workspace(db_session: AsyncSession, test_user: User) -> Workspace:
    """Create a workspace with test_user as its ADMIN."""
    return await create_workspace(db_session, test_user, name="Test Workspace")


@pytest_asyncio.fixture
async def admin_member(
    db_session: AsyncSession, test_workspace: Workspace, test_user: User
) -> Member:
    """The ADMIN membership created along with test_workspace."""
    result = await db_session.execute(
        select(Member).where(
            Member.workspace_id == test_workspace.id,
            Member.user_id == test_user.id,
        )
    )
    return result.scalar_one()


@pytest_asyncio.fixture
async def second_member(
    db_session: AsyncSession, test_workspace: Workspace, test_user_2: User
) -> Member:
    """Enroll test_user_2 in test_workspace as a MEMBER."""
    member = Member(
        workspace_id=test_workspace.id,
        user_id=test_user_2.id,
        role=MemberRole.MEMBER.value,
    )
    db_session.add(member)
    await db_session.commit()
    await db_session.refresh(member)
    return member


@pytest_asyncio.fixture
async def test_project(db_session: AsyncSession, test_workspace: Workspace) -> Project:
    """Create a test project."""
    return await create_project(db_session, test_workspace.id, name="Test Project")


@pytest_asyncio.fixture
async def test_task(
    db_session: AsyncSession, test_workspace: Workspace, test_project: Project
) -> Task:
    """Create a test task at the head of the TODO column."""
    task = Task(
        id=uuid4(),
        workspace_id=test_workspace.id,
        project_id=test_project.id,
        name="Test Task",
        description="A test task description",
        status=TaskStatus.TODO.value,
        due_date=utcnow() + timedelta(days=7),
        position=1000.0,
    )
    db_session.add(task)
    await db_session.commit()
    await db_session.refresh(task)
    return task
