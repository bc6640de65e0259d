"""
Shared fixtures for unit tests.

Every test gets its own in-memory SQLite database with the full schema, the
built-in roles and a small staff:

- owner (Owner), admin (Administrator), editor (Editor)
- expert and co_expert (Expert)
- contributor (Contributor)

The HTTP fixtures drive the application in-process through httpx's ASGI
transport with the request sessions swapped for the per-test session.
"""

from typing import AsyncGenerator, Awaitable, Callable, Dict, List, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.pool import StaticPool

from expertpress.core.database.entities.posts import Post
from expertpress.core.database.entities.users import RoleName, User
from expertpress.core.database.session import get_session
from expertpress.core.database.utils import SqlRepoBundle, build_sql_repos
from expertpress.frontend.routes import get_environment
from expertpress.server.main import app

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

STAFF = {
    "owner": ("Olivia Owner", RoleName.OWNER),
    "admin": ("Adam Admin", RoleName.ADMINISTRATOR),
    "editor": ("Edith Editor", RoleName.EDITOR),
    "expert": ("Ezra Expert", RoleName.EXPERT),
    "co_expert": ("Cora Expert", RoleName.EXPERT),
    "contributor": ("Carl Contributor", RoleName.CONTRIBUTOR),
}


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh in-memory database for a test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a new session for each test."""
    async_session_maker = async_sessionmaker(test_engine, expire_on_commit=False)

    async with async_session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def repos(session: AsyncSession) -> SqlRepoBundle:
    return build_sql_repos(session)


@pytest_asyncio.fixture
async def staff(repos: SqlRepoBundle) -> Dict[str, User]:
    """Create the built-in roles and one user per staff slot."""
    await repos.users.ensure_roles()

    users = {}
    for key, (name, role) in STAFF.items():
        slug = key.replace("_", "-")
        user = await repos.users.create(User(name=name, slug=slug, email=f"{slug}@example.com"))
        users[key] = await repos.users.assign_role(user, role)
    return users


@pytest.fixture
def make_post(repos: SqlRepoBundle, staff: Dict[str, User]) -> Callable[..., Awaitable[Post]]:
    """Factory creating a post authored by the given users, in order."""

    async def _make_post(slug: str, experts: Optional[List[User]] = None, **attrs) -> Post:
        experts = experts or [staff["expert"]]
        attrs.setdefault("title", slug.replace("-", " ").title())
        attrs.setdefault("status", "published")
        attrs.setdefault("html", f"<p>Content of {slug}</p>")
        post, _ = await repos.posts.add(
            {"slug": slug, "experts": [{"id": user.id} for user in experts], **attrs},
            context_user=experts[0].id,
        )
        return post

    return _make_post


@pytest_asyncio.fixture
async def client(session):
    """Async client bound to the test database session."""

    async def _get_session():
        yield session

    app.dependency_overrides[get_session] = _get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def as_user():
    """Build the headers identifying a staff user."""

    def _as_user(user: User) -> Dict[str, str]:
        return {"X-User-Id": user.id}

    return _as_user


@pytest.fixture
def members_enabled(monkeypatch):
    from expertpress.server.core.config import settings

    monkeypatch.setattr(settings, "members_enabled", True)


@pytest.fixture(autouse=True)
def _fresh_theme_environment():
    get_environment.cache_clear()
    yield
    get_environment.cache_clear()
