import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app
from app.models.user import UserProfile


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def users(session_factory):
    async with session_factory() as session:
        profiles = [
            UserProfile(name="Ana", avatar="woman", xp=0, badges=[]),
            UserProfile(name="Ben", avatar="man", xp=0, badges=[]),
        ]
        session.add_all(profiles)
        await session.commit()
        return profiles


@pytest.fixture
def make_goal(client):
    async def _make_goal(**fields):
        payload = {"title": "Sport per week", "category": "lifestyle", "type": "counter"}
        payload.update(fields)
        response = await client.post("/api/goals", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _make_goal
