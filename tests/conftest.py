"""테스트 인프라 — 인메모리 SQLite DB, 세션, 샘플 데이터, httpx 클라이언트 픽스처.

Test infrastructure — In-memory SQLite database, session, sample data and
httpx client fixtures. The schema is created per test on a fresh engine.
"""

import os

# 설정 로드 전에 테스트 DB URL 지정 — Must be set before querystudy is imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["DEBUG"] = "false"

from collections.abc import AsyncGenerator  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker  # noqa: E402

from querystudy.database import build_engine, get_db, init_db  # noqa: E402
from querystudy.main import app  # noqa: E402
from querystudy.persistence import PersistenceContext  # noqa: E402
from querystudy.query import QueryFactory  # noqa: E402
from querystudy.seed import seed_sample_data  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 컨텍스트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진 — 매 테스트마다 새 인메모리 DB와 스키마."""
    eng = build_engine(TEST_DATABASE_URL)
    await init_db(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def ctx(db: AsyncSession) -> PersistenceContext:
    return PersistenceContext(db)


@pytest.fixture
def query_factory(db: AsyncSession) -> QueryFactory:
    return QueryFactory(db)


@pytest_asyncio.fixture
async def sample_data(ctx: PersistenceContext) -> dict[str, int]:
    """teamA(member1 10, member2 20), teamB(member3 30, member4 40)를 저장합니다.

    Persist the sample data, flush, then clear the context so every test
    starts from fresh store state. Returns ids keyed by username/team name.
    """
    members = await seed_sample_data(ctx)
    ids: dict[str, int] = {m.username: m.id for m in members}
    ids["teamA"] = members[0].team_id
    ids["teamB"] = members[2].team_id
    ctx.clear()
    return ids


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션을 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
