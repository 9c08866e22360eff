"""데이터베이스 엔진 및 세션 설정 모듈.

Database engine and session configuration module.
Sets up the async SQLAlchemy engine, session factory, and ORM base class.
One session is used per logical unit of work and is never shared across
concurrent units of work.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncAttrs,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from querystudy.config import settings


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """URL에 맞는 옵션으로 비동기 엔진을 생성합니다.

    Create an async engine with driver-appropriate options.
    SQLite gets a StaticPool so an in-memory database survives across
    sessions; other drivers get pre-ping on pooled connections.

    Args:
        url: SQLAlchemy 비동기 연결 URL (Async connection URL)
        echo: SQL 로그 출력 여부 (Echo SQL statements)

    Returns:
        AsyncEngine: 생성된 엔진 (The configured engine)
    """
    engine_kwargs: dict[str, Any] = {"echo": echo}
    if url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        engine_kwargs["poolclass"] = StaticPool
    else:
        engine_kwargs["pool_pre_ping"] = True
    return create_async_engine(url, **engine_kwargs)


# 비동기 데이터베이스 엔진 — Async database engine
engine: AsyncEngine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)

# 비동기 세션 팩토리 — Async session factory
# expire_on_commit=False: 커밋 후에도 객체 속성 접근 가능 (Allows attribute access after commit without refresh)
async_session: async_sessionmaker[AsyncSession] = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(AsyncAttrs, DeclarativeBase):
    """SQLAlchemy 선언적 베이스 클래스.

    Declarative base class for all ORM models. ``AsyncAttrs`` exposes
    ``awaitable_attrs`` so lazy associations can be loaded on first access.
    """

    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """비동기 데이터베이스 세션을 생성하고 요청 종료 시 닫습니다.

    FastAPI dependency that yields an async database session.

    Yields:
        AsyncSession: SQLAlchemy 비동기 세션 인스턴스 (Async session instance)
    """
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()


@asynccontextmanager
async def unit_of_work(
    factory: async_sessionmaker[AsyncSession] | None = None,
) -> AsyncGenerator[AsyncSession, None]:
    """하나의 작업 단위에 대한 세션을 제공합니다.

    Provide one session for a logical unit of work.
    Commits when the block exits normally, rolls back and re-raises on error.

    Args:
        factory: 세션 팩토리, None이면 전역 팩토리 (Session factory; defaults to the global one)

    Yields:
        AsyncSession: 작업 단위 전용 세션 (Session owned by this unit of work)
    """
    session_factory = factory or async_session
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db(target: AsyncEngine | None = None) -> None:
    """ORM 메타데이터로 테이블을 생성합니다 (Create all tables from ORM metadata)."""
    import querystudy.models  # noqa: F401 — register all models with metadata

    async with (target or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
