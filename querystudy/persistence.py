"""영속성 컨텍스트 — 세션 협력자.

Persistence context: the session collaborator used by the query layer.

Wraps one ``AsyncSession`` (one unit of work) and exposes persist, flush,
clear, find, textual queries and association load-state checks.

Usage:
    async with unit_of_work() as session:
        ctx = PersistenceContext(session)
        await ctx.persist(Team("teamA"))
        await ctx.flush()
        ctx.clear()
        found = await ctx.create_query(
            "select * from member where username = :username", Member
        ).set_parameter("username", "member1").fetch_one()
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from sqlalchemy import inspect, select, text
from sqlalchemy.exc import NoSuchColumnError
from sqlalchemy.ext.asyncio import AsyncSession

from querystudy.database import Base
from querystudy.query.builder import QueryFactory
from querystudy.query.execution import store_errors
from querystudy.utils.exceptions import AmbiguousProjection, NoUniqueResult
from querystudy.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

# 단일 컬럼으로 매핑되는 스칼라 결과 타입 — Scalar result types mapped from one column
_SCALAR_TYPES: tuple[type, ...] = (int, float, str, bool)


class TextQuery(Generic[T]):
    """텍스트 SQL 쿼리 — 결과를 엔티티 또는 스칼라 타입으로 매핑.

    Textual SQL query whose rows are mapped onto an entity class or a
    scalar type. Parameters are bound by name (``:username``).
    """

    def __init__(self, session: AsyncSession, sql: str, result_type: type[T], params: dict[str, Any] | None = None) -> None:
        self._session: AsyncSession = session
        self.sql: str = sql
        self.result_type: type[T] = result_type
        self.params: dict[str, Any] = dict(params or {})

    def set_parameter(self, name: str, value: Any) -> TextQuery[T]:
        return TextQuery(self._session, self.sql, self.result_type, {**self.params, name: value})

    async def fetch(self) -> list[T]:
        """모든 결과 (All results mapped onto ``result_type``)."""
        stmt = text(self.sql)
        try:
            if isinstance(self.result_type, type) and issubclass(self.result_type, Base):
                with store_errors("text query"):
                    result = await self._session.execute(
                        select(self.result_type).from_statement(stmt), self.params
                    )
                return list(result.scalars().all())
            if self.result_type in _SCALAR_TYPES:
                with store_errors("text query"):
                    result = await self._session.execute(stmt, self.params)
                if len(result.keys()) != 1:
                    raise AmbiguousProjection(
                        self.result_type, f"expected one column, query selects {list(result.keys())}"
                    )
                return [self.result_type(value) if value is not None else None for value in result.scalars().all()]
        except NoSuchColumnError as exc:
            raise AmbiguousProjection(self.result_type, str(exc)) from exc
        raise AmbiguousProjection(self.result_type, "not an entity or scalar type")

    async def fetch_one(self) -> T:
        """정확히 한 건 (Exactly one result, else ``NoUniqueResult``)."""
        found = await self.fetch()
        if len(found) != 1:
            raise NoUniqueResult(min(len(found), 2), "text query")
        return found[0]


class PersistenceContext:
    """작업 단위 하나의 영속성 컨텍스트.

    Persistence context for one unit of work.

    Attributes:
        session: 비동기 세션 (Async session owned by the unit of work)
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session: AsyncSession = session

    async def persist(self, entity: T) -> T:
        """엔티티를 저장하고 식별자를 부여받습니다.

        Add the entity to the session and flush so the store assigns its id.
        """
        self.session.add(entity)
        with store_errors("persist"):
            await self.session.flush()
        logger.debug("Persisted %r", entity)
        return entity

    async def flush(self) -> None:
        """대기 중인 쓰기를 저장소에 반영합니다 (Force pending writes to the store)."""
        with store_errors("flush"):
            await self.session.flush()

    def clear(self) -> None:
        """모든 엔티티를 분리합니다.

        Detach every entity; subsequent reads reflect fresh store state.
        """
        self.session.expunge_all()

    async def find(self, entity_type: type[T], entity_id: Any) -> T | None:
        with store_errors("find"):
            return await self.session.get(entity_type, entity_id)

    def create_query(self, sql: str, result_type: type[T]) -> TextQuery[T]:
        return TextQuery(self.session, sql, result_type)

    def query_factory(self) -> QueryFactory:
        return QueryFactory(self.session)

    @staticmethod
    def is_loaded(entity: Base, attribute: str) -> bool:
        """연관관계/속성이 이미 로드되었는지 확인합니다.

        Report whether ``attribute`` of ``entity`` is already populated.
        False for a lazy association that has not been accessed yet.

        Raises:
            AttributeError: 매핑되지 않은 속성 이름 (``attribute`` is not a mapped attribute)
        """
        state = inspect(entity)
        if attribute not in state.mapper.attrs:
            raise AttributeError(f"{type(entity).__name__} has no mapped attribute '{attribute}'")
        return attribute not in state.unloaded
