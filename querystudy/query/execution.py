"""쿼리 실행 및 결과 매핑 계층.

Query execution and result mapping.

``QueryExecutor`` compiles a ``Query`` description, runs it on its
session and maps rows back to entity instances, scalars, ``QueryTuple``
rows or DTOs depending on what the query selects. Failures are never
retried: driver-level connection errors surface as ``StoreUnavailable``
and everything else propagates unchanged.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from sqlalchemy import Select
from sqlalchemy.engine import Result
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncResult, AsyncSession

from querystudy.query.projections import Projection, QueryTuple
from querystudy.utils.exceptions import NoUniqueResult, StoreUnavailable
from querystudy.utils.logger import get_logger

if TYPE_CHECKING:
    from querystudy.query.builder import Query

logger = get_logger(__name__)


def is_store_failure(exc: Exception) -> bool:
    if isinstance(exc, PoolTimeoutError):
        return True
    if isinstance(exc, DBAPIError):
        return exc.connection_invalidated or isinstance(exc, (OperationalError, InterfaceError))
    return False


@contextmanager
def store_errors(action: str) -> Iterator[None]:
    """저장소 연결 실패를 StoreUnavailable로 변환합니다.

    Translate connection-level failures raised inside the block into
    ``StoreUnavailable``; every other error propagates unchanged.
    """
    try:
        yield
    except Exception as exc:
        if is_store_failure(exc):
            logger.error("Store unavailable during %s: %s", action, exc)
            raise StoreUnavailable(f"Store unavailable during {action}: {exc}") from exc
        raise


class QueryExecutor:
    """하나의 세션에서 쿼리를 실행하는 실행기.

    Executes query descriptions against one session.

    Attributes:
        session: 작업 단위 세션 (Session of the current unit of work)
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session: AsyncSession = session

    async def _execute(self, stmt: Select, clause: str) -> Result[Any]:
        logger.debug("Executing %s: %s", clause, stmt)
        with store_errors(clause):
            return await self.session.execute(stmt)

    def _mapper(self, query: Query, keys: list[str]) -> Any:
        """행 → 결과 변환 함수 (Build the row-to-result function for this query)."""
        projection = query.projection
        if len(projection) == 1 and isinstance(projection[0], Projection):
            dto = projection[0]
            return lambda row: dto.new_instance(tuple(row))
        if len(projection) == 1:
            return lambda row: row[0]
        return lambda row: QueryTuple(projection, tuple(row), keys)

    async def fetch(self, query: Query) -> list[Any]:
        """모든 결과를 리스트로 조회합니다 (Fetch every result as a list)."""
        result = await self._execute(query.to_statement(), "fetch")
        to_result = self._mapper(query, list(result.keys()))
        return [to_result(row) for row in result.all()]

    async def stream(self, query: Query) -> AsyncIterator[Any]:
        """결과를 지연 시퀀스로 조회합니다.

        Lazily iterate over results. The iterator is not restartable;
        calling ``stream`` again re-queries the store. The cursor is closed
        once iteration stops; callers that break out early should wrap the
        iterator in ``contextlib.aclosing``.
        """
        stmt = query.to_statement()
        logger.debug("Streaming: %s", stmt)
        with store_errors("stream"):
            result: AsyncResult[Any] = await self.session.stream(stmt)
        try:
            to_result = self._mapper(query, list(result.keys()))
            with store_errors("stream"):
                async for row in result:
                    yield to_result(row)
        finally:
            await result.close()

    async def fetch_one(self, query: Query) -> Any:
        """정확히 한 건을 조회합니다.

        Fetch exactly one result.

        Raises:
            NoUniqueResult: 0건 또는 2건 이상 (Zero or more than one row matched)
        """
        if query.limit_value is None or query.limit_value > 2:
            query = query.limit(2)
        found = await self.fetch(query)
        if len(found) != 1:
            raise NoUniqueResult(len(found), "fetch_one")
        return found[0]

    async def fetch_first(self, query: Query) -> Any | None:
        """첫 번째 결과, 없으면 None (First result or None)."""
        found = await self.fetch(query.limit(1))
        return found[0] if found else None

    async def fetch_count(self, query: Query) -> int:
        """쿼리가 반환할 행 수 (Number of rows the query would return)."""
        result = await self._execute(query.to_count_statement(), "fetch_count")
        return result.scalar_one()

    async def fetch_page(self, query: Query, page: int, per_page: int) -> tuple[list[Any], int]:
        """페이지 조회 — (항목, 전체 개수).

        Fetch one page of results along with the total row count.

        Args:
            query: 정렬이 지정된 쿼리 (Query, ideally ordered)
            page: 페이지 번호, 1부터 시작 (Page number, 1-based)
            per_page: 페이지당 항목 수 (Items per page)

        Returns:
            tuple[list[Any], int]: (항목 목록, 전체 개수) (Items and total count)
        """
        total = await self.fetch_count(query)
        offset = (max(page, 1) - 1) * per_page
        items = await self.fetch(query.offset(offset).limit(per_page))
        return items, total
