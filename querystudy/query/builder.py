"""불변 쿼리 기술 및 SQLAlchemy Select 컴파일.

Immutable query description and its compilation to an SQLAlchemy ``Select``.

A ``Query`` is a frozen value: every fluent method returns a new query,
so a partially built query can be shared and extended safely. Building
and compiling never touch the store; only the bound ``QueryExecutor``
does, through the ``fetch*`` methods.

Usage:
    query_factory = QueryFactory(session)
    found = await (
        query_factory.select(member)
        .from_(member)
        .join(member.team, team)
        .where(team.team_name.eq("teamA"), member.age.goe(10))
        .order_by(member.id.asc())
        .fetch()
    )
"""

from __future__ import annotations

import dataclasses
from collections.abc import AsyncIterator, Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sqlalchemy import Select, and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager

from querystudy.query.expressions import Expression, OrderSpecifier, Predicate
from querystudy.query.paths import AssociationPath, EntityPath, path_for
from querystudy.query.projections import Projection
from querystudy.utils.exceptions import InvalidQuery

if TYPE_CHECKING:
    from querystudy.query.execution import QueryExecutor

SelectItem = Expression | Projection


@dataclass(frozen=True)
class JoinClause:
    """조인 절 하나 — 연관관계 조인 또는 명시적 대상 조인.

    One join: either along an association (``member.team``) or to an
    explicit target with an arbitrary ``on`` predicate (theta join).

    Attributes:
        target: 조인 대상 경로 (Joined entity path)
        association: 연관관계 경로, 명시적 조인이면 None (Association, None for explicit joins)
        outer: LEFT OUTER JOIN 여부 (Whether this is a left outer join)
        conditions: on 절 조건자 (Predicates of the on clause)
        fetch: 연관관계를 즉시 채울지 여부 (Populate the association in the same round trip)
    """

    target: EntityPath
    association: AssociationPath | None
    outer: bool
    conditions: tuple[Predicate, ...] = ()
    fetch: bool = False


@dataclass(frozen=True, eq=False)
class Query:
    """불변 쿼리 기술 (Immutable query description)."""

    executor: QueryExecutor | None = None
    projection: tuple[SelectItem, ...] = ()
    sources: tuple[EntityPath, ...] = ()
    joins: tuple[JoinClause, ...] = ()
    conditions: tuple[Predicate, ...] = ()
    group_keys: tuple[Expression, ...] = ()
    having_conditions: tuple[Predicate, ...] = ()
    order: tuple[OrderSpecifier, ...] = ()
    offset_value: int | None = None
    limit_value: int | None = None
    is_distinct: bool = False

    def _with(self, **changes: Any) -> Query:
        return dataclasses.replace(self, **changes)

    # --- 선택/소스 (selection and source) ---------------------------------

    def select(self, *expressions: SelectItem) -> Query:
        return self._with(projection=tuple(expressions))

    def from_(self, *paths: EntityPath) -> Query:
        """소스 엔티티 지정, 여러 개면 교차 조인 (Several paths form a cross join)."""
        for path in paths:
            if not isinstance(path, EntityPath):
                raise InvalidQuery("from", None, f"{path!r} is not an entity path")
        return self._with(sources=self.sources + tuple(paths))

    # --- 조인 (joins) ------------------------------------------------------

    def join(self, target: EntityPath | AssociationPath, alias: EntityPath | None = None) -> Query:
        return self._add_join(target, alias, outer=False)

    inner_join = join

    def left_join(self, target: EntityPath | AssociationPath, alias: EntityPath | None = None) -> Query:
        return self._add_join(target, alias, outer=True)

    def _add_join(
        self,
        target: EntityPath | AssociationPath,
        alias: EntityPath | None,
        outer: bool,
    ) -> Query:
        if isinstance(target, AssociationPath):
            if alias is None:
                alias = path_for(target.target, f"{target.parent.alias_name}_{target.name}")
            elif alias.entity is not target.target:
                raise InvalidQuery(
                    "join", alias.alias_name,
                    f"alias of {alias.entity.__name__} cannot target {target!r}",
                )
            clause = JoinClause(target=alias, association=target, outer=outer)
        elif isinstance(target, EntityPath):
            if alias is not None:
                raise InvalidQuery("join", target.alias_name, "an explicit join target takes no alias")
            clause = JoinClause(target=target, association=None, outer=outer)
        else:
            raise InvalidQuery("join", None, f"{target!r} is neither an entity nor an association")
        return self._with(joins=self.joins + (clause,))

    def on(self, *predicates: Predicate | None) -> Query:
        """직전 조인의 on 절에 조건 추가 (Restrict the most recent join)."""
        if not self.joins:
            raise InvalidQuery("on", None, "on() must follow a join")
        last = self.joins[-1]
        added = tuple(p for p in predicates if p is not None)
        updated = dataclasses.replace(last, conditions=last.conditions + added)
        return self._with(joins=self.joins[:-1] + (updated,))

    def fetch_join(self) -> Query:
        """직전 연관관계 조인을 페치 조인으로 표시 (Mark the most recent association join eager)."""
        if not self.joins:
            raise InvalidQuery("fetch_join", None, "fetch_join() must follow a join")
        last = self.joins[-1]
        if last.association is None:
            raise InvalidQuery(
                "fetch_join", last.target.alias_name, "only association joins can be fetch joined"
            )
        return self._with(joins=self.joins[:-1] + (dataclasses.replace(last, fetch=True),))

    # --- 필터/그룹/정렬/페이징 (filter, grouping, ordering, paging) -----------

    def where(self, *predicates: Predicate | None) -> Query:
        """조건 추가, 여러 개면 AND (Separate predicates are ANDed; None is skipped)."""
        added = tuple(p for p in predicates if p is not None)
        return self._with(conditions=self.conditions + added)

    def group_by(self, *expressions: Expression) -> Query:
        return self._with(group_keys=self.group_keys + tuple(expressions))

    def having(self, *predicates: Predicate | None) -> Query:
        added = tuple(p for p in predicates if p is not None)
        return self._with(having_conditions=self.having_conditions + added)

    def order_by(self, *specifiers: OrderSpecifier) -> Query:
        return self._with(order=self.order + tuple(specifiers))

    def offset(self, offset: int) -> Query:
        if offset < 0:
            raise InvalidQuery("offset", None, "offset must not be negative")
        return self._with(offset_value=offset)

    def limit(self, limit: int) -> Query:
        if limit < 0:
            raise InvalidQuery("limit", None, "limit must not be negative")
        return self._with(limit_value=limit)

    def distinct(self) -> Query:
        return self._with(is_distinct=True)

    # --- 컴파일 (compilation) ----------------------------------------------

    @property
    def selects_single(self) -> bool:
        return len(self.projection) == 1

    def _check(self, clause: str, items: Iterable[Any], known: Sequence[EntityPath]) -> None:
        for item in items:
            for path in item.paths:
                if path not in known:
                    raise InvalidQuery(clause, path.alias_name, "entity is not in the from/join clause")

    def _check_fetch_join(self, join: JoinClause) -> None:
        """페치 조인은 필터 없이, 선택된 소유 엔티티에만 적용됩니다.

        A fetch join populates the association as stored, so it takes no on()
        restriction, and its owner must be selected as an entity.
        """
        if join.conditions:
            raise InvalidQuery(
                "fetch_join", join.target.alias_name, "a fetch join cannot be restricted with on()"
            )
        owner = join.association.parent
        if not any(item is owner for item in self.projection):
            raise InvalidQuery(
                "fetch_join", owner.alias_name, "the association owner must be selected as an entity"
            )

    def _resolve_sources(self) -> list[EntityPath]:
        if not self.sources:
            raise InvalidQuery("from", None, "query has no source entity")
        if not self.projection:
            raise InvalidQuery("select", None, "query selects nothing")
        if any(isinstance(item, Projection) for item in self.projection) and len(self.projection) > 1:
            raise InvalidQuery("select", None, "a DTO projection must be the only selected item")

        known: list[EntityPath] = list(self.sources)
        for join in self.joins:
            if join.association is not None and join.association.parent not in known:
                raise InvalidQuery(
                    "join", join.association.parent.alias_name,
                    "association owner is not in the from/join clause",
                )
            if join.target in known:
                raise InvalidQuery("join", join.target.alias_name, "entity is already part of the query")
            known.append(join.target)
            if join.association is None and not join.conditions:
                raise InvalidQuery("join", join.target.alias_name, "an explicit join needs an on() condition")
            if join.fetch:
                self._check_fetch_join(join)
            self._check("on", join.conditions, known)

        self._check("select", self.projection, known)
        self._check("where", self.conditions, known)
        self._check("group_by", self.group_keys, known)
        self._check("having", self.having_conditions, known)
        self._check("order_by", self.order, known)
        return known

    def to_statement(self, paged: bool = True, fetch: bool = True) -> Select:
        """SQLAlchemy Select로 컴파일합니다.

        Compile this description into an SQLAlchemy ``Select``.

        Args:
            paged: offset/limit 적용 여부 (Apply offset/limit)
            fetch: 페치 조인 옵션 적용 여부 (Apply fetch-join loader options)

        Returns:
            Select: 실행 가능한 문장 (Executable statement)

        Raises:
            InvalidQuery: 구성이 잘못된 경우 (The description is malformed)
        """
        self._resolve_sources()

        columns = [clause for item in self.projection for clause in item.select_clauses()]
        stmt: Select = select(*columns).select_from(*[source.alias for source in self.sources])

        for join in self.joins:
            on_clauses = [p.clause for p in join.conditions]
            if join.association is not None:
                relation = join.association.attribute().of_type(join.target.alias)
                if on_clauses:
                    relation = relation.and_(*on_clauses)
                stmt = stmt.join(relation, isouter=join.outer)
                if fetch and join.fetch:
                    stmt = stmt.options(
                        contains_eager(join.association.attribute().of_type(join.target.alias))
                    )
            else:
                stmt = stmt.join(join.target.alias, and_(*on_clauses), isouter=join.outer)

        if self.conditions:
            stmt = stmt.where(*[p.clause for p in self.conditions])
        if self.group_keys:
            stmt = stmt.group_by(*[e.clause for e in self.group_keys])
        if self.having_conditions:
            stmt = stmt.having(*[p.clause for p in self.having_conditions])
        if self.order:
            stmt = stmt.order_by(*[o.clause for o in self.order])
        if self.is_distinct:
            stmt = stmt.distinct()
        if paged:
            if self.offset_value is not None:
                stmt = stmt.offset(self.offset_value)
            if self.limit_value is not None:
                stmt = stmt.limit(self.limit_value)
        return stmt

    def to_count_statement(self) -> Select:
        """결과 행 수를 세는 문장 (Statement counting the rows this query returns)."""
        base = self.to_statement(paged=False, fetch=False).order_by(None)
        return select(func.count()).select_from(base.subquery())

    # --- 실행 위임 (execution, delegated to the bound executor) -------------

    def _executor(self) -> QueryExecutor:
        if self.executor is None:
            raise InvalidQuery("fetch", None, "query is not bound to an executor")
        return self.executor

    async def fetch(self) -> list[Any]:
        return await self._executor().fetch(self)

    def stream(self) -> AsyncIterator[Any]:
        return self._executor().stream(self)

    async def fetch_one(self) -> Any:
        return await self._executor().fetch_one(self)

    async def fetch_first(self) -> Any | None:
        return await self._executor().fetch_first(self)

    async def fetch_count(self) -> int:
        return await self._executor().fetch_count(self)

    async def fetch_page(self, page: int, per_page: int) -> tuple[list[Any], int]:
        return await self._executor().fetch_page(self, page, per_page)


class QueryFactory:
    """세션에 바인딩된 쿼리 생성기.

    Creates queries bound to one session's executor.
    """

    def __init__(self, session: AsyncSession) -> None:
        from querystudy.query.execution import QueryExecutor

        self.executor: QueryExecutor = QueryExecutor(session)

    def query(self) -> Query:
        return Query(executor=self.executor)

    def select(self, *expressions: SelectItem) -> Query:
        return self.query().select(*expressions)

    def select_from(self, path: EntityPath) -> Query:
        """``select(path).from_(path)`` 축약 (Shortcut selecting and sourcing one entity)."""
        return self.select(path).from_(path)
