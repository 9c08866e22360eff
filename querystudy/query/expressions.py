"""쿼리 표현식 — 필드 참조, 조건자, 집계, 정렬.

Query expressions: tagged field references, predicates, aggregates and
order specifiers.

Every expression wraps an SQLAlchemy clause together with the set of
entity paths it references. The builder uses that set to reject clauses
that mention an entity missing from the from/join clause, before any SQL
is sent to the store.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from sqlalchemy import Float, and_, cast, func, not_, or_
from sqlalchemy.sql.elements import ColumnElement

if TYPE_CHECKING:
    from querystudy.query.paths import EntityPath


def _operand(value: Any) -> tuple[Any, frozenset[EntityPath]]:
    """비교 대상을 (절, 참조 경로) 쌍으로 정규화합니다.

    Normalize the right-hand side of a comparison. Another expression
    contributes its clause and paths (theta predicates); anything else is
    bound as a literal parameter.
    """
    if isinstance(value, Expression):
        return value.clause, value.paths
    return value, frozenset()


class Expression:
    """SQLAlchemy 절과 참조 엔티티 경로의 쌍.

    An SQLAlchemy clause plus the entity paths it references.

    Attributes:
        clause: 컴파일될 SQLAlchemy 절 (SQLAlchemy clause to compile)
        paths: 참조하는 엔티티 경로 집합 (Entity paths referenced by the clause)
    """

    def __init__(self, clause: Any, paths: Iterable[EntityPath] = ()) -> None:
        self.clause: Any = clause
        self.paths: frozenset[EntityPath] = frozenset(paths)

    def select_clauses(self) -> list[Any]:
        """SELECT 목록에 들어갈 절 (Clauses this expression adds to a SELECT list)."""
        return [self.clause]

    def as_(self, label: str) -> Expression:
        """별칭을 붙인 표현식 (Same expression under a column label)."""
        return type(self)(self.clause.label(label), self.paths)

    def asc(self) -> OrderSpecifier:
        return OrderSpecifier(self, descending=False)

    def desc(self) -> OrderSpecifier:
        return OrderSpecifier(self, descending=True)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.clause})"


class Predicate(Expression):
    """불리언 조건자 — and/or/not 조합 가능.

    Boolean expression. Combines with ``and_``/``or_``/``not_`` or the
    ``&``, ``|`` and ``~`` operators. ``None`` operands are skipped, so
    optional search conditions compose without special casing.
    """

    def and_(self, *others: Predicate | None) -> Predicate:
        return _combine(and_, (self, *others))

    def or_(self, *others: Predicate | None) -> Predicate:
        return _combine(or_, (self, *others))

    def not_(self) -> Predicate:
        return Predicate(not_(self.clause), self.paths)

    def __and__(self, other: Predicate | None) -> Predicate:
        return self.and_(other)

    def __or__(self, other: Predicate | None) -> Predicate:
        return self.or_(other)

    def __invert__(self) -> Predicate:
        return self.not_()


def _combine(operator: Any, predicates: Iterable[Predicate | None]) -> Predicate:
    present = [p for p in predicates if p is not None]
    if len(present) == 1:
        return present[0]
    paths: set[EntityPath] = set()
    for p in present:
        paths |= p.paths
    return Predicate(operator(*[p.clause for p in present]), paths)


class ComparableExpression(Expression):
    """비교 연산을 지원하는 스칼라 표현식.

    Scalar expression supporting equality, membership and null checks.
    """

    def _compare(self, clause: ColumnElement[bool], *operands: Any) -> Predicate:
        paths = set(self.paths)
        for value in operands:
            paths |= _operand(value)[1]
        return Predicate(clause, paths)

    def eq(self, other: Any) -> Predicate:
        return self._compare(self.clause == _operand(other)[0], other)

    def ne(self, other: Any) -> Predicate:
        return self._compare(self.clause != _operand(other)[0], other)

    def in_(self, *values: Any) -> Predicate:
        if len(values) == 1 and isinstance(values[0], (list, tuple, set, frozenset)):
            values = tuple(values[0])
        return self._compare(self.clause.in_([_operand(v)[0] for v in values]), *values)

    def not_in(self, *values: Any) -> Predicate:
        return self.in_(*values).not_()

    def is_null(self) -> Predicate:
        return self._compare(self.clause.is_(None))

    def is_not_null(self) -> Predicate:
        return self._compare(self.clause.is_not(None))

    def count(self) -> NumberExpression:
        """null이 아닌 값의 개수 (Count of non-null values)."""
        return NumberExpression(func.count(self.clause), self.paths)

    def count_distinct(self) -> NumberExpression:
        return NumberExpression(func.count(self.clause.distinct()), self.paths)


class NumberExpression(ComparableExpression):
    """숫자 표현식 — 범위 비교와 집계.

    Numeric expression: ordering comparisons and aggregates.
    ``avg`` always yields a floating-point mean, whatever the column type,
    so grouped and ungrouped averages agree across backends.
    """

    def gt(self, other: Any) -> Predicate:
        return self._compare(self.clause > _operand(other)[0], other)

    def goe(self, other: Any) -> Predicate:
        return self._compare(self.clause >= _operand(other)[0], other)

    def lt(self, other: Any) -> Predicate:
        return self._compare(self.clause < _operand(other)[0], other)

    def loe(self, other: Any) -> Predicate:
        return self._compare(self.clause <= _operand(other)[0], other)

    def between(self, low: Any, high: Any) -> Predicate:
        return self._compare(
            self.clause.between(_operand(low)[0], _operand(high)[0]), low, high
        )

    def sum(self) -> NumberExpression:
        return NumberExpression(func.sum(self.clause), self.paths)

    def avg(self) -> NumberExpression:
        return NumberExpression(cast(func.avg(self.clause), Float), self.paths)

    def min(self) -> NumberExpression:
        return NumberExpression(func.min(self.clause), self.paths)

    def max(self) -> NumberExpression:
        return NumberExpression(func.max(self.clause), self.paths)


class StringExpression(ComparableExpression):
    """문자열 표현식 — 패턴 매칭 (String expression with pattern matching)."""

    def like(self, pattern: str) -> Predicate:
        return self._compare(self.clause.like(pattern))

    def contains(self, fragment: str) -> Predicate:
        return self._compare(self.clause.contains(fragment, autoescape=True))

    def starts_with(self, prefix: str) -> Predicate:
        return self._compare(self.clause.startswith(prefix, autoescape=True))

    def ends_with(self, suffix: str) -> Predicate:
        return self._compare(self.clause.endswith(suffix, autoescape=True))


class OrderSpecifier:
    """정렬 조건 — 방향과 null 정렬 위치.

    Sort key: direction plus optional null placement.
    """

    def __init__(self, expression: Expression, descending: bool, nulls: str | None = None) -> None:
        self.expression: Expression = expression
        self.descending: bool = descending
        self.nulls: str | None = nulls

    @property
    def paths(self) -> frozenset[EntityPath]:
        return self.expression.paths

    def nulls_first(self) -> OrderSpecifier:
        return OrderSpecifier(self.expression, self.descending, "first")

    def nulls_last(self) -> OrderSpecifier:
        return OrderSpecifier(self.expression, self.descending, "last")

    @property
    def clause(self) -> Any:
        ordered = self.expression.clause.desc() if self.descending else self.expression.clause.asc()
        if self.nulls == "first":
            return ordered.nulls_first()
        if self.nulls == "last":
            return ordered.nulls_last()
        return ordered


class Expressions:
    """표현식 팩토리 (Factory helpers for expressions not tied to one field)."""

    @staticmethod
    def count_all() -> NumberExpression:
        """``count(*)`` — 결과 행 수 (Number of result rows)."""
        return NumberExpression(func.count(), ())

    @staticmethod
    def all_of(*predicates: Predicate | None) -> Predicate | None:
        """조건자들의 AND, 모두 None이면 None (AND of the non-null predicates)."""
        if not any(p is not None for p in predicates):
            return None
        return _combine(and_, predicates)

    @staticmethod
    def any_of(*predicates: Predicate | None) -> Predicate | None:
        if not any(p is not None for p in predicates):
            return None
        return _combine(or_, predicates)
