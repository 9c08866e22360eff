"""결과 프로젝션 — 튜플과 DTO 매핑.

Result projections: positional tuples and pydantic DTOs.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any

from pydantic import BaseModel, ValidationError

from querystudy.query.expressions import Expression
from querystudy.query.paths import EntityPath
from querystudy.utils.exceptions import AmbiguousProjection, InvalidQuery


class QueryTuple:
    """여러 표현식을 선택한 쿼리의 결과 행.

    Result row of a query selecting several expressions. Values are looked
    up by the selected expression itself, by position, or by label.

    Usage:
        row.get(member)            # Member instance
        row.get(member.age.avg())  # only with the very same expression object
        row[1], row["avg_age"]
    """

    def __init__(self, expressions: Sequence[Expression], values: Sequence[Any], labels: Sequence[str]) -> None:
        self._expressions: tuple[Expression, ...] = tuple(expressions)
        self._values: tuple[Any, ...] = tuple(values)
        self._labels: tuple[str, ...] = tuple(labels)

    def get(self, key: Expression | int | str) -> Any:
        if isinstance(key, int):
            return self._values[key]
        if isinstance(key, str):
            try:
                return self._values[self._labels.index(key)]
            except ValueError:
                raise KeyError(key) from None
        for index, expression in enumerate(self._expressions):
            if expression is key:
                return self._values[index]
        raise KeyError(repr(key))

    def __getitem__(self, key: Expression | int | str) -> Any:
        return self.get(key)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, QueryTuple):
            return self._values == other._values
        if isinstance(other, tuple):
            return self._values == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"QueryTuple{self._values!r}"


class Projection:
    """DTO 프로젝션 — 라벨이 붙은 표현식을 pydantic 모델로 매핑.

    Maps labelled scalar expressions onto a pydantic model.
    """

    def __init__(self, target: type[BaseModel], bindings: dict[str, Expression]) -> None:
        for name, expression in bindings.items():
            if isinstance(expression, EntityPath):
                raise InvalidQuery(
                    "select", expression.alias_name, f"DTO field '{name}' must bind a scalar expression"
                )
        self.target: type[BaseModel] = target
        self.bindings: dict[str, Expression] = dict(bindings)

    @property
    def paths(self) -> frozenset[EntityPath]:
        paths: set[EntityPath] = set()
        for expression in self.bindings.values():
            paths |= expression.paths
        return frozenset(paths)

    def select_clauses(self) -> list[Any]:
        return [expression.clause.label(name) for name, expression in self.bindings.items()]

    def new_instance(self, values: Sequence[Any]) -> BaseModel:
        """한 행을 DTO로 변환합니다 (Build one DTO from a row)."""
        data = dict(zip(self.bindings, values))
        try:
            return self.target.model_validate(data)
        except ValidationError as exc:
            raise AmbiguousProjection(self.target, str(exc)) from exc


class Projections:
    """프로젝션 팩토리 (Projection factory)."""

    @staticmethod
    def fields(target: type[BaseModel], **bindings: Expression) -> Projection:
        """필드 이름으로 바인딩하는 DTO 프로젝션.

        DTO projection binding each keyword (a field name of ``target``) to
        an expression.

        Usage:
            Projections.fields(MemberTeamResponse, member_id=member.id, username=member.username)
        """
        return Projection(target, bindings)
