"""엔티티 경로 — 손으로 작성한 타입 안전 쿼리 메타모델.

Entity paths: hand-written, type-safe query metamodels.

``QMember`` and ``QTeam`` expose tagged field references over an
SQLAlchemy ``aliased()`` entity. The module-level ``member`` and ``team``
instances are the default aliases; create another instance to reference
the same table twice in one query (e.g. ``QMember("sub")``).

Usage:
    from querystudy.query.paths import member, team
    member.username.eq("member1") & member.age.goe(10)
    member.username.eq(team.team_name)      # theta predicate
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import inspect
from sqlalchemy.orm import aliased

from querystudy.models import Member, Team
from querystudy.query.expressions import Expression, NumberExpression, StringExpression
from querystudy.utils.exceptions import InvalidQuery


class EntityPath(Expression):
    """엔티티 별칭 경로 — 선택 시 엔티티 인스턴스로 매핑됩니다.

    Alias of a mapped entity. Selecting it yields entity instances.

    Attributes:
        entity: ORM 모델 클래스 (Mapped ORM class)
        alias_name: SQL 별칭 (SQL alias of the entity)
    """

    def __init__(self, entity: type, alias_name: str) -> None:
        self.entity: type = entity
        self.alias_name: str = alias_name
        self.alias: Any = aliased(entity, name=alias_name)
        super().__init__(self.alias, (self,))

    def as_(self, label: str) -> Expression:
        raise InvalidQuery("select", self.alias_name, "an entity cannot be relabelled")

    def count(self) -> NumberExpression:
        """엔티티 행 수, 외부 조인의 빈 쪽은 세지 않음 (Rows where the entity is present)."""
        mapper = inspect(self.entity)
        key = mapper.get_property_by_column(mapper.primary_key[0]).key
        return NumberPath(self, key).count()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.alias_name!r})"


def _field_clause(parent: EntityPath, name: str) -> Any:
    return getattr(parent.alias, name)


class StringPath(StringExpression):
    """문자열 컬럼 참조 (Reference to a string column)."""

    def __init__(self, parent: EntityPath, name: str) -> None:
        self.parent: EntityPath = parent
        self.name: str = name
        super().__init__(_field_clause(parent, name), (parent,))

    def __repr__(self) -> str:
        return f"{self.parent.alias_name}.{self.name}"

    def as_(self, label: str) -> StringExpression:
        return StringExpression(self.clause.label(label), self.paths)


class NumberPath(NumberExpression):
    """숫자 컬럼 참조 (Reference to a numeric column)."""

    def __init__(self, parent: EntityPath, name: str) -> None:
        self.parent: EntityPath = parent
        self.name: str = name
        super().__init__(_field_clause(parent, name), (parent,))

    def __repr__(self) -> str:
        return f"{self.parent.alias_name}.{self.name}"

    def as_(self, label: str) -> NumberExpression:
        return NumberExpression(self.clause.label(label), self.paths)


class AssociationPath:
    """연관관계 참조 — 조인 대상 지정에 사용.

    Reference to a relationship attribute, used as a join target.
    Not an expression: it cannot be selected or compared directly.

    Attributes:
        parent: 소유 엔티티 경로 (Owning entity path)
        name: 관계 속성 이름 (Relationship attribute name)
        target: 대상 ORM 모델 (Target ORM class)
    """

    def __init__(self, parent: EntityPath, name: str, target: type) -> None:
        self.parent: EntityPath = parent
        self.name: str = name
        self.target: type = target

    def attribute(self) -> Any:
        return getattr(self.parent.alias, self.name)

    def __repr__(self) -> str:
        return f"{self.parent.alias_name}.{self.name}"


class QTeam(EntityPath):
    """팀 메타모델 (Team metamodel)."""

    def __init__(self, alias_name: str = "team") -> None:
        super().__init__(Team, alias_name)
        self.id = NumberPath(self, "id")
        self.team_name = StringPath(self, "team_name")


class QMember(EntityPath):
    """회원 메타모델 (Member metamodel)."""

    def __init__(self, alias_name: str = "member") -> None:
        super().__init__(Member, alias_name)
        self.id = NumberPath(self, "id")
        self.username = StringPath(self, "username")
        self.age = NumberPath(self, "age")
        self.team = AssociationPath(self, "team", Team)


def path_for(entity: type, alias_name: str) -> EntityPath:
    """엔티티 클래스에 맞는 메타모델을 생성합니다.

    Build the metamodel for an entity class under the given alias.
    Used for association joins that are given no explicit target alias.
    """
    if entity is Member:
        return QMember(alias_name)
    if entity is Team:
        return QTeam(alias_name)
    return EntityPath(entity, alias_name)


# 기본 별칭 — Default aliases
member: QMember = QMember("member")
team: QTeam = QTeam("team")
