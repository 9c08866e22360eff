"""타입 안전 쿼리 빌더 패키지.

Type-safe query builder over the Member/Team model.

Modules:
    expressions: 필드 표현식, 조건자, 집계, 정렬 (Expressions, predicates, aggregates, ordering)
    paths: 엔티티 메타모델 QMember/QTeam (Entity metamodels)
    projections: 튜플/DTO 프로젝션 (Tuple and DTO projections)
    builder: 불변 쿼리 기술과 컴파일 (Immutable query description and compilation)
    execution: 실행 및 결과 매핑 (Execution and result mapping)
"""

from querystudy.query.builder import JoinClause, Query, QueryFactory
from querystudy.query.execution import QueryExecutor
from querystudy.query.expressions import (
    Expression,
    Expressions,
    NumberExpression,
    OrderSpecifier,
    Predicate,
    StringExpression,
)
from querystudy.query.paths import AssociationPath, EntityPath, QMember, QTeam, member, team
from querystudy.query.projections import Projection, Projections, QueryTuple

__all__ = [
    "Query", "QueryFactory", "JoinClause", "QueryExecutor",
    "Expression", "Expressions", "NumberExpression", "StringExpression", "OrderSpecifier", "Predicate",
    "EntityPath", "AssociationPath", "QMember", "QTeam", "member", "team",
    "Projection", "Projections", "QueryTuple",
]
