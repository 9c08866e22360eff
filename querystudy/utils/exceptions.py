"""예외 클래스 모듈 — 쿼리 오류 체계와 HTTP 예외.

Exception classes module.
Two families live here:

- Query errors raised by the query and mapping layers. They carry enough
  context (clause, entity) to diagnose the failure and are never retried.
- Pre-configured HTTPException subclasses for the API layer.

Usage:
    from querystudy.utils.exceptions import InvalidQuery, NotFoundError
    raise InvalidQuery("where", "team", "entity is not in the from/join clause")
    raise NotFoundError("Team not found")
"""

from fastapi import HTTPException, status


# === 쿼리 오류 (Query errors) ===

class QueryError(Exception):
    """쿼리/매핑 계층 오류의 공통 부모 클래스.

    Base class for every error raised by the query and mapping layers.
    """


class InvalidQuery(QueryError):
    """잘못된 쿼리 구성 — 조인/조건이 존재하지 않는 엔티티를 참조하는 경우 등.

    Raised when a query description is malformed, e.g. a predicate references
    an entity that is not part of the source/join set.

    Args:
        clause: 문제가 된 절 이름 (Offending clause, e.g. "where", "join")
        entity: 관련 엔티티 별칭, 없으면 None (Entity alias involved, if any)
        reason: 사람이 읽을 수 있는 사유 (Human-readable reason)
    """

    def __init__(self, clause: str, entity: str | None, reason: str) -> None:
        self.clause: str = clause
        self.entity: str | None = entity
        self.reason: str = reason
        where = f"{clause} clause" if entity is None else f"{clause} clause, entity '{entity}'"
        super().__init__(f"Invalid query ({where}): {reason}")


class AmbiguousProjection(QueryError):
    """행을 요청한 결과 타입에 매핑할 수 없는 경우.

    Raised when a raw row cannot be mapped onto the requested entity, scalar
    or DTO type because the selected columns do not match it.
    """

    def __init__(self, result_type: type, reason: str) -> None:
        self.result_type: type = result_type
        self.reason: str = reason
        super().__init__(f"Cannot map row to {result_type.__name__}: {reason}")


class NoUniqueResult(QueryError):
    """단일 결과 조회에서 0건 또는 2건 이상이 일치한 경우.

    Raised by a single-result fetch that matched zero or more than one row.

    Attributes:
        matched: 0 또는 2 (0 for no rows, 2 meaning "more than one")
    """

    def __init__(self, matched: int, description: str = "query") -> None:
        self.matched: int = matched
        found = "no rows" if matched == 0 else "more than one row"
        super().__init__(f"Expected exactly one result from {description}, found {found}")


class StoreUnavailable(QueryError):
    """저장소 연결/세션 실패 — 로컬에서 복구 불가, 호출자에게 전파.

    Raised when the backing store connection or session fails.
    Not recoverable locally; the original driver error is chained.
    """


# === HTTP 예외 (HTTP exceptions) ===

class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용.

    Args:
        detail: 오류 메시지 (Error message, default: "Resource not found")
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class DuplicateError(HTTPException):
    """409 Conflict 예외 — 중복 리소스 생성 시도 시 사용 (e.g. duplicate team name)."""

    def __init__(self, detail: str = "Resource already exists") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class BadRequestError(HTTPException):
    """400 Bad Request 예외 — Pydantic 검증 이후의 요청 오류."""

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
