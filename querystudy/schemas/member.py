"""회원 및 팀 Pydantic 요청/응답 스키마 정의.

Member and Team Pydantic request/response schema definitions,
including the DTOs filled by query projections.
"""

from pydantic import BaseModel, Field


# === 팀 (Team) 스키마 ===

class TeamCreate(BaseModel):
    """팀 생성 요청 스키마 (Team creation request)."""

    team_name: str = Field(min_length=1, max_length=255)


class TeamResponse(BaseModel):
    """팀 응답 스키마.

    Attributes:
        id: 팀 ID (Team id)
        team_name: 팀 이름 (Team name)
    """

    id: int
    team_name: str


class TeamStatsResponse(BaseModel):
    """팀별 회원 통계 — group by 집계 결과.

    Per-team member statistics produced by a grouped aggregate query.
    """

    team_name: str
    member_count: int
    avg_age: float | None
    min_age: int | None
    max_age: int | None


# === 회원 (Member) 스키마 ===

class MemberCreate(BaseModel):
    """회원 생성 요청 스키마.

    Attributes:
        username: 회원 이름 (Username, optional)
        age: 나이 (Age, default 0)
        team_id: 소속 팀 ID, 없으면 무소속 (Team id; None leaves the member unaffiliated)
    """

    username: str | None = None
    age: int = Field(default=0, ge=0)
    team_id: int | None = None


class MemberResponse(BaseModel):
    """회원 응답 스키마 (Member response)."""

    id: int
    username: str | None
    age: int
    team_id: int | None


class MemberTeamResponse(BaseModel):
    """회원+팀 프로젝션 DTO — 검색 결과 한 행.

    Member-with-team projection DTO; one row of a member search.
    Team fields are None for unaffiliated members.
    """

    member_id: int
    username: str | None
    age: int
    team_id: int | None
    team_name: str | None


class MemberSearchCondition(BaseModel):
    """회원 검색 조건 — 모든 필드는 선택 사항.

    Member search condition. Every field is optional; unset fields add
    no restriction.
    """

    username: str | None = None
    team_name: str | None = None
    age_goe: int | None = None  # 나이 하한 (Minimum age, inclusive)
    age_loe: int | None = None  # 나이 상한 (Maximum age, inclusive)
