"""회원 서비스 — 회원 생성/조회/검색 비즈니스 로직.

Member Service — Business logic for member creation, lookup and search.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from querystudy.models import Member, Team
from querystudy.repositories.member_repository import member_repository
from querystudy.repositories.team_repository import team_repository
from querystudy.schemas.member import (
    MemberCreate,
    MemberResponse,
    MemberSearchCondition,
    MemberTeamResponse,
)
from querystudy.utils.exceptions import BadRequestError, NotFoundError
from querystudy.utils.pagination import Page


class MemberService:
    """회원 관련 비즈니스 로직을 처리하는 서비스 (Service handling member business logic)."""

    def _to_response(self, member: Member) -> MemberResponse:
        return MemberResponse(
            id=member.id,
            username=member.username,
            age=member.age,
            team_id=member.team_id,
        )

    async def create_member(self, db: AsyncSession, data: MemberCreate) -> MemberResponse:
        """회원을 생성합니다. 팀 ID는 저장된 팀이어야 합니다.

        Create a member. A given team id must refer to a persisted team.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 회원 생성 데이터 (Member creation data)

        Returns:
            MemberResponse: 생성된 회원 (Created member)

        Raises:
            NotFoundError: 팀이 존재하지 않는 경우 (Team does not exist)
        """
        team: Team | None = None
        if data.team_id is not None:
            team = await team_repository.get_by_id(db, data.team_id)
            if team is None:
                raise NotFoundError(f"Team {data.team_id} not found")
        member: Member = await member_repository.create_member(db, data.username, data.age, team)
        return self._to_response(member)

    async def get_member(self, db: AsyncSession, member_id: int) -> MemberResponse:
        member: Member | None = await member_repository.get_by_id(db, member_id)
        if member is None:
            raise NotFoundError(f"Member {member_id} not found")
        return self._to_response(member)

    async def search(self, db: AsyncSession, condition: MemberSearchCondition) -> list[MemberTeamResponse]:
        """검색 조건 검증 후 회원을 검색합니다.

        Validate the condition, then search.

        Raises:
            BadRequestError: 나이 범위가 뒤집힌 경우 (age_goe greater than age_loe)
        """
        self._validate(condition)
        return await member_repository.search(db, condition)

    async def search_page(
        self,
        db: AsyncSession,
        condition: MemberSearchCondition,
        page: int,
        per_page: int,
    ) -> Page:
        self._validate(condition)
        return await member_repository.search_page(db, condition, page, per_page)

    def _validate(self, condition: MemberSearchCondition) -> None:
        if (
            condition.age_goe is not None
            and condition.age_loe is not None
            and condition.age_goe > condition.age_loe
        ):
            raise BadRequestError("age_goe must not exceed age_loe")


# 싱글턴 인스턴스 — Singleton instance
member_service: MemberService = MemberService()
