"""팀 서비스 — 팀 생성/조회 및 통계 비즈니스 로직.

Team Service — Business logic for team creation, lookup, the derived
member list and per-team statistics.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from querystudy.models import Member, Team
from querystudy.repositories.team_repository import team_repository
from querystudy.schemas.member import MemberResponse, TeamCreate, TeamResponse, TeamStatsResponse
from querystudy.utils.exceptions import DuplicateError, NotFoundError


class TeamService:
    """팀 관련 비즈니스 로직을 처리하는 서비스 (Service handling team business logic)."""

    def _to_response(self, team: Team) -> TeamResponse:
        return TeamResponse(id=team.id, team_name=team.team_name)

    async def create_team(self, db: AsyncSession, data: TeamCreate) -> TeamResponse:
        """새 팀을 생성합니다. 이름 중복 시 409.

        Create a team. Team names are unique.

        Raises:
            DuplicateError: 같은 이름의 팀이 있는 경우 (A team with that name exists)
        """
        if await team_repository.exists(db, {"team_name": data.team_name}):
            raise DuplicateError(f"Team '{data.team_name}' already exists")
        team: Team = await team_repository.create(db, {"team_name": data.team_name})
        return self._to_response(team)

    async def list_teams(self, db: AsyncSession) -> list[TeamResponse]:
        teams = await team_repository.get_all(db, order_by=Team.id)
        return [self._to_response(t) for t in teams]

    async def get_team(self, db: AsyncSession, team_id: int) -> Team:
        """팀을 조회합니다. 없으면 404 (Retrieve a team or raise NotFoundError)."""
        team: Team | None = await team_repository.get_by_id(db, team_id)
        if team is None:
            raise NotFoundError(f"Team {team_id} not found")
        return team

    async def list_members(self, db: AsyncSession, team_id: int) -> list[MemberResponse]:
        """팀 소속 회원 목록 (Members of a team, 404 if the team is unknown)."""
        await self.get_team(db, team_id)
        members: list[Member] = await team_repository.get_members(db, team_id)
        return [
            MemberResponse(id=m.id, username=m.username, age=m.age, team_id=m.team_id)
            for m in members
        ]

    async def member_stats(self, db: AsyncSession) -> list[TeamStatsResponse]:
        """팀별 회원 통계 (Per-team member statistics)."""
        rows = await team_repository.get_member_stats(db)
        return [
            TeamStatsResponse(
                team_name=row[0],
                member_count=row["member_count"],
                avg_age=row["avg_age"],
                min_age=row["min_age"],
                max_age=row["max_age"],
            )
            for row in rows
        ]


# 싱글턴 인스턴스 — Singleton instance
team_service: TeamService = TeamService()
