"""팀 레포지토리 — 팀 조회 및 팀별 통계 쿼리.

Team Repository — Team lookups, the derived member list and per-team
aggregate statistics.
"""

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from querystudy.models import Member, Team
from querystudy.query import Expressions, QMember, QTeam, QueryFactory, QueryTuple
from querystudy.repositories.base import BaseRepository


class TeamRepository(BaseRepository[Team]):
    """팀 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the team table.
    """

    def __init__(self) -> None:
        super().__init__(Team)

    async def get_by_name(self, db: AsyncSession, team_name: str) -> Team | None:
        """이름으로 팀을 조회합니다 (Retrieve a team by name)."""
        team = QTeam()
        return await QueryFactory(db).select_from(team).where(team.team_name.eq(team_name)).fetch_first()

    async def get_members(self, db: AsyncSession, team_id: int) -> list[Member]:
        """팀 소속 회원 목록 — 외래 키로 필요할 때 조회합니다.

        Members of a team, looked up by foreign key on demand instead of a
        maintained back-reference collection.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            team_id: 팀 ID (Team id)

        Returns:
            list[Member]: 가입 순서대로 정렬된 회원 (Members in insertion order)
        """
        query: Select = select(Member).where(Member.team_id == team_id).order_by(Member.id)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_member_stats(self, db: AsyncSession) -> list[QueryTuple]:
        """팀별 회원 수/평균/최소/최대 나이를 집계합니다.

        Aggregate member count and age statistics per team name.
        Teams without members do not appear.

        Returns:
            list[QueryTuple]: (team_name, member_count, avg_age, min_age, max_age) 행
        """
        member, team = QMember(), QTeam()
        return await (
            QueryFactory(db)
            .select(
                team.team_name,
                Expressions.count_all().as_("member_count"),
                member.age.avg().as_("avg_age"),
                member.age.min().as_("min_age"),
                member.age.max().as_("max_age"),
            )
            .from_(member)
            .join(member.team, team)
            .group_by(team.team_name)
            .order_by(team.team_name.asc())
            .fetch()
        )


# 싱글턴 인스턴스 — Singleton instance
team_repository: TeamRepository = TeamRepository()
