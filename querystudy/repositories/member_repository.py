"""회원 레포지토리 — 동적 조건 검색과 페이지 조회.

Member Repository — Dynamic-condition member search and paging, built
on the type-safe query builder.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from querystudy.models import Member, Team
from querystudy.query import Predicate, Projections, Query, QueryFactory, member, team
from querystudy.repositories.base import BaseRepository
from querystudy.schemas.member import MemberSearchCondition, MemberTeamResponse
from querystudy.utils.pagination import Page, paginate


def _username_eq(username: str | None) -> Predicate | None:
    return member.username.eq(username) if username else None


def _team_name_eq(team_name: str | None) -> Predicate | None:
    return team.team_name.eq(team_name) if team_name else None


def _age_goe(age_goe: int | None) -> Predicate | None:
    return member.age.goe(age_goe) if age_goe is not None else None


def _age_loe(age_loe: int | None) -> Predicate | None:
    return member.age.loe(age_loe) if age_loe is not None else None


class MemberRepository(BaseRepository[Member]):
    """회원 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the member table.
    """

    def __init__(self) -> None:
        super().__init__(Member)

    async def create_member(
        self,
        db: AsyncSession,
        username: str | None,
        age: int,
        team: Team | None,
    ) -> Member:
        """회원을 생성합니다. flush 후 ID가 부여됩니다.

        Create a member; the store assigns its id on flush.
        """
        db_obj = Member(username, age, team)
        db.add(db_obj)
        await db.flush()
        return db_obj

    def _search_query(self, db: AsyncSession, condition: MemberSearchCondition) -> Query:
        """검색 조건을 where 절로 변환한 쿼리.

        Build the search query. Each condition helper returns None when its
        field is unset and ``where`` skips None, so any subset of conditions
        composes into one conjunction.
        """
        return (
            QueryFactory(db)
            .select(
                Projections.fields(
                    MemberTeamResponse,
                    member_id=member.id,
                    username=member.username,
                    age=member.age,
                    team_id=team.id,
                    team_name=team.team_name,
                )
            )
            .from_(member)
            .left_join(member.team, team)
            .where(
                _username_eq(condition.username),
                _team_name_eq(condition.team_name),
                _age_goe(condition.age_goe),
                _age_loe(condition.age_loe),
            )
            .order_by(member.id.asc())
        )

    async def search(self, db: AsyncSession, condition: MemberSearchCondition) -> list[MemberTeamResponse]:
        """조건에 맞는 회원을 팀 정보와 함께 조회합니다.

        Search members with their team, filtered by the given condition.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            condition: 검색 조건 (Search condition, unset fields ignored)

        Returns:
            list[MemberTeamResponse]: 가입 순서대로 정렬된 결과 (Results in insertion order)
        """
        return await self._search_query(db, condition).fetch()

    async def search_page(
        self,
        db: AsyncSession,
        condition: MemberSearchCondition,
        page: int = 1,
        per_page: int = 20,
    ) -> Page:
        """검색 결과 한 페이지와 전체 개수 (One page of search results plus the total)."""
        return await paginate(self._search_query(db, condition), page, per_page)


# 싱글턴 인스턴스 — Singleton instance
member_repository: MemberRepository = MemberRepository()
