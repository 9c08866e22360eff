"""엔티티 및 영속성 컨텍스트 테스트.

Entity and persistence context tests — identity assignment, flush/clear,
lazy association loading, identity-based equality and the derived
team member list.
"""

import pytest
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from querystudy.models import Member, Team
from querystudy.persistence import PersistenceContext
from querystudy.repositories.team_repository import team_repository


class TestPersist:
    async def test_persist_assigns_identity(self, ctx: PersistenceContext) -> None:
        team = Team("teamX")
        assert team.id is None

        persisted = await ctx.persist(team)
        assert persisted is team
        assert team.id is not None

    async def test_member_defaults(self, ctx: PersistenceContext) -> None:
        loner = await ctx.persist(Member("loner"))
        assert loner.age == 0
        assert loner.team_id is None

    async def test_entity_round_trip(self, ctx: PersistenceContext) -> None:
        """저장 후 컨텍스트를 비우고 다시 조회하면 팀까지 읽힙니다."""
        team_a = await ctx.persist(Team("teamA"))
        team_b = await ctx.persist(Team("teamB"))
        await ctx.persist(Member("member1", 10, team_a))
        await ctx.persist(Member("member2", 20, team_a))
        await ctx.persist(Member("member3", 30, team_b))
        await ctx.persist(Member("member4", 40, team_b))

        await ctx.flush()
        ctx.clear()

        members = await ctx.create_query("select * from member order by member_id", Member).fetch()
        assert [m.username for m in members] == ["member1", "member2", "member3", "member4"]

        team_names = [(await m.awaitable_attrs.team).team_name for m in members]
        assert team_names == ["teamA", "teamA", "teamB", "teamB"]


@pytest.mark.usefixtures("sample_data")
class TestPersistenceContext:
    async def test_find(self, ctx: PersistenceContext, sample_data: dict[str, int]) -> None:
        found = await ctx.find(Member, sample_data["member3"])
        assert found is not None
        assert found.username == "member3"
        assert await ctx.find(Member, -1) is None

    async def test_find_returns_same_instance_within_context(
        self, ctx: PersistenceContext, sample_data: dict[str, int]
    ) -> None:
        first = await ctx.find(Member, sample_data["member1"])
        second = await ctx.find(Member, sample_data["member1"])
        assert first is second

    async def test_lazy_association(self, ctx: PersistenceContext, sample_data: dict[str, int]) -> None:
        found = await ctx.find(Member, sample_data["member1"])
        assert not ctx.is_loaded(found, "team")

        team = await found.awaitable_attrs.team
        assert team.team_name == "teamA"
        assert ctx.is_loaded(found, "team")

    async def test_is_loaded_unknown_attribute(self, ctx: PersistenceContext, sample_data: dict[str, int]) -> None:
        found = await ctx.find(Member, sample_data["member1"])
        with pytest.raises(AttributeError):
            ctx.is_loaded(found, "nonexistent")
        assert ctx.is_loaded(found, "username")

    async def test_detached_entity_keeps_stale_state(
        self, ctx: PersistenceContext, db: AsyncSession, sample_data: dict[str, int]
    ) -> None:
        """clear 이후 분리된 엔티티는 저장소 변경을 반영하지 않습니다."""
        detached = await ctx.find(Member, sample_data["member1"])
        ctx.clear()

        await db.execute(update(Member).where(Member.id == sample_data["member1"]).values(age=99))

        assert detached.age == 10
        fresh = await ctx.find(Member, sample_data["member1"])
        assert fresh is not detached
        assert fresh.age == 99


@pytest.mark.usefixtures("sample_data")
class TestIdentity:
    async def test_equality_by_identity(self, ctx: PersistenceContext, sample_data: dict[str, int]) -> None:
        first = await ctx.find(Member, sample_data["member2"])
        ctx.clear()
        second = await ctx.find(Member, sample_data["member2"])

        assert first is not second
        assert first == second
        assert hash(first) == hash(second)

    async def test_different_ids_not_equal(self, ctx: PersistenceContext, sample_data: dict[str, int]) -> None:
        member1 = await ctx.find(Member, sample_data["member1"])
        member2 = await ctx.find(Member, sample_data["member2"])
        assert member1 != member2

    def test_transient_entities(self) -> None:
        first = Member("same", 10)
        second = Member("same", 10)
        assert first == first
        assert first != second

    async def test_hash_stable_across_persist(self, ctx: PersistenceContext) -> None:
        """식별자 부여 전에 집합에 넣은 엔티티도 저장 후 찾을 수 있습니다."""
        team = Team("teamX")
        bucket = {team}
        await ctx.persist(team)
        assert team.id is not None
        assert team in bucket

    async def test_different_types_not_equal(self, ctx: PersistenceContext, sample_data: dict[str, int]) -> None:
        member = await ctx.find(Member, sample_data["member1"])
        team = await ctx.find(Team, sample_data["teamA"])
        assert member.id == team.id
        assert member != team

    def test_repr(self) -> None:
        assert repr(Member("member1", 10)) == "Member(id=None, username='member1', age=10)"
        assert repr(Team("teamA")) == "Team(id=None, team_name='teamA')"


@pytest.mark.usefixtures("sample_data")
class TestTeamMembers:
    """팀 회원 목록은 저장소에서 유도되므로 항상 최신입니다."""

    async def test_members_of_team(self, db: AsyncSession, sample_data: dict[str, int]) -> None:
        members = await team_repository.get_members(db, sample_data["teamA"])
        assert [m.username for m in members] == ["member1", "member2"]

    async def test_change_team_reflected(
        self, ctx: PersistenceContext, db: AsyncSession, sample_data: dict[str, int]
    ) -> None:
        member2 = await ctx.find(Member, sample_data["member2"])
        team_b = await ctx.find(Team, sample_data["teamB"])
        member2.change_team(team_b)
        await ctx.flush()

        team_a_members = await team_repository.get_members(db, sample_data["teamA"])
        team_b_members = await team_repository.get_members(db, sample_data["teamB"])
        assert [m.username for m in team_a_members] == ["member1"]
        assert [m.username for m in team_b_members] == ["member2", "member3", "member4"]

    async def test_team_by_name(self, db: AsyncSession) -> None:
        found = await team_repository.get_by_name(db, "teamB")
        assert found is not None
        assert found.team_name == "teamB"
        assert await team_repository.get_by_name(db, "teamZ") is None
