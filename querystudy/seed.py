"""샘플 데이터 시드 스크립트 — teamA/teamB와 회원 4명 생성.

Seed script — Creates the sample teams and members used throughout the
query examples.

Usage:
    python -m querystudy.seed

Creates:
    - 2개 팀: teamA, teamB (2 teams)
    - 4명 회원: member1(10, teamA), member2(20, teamA), member3(30, teamB), member4(40, teamB)
"""

import asyncio

from querystudy.database import init_db, unit_of_work
from querystudy.models import Member, Team
from querystudy.persistence import PersistenceContext
from querystudy.query import QueryFactory, team
from querystudy.utils.logger import get_logger

logger = get_logger(__name__)

# (회원 이름, 나이, 팀 이름) — (username, age, team name)
SAMPLE_MEMBERS: list[tuple[str, int, str]] = [
    ("member1", 10, "teamA"),
    ("member2", 20, "teamA"),
    ("member3", 30, "teamB"),
    ("member4", 40, "teamB"),
]


async def seed_sample_data(ctx: PersistenceContext) -> list[Member]:
    """샘플 팀과 회원을 저장합니다.

    Persist the sample teams and members, then flush.

    Returns:
        list[Member]: 저장된 회원, 가입 순서 (Persisted members in insertion order)
    """
    teams: dict[str, Team] = {}
    for team_name in ("teamA", "teamB"):
        teams[team_name] = await ctx.persist(Team(team_name))

    members: list[Member] = []
    for username, age, team_name in SAMPLE_MEMBERS:
        members.append(await ctx.persist(Member(username, age, teams[team_name])))
    await ctx.flush()
    return members


async def seed() -> None:
    """데이터베이스를 샘플 데이터로 시드합니다.

    Create tables if needed, then insert the sample data.
    Idempotent: 이미 시드된 경우 건너뜁니다 (Skips if teamA already exists).
    """
    await init_db()

    async with unit_of_work() as session:
        existing = await QueryFactory(session).select_from(team).where(team.team_name.eq("teamA")).fetch_first()
        if existing is not None:
            logger.info("Already seeded. Skipping.")
            return

        members = await seed_sample_data(PersistenceContext(session))
        logger.info("Seeded %d teams and %d members", 2, len(members))


if __name__ == "__main__":
    asyncio.run(seed())
