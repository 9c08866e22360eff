"""팀 라우터 — 팀 생성/조회, 소속 회원, 팀별 통계 엔드포인트.

Team Router — Team creation and lookup, the team's members and per-team
member statistics.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from querystudy.database import get_db
from querystudy.schemas.member import MemberResponse, TeamCreate, TeamResponse, TeamStatsResponse
from querystudy.services.team_service import team_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[TeamResponse])
async def list_teams(db: Annotated[AsyncSession, Depends(get_db)]) -> list[TeamResponse]:
    """팀 목록을 생성 순서대로 조회합니다 (List teams in creation order)."""
    return await team_service.list_teams(db)


@router.post("", response_model=TeamResponse, status_code=201)
async def create_team(
    data: TeamCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TeamResponse:
    """새 팀을 생성합니다 (Create a team; 409 on duplicate name)."""
    result: TeamResponse = await team_service.create_team(db, data)
    await db.commit()
    return result


@router.get("/stats", response_model=list[TeamStatsResponse])
async def team_stats(db: Annotated[AsyncSession, Depends(get_db)]) -> list[TeamStatsResponse]:
    """팀별 회원 수와 나이 통계 (Member count and age statistics per team)."""
    return await team_service.member_stats(db)


@router.get("/{team_id}/members", response_model=list[MemberResponse])
async def list_team_members(
    team_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[MemberResponse]:
    """팀 소속 회원 목록 (Members of a team; 404 if the team is unknown)."""
    return await team_service.list_members(db, team_id)
