"""회원 라우터 — 회원 생성/조회 및 조건 검색 엔드포인트.

Member Router — Member creation, lookup and condition search.
Search parameters are all optional and combine with AND.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from querystudy.config import settings
from querystudy.database import get_db
from querystudy.schemas.member import (
    MemberCreate,
    MemberResponse,
    MemberSearchCondition,
    MemberTeamResponse,
)
from querystudy.services.member_service import member_service
from querystudy.utils.pagination import Page

router: APIRouter = APIRouter()


def _condition(
    username: Annotated[str | None, Query(description="회원 이름 일치")] = None,
    team_name: Annotated[str | None, Query(description="팀 이름 일치")] = None,
    age_goe: Annotated[int | None, Query(description="나이 하한")] = None,
    age_loe: Annotated[int | None, Query(description="나이 상한")] = None,
) -> MemberSearchCondition:
    return MemberSearchCondition(
        username=username, team_name=team_name, age_goe=age_goe, age_loe=age_loe
    )


@router.post("", response_model=MemberResponse, status_code=201)
async def create_member(
    data: MemberCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MemberResponse:
    """새 회원을 생성합니다 (Create a member; 404 if the team is unknown)."""
    result: MemberResponse = await member_service.create_member(db, data)
    await db.commit()
    return result


@router.get("/search", response_model=list[MemberTeamResponse])
async def search_members(
    condition: Annotated[MemberSearchCondition, Depends(_condition)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[MemberTeamResponse]:
    """조건으로 회원을 검색합니다 (Search members with their team)."""
    return await member_service.search(db, condition)


@router.get("/search/page", response_model=Page)
async def search_members_page(
    condition: Annotated[MemberSearchCondition, Depends(_condition)],
    db: Annotated[AsyncSession, Depends(get_db)],
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = settings.DEFAULT_PAGE_SIZE,
) -> Page:
    """조건 검색 결과 한 페이지 (One page of search results)."""
    return await member_service.search_page(db, condition, page, per_page)


@router.get("/{member_id}", response_model=MemberResponse)
async def get_member(
    member_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> MemberResponse:
    """회원 상세 조회 (Retrieve a member; 404 if unknown)."""
    return await member_service.get_member(db, member_id)
