"""API 라우터 패키지 — 모든 엔드포인트 통합.

API Router package — Aggregates every endpoint into a single router
for inclusion in the FastAPI application.

Included routers:
    - teams: 팀 생성/조회, 소속 회원, 통계 (Teams, their members, statistics)
    - members: 회원 생성/조회/검색 (Members and member search)
"""

from fastapi import APIRouter

from querystudy.api.members import router as members_router
from querystudy.api.teams import router as teams_router

api_router: APIRouter = APIRouter()
api_router.include_router(teams_router, prefix="/teams", tags=["Teams"])
api_router.include_router(members_router, prefix="/members", tags=["Members"])
