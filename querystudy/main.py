"""FastAPI 애플리케이션 엔트리포인트 — 미들웨어, 예외 핸들러, 라우터 등록.

FastAPI application entry point — Middleware, exception handlers and
router registration.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from querystudy.config import settings
from querystudy.middleware.request_logging import RequestLoggingMiddleware
from querystudy.utils.exceptions import (
    AmbiguousProjection,
    InvalidQuery,
    NoUniqueResult,
    QueryError,
    StoreUnavailable,
)
from querystudy.utils.logger import get_logger

logger = get_logger(__name__)

# 쿼리 오류 → HTTP 상태 코드 — Query error to HTTP status mapping
_QUERY_ERROR_STATUS: dict[type[QueryError], int] = {
    InvalidQuery: status.HTTP_400_BAD_REQUEST,
    AmbiguousProjection: status.HTTP_400_BAD_REQUEST,
    NoUniqueResult: status.HTTP_404_NOT_FOUND,
    StoreUnavailable: status.HTTP_503_SERVICE_UNAVAILABLE,
}


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    """개발용 SQLite에서는 시작 시 테이블을 생성합니다.

    Create tables on startup when running against SQLite (development).
    """
    if settings.is_sqlite:
        from querystudy.database import init_db

        await init_db()
    yield


app: FastAPI = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)


@app.exception_handler(QueryError)
async def query_error_handler(request: Request, exc: QueryError) -> JSONResponse:
    """쿼리 오류를 HTTP 응답으로 변환합니다 (Translate query errors to HTTP responses)."""
    status_code = _QUERY_ERROR_STATUS.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    if status_code >= 500:
        logger.error("Query failed on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


@app.get("/health")
async def health_check() -> dict[str, str]:
    """서버 상태 확인 엔드포인트 (Health check endpoint)."""
    return {"status": "ok"}


from querystudy.api import api_router  # noqa: E402

app.include_router(api_router, prefix="/api/v1")
