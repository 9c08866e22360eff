"""요청 로깅 미들웨어 — Axiom 또는 표준 로거로 구조화 로그 전송.

Request logging middleware.
Builds one structured event per API request (method, path, query params,
status code, duration, error detail) and ships it to Axiom when it is
configured, otherwise writes it to the standard logger.
"""

import json
import time
from typing import Any

from axiom_py import Client as AxiomClient
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from querystudy.config import settings
from querystudy.utils.logger import get_logger

logger = get_logger(__name__)

# 로깅 제외 경로 — Paths excluded from logging
_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}


def _error_detail(body: bytes) -> str:
    """에러 응답 본문에서 사유 추출 (Extract the error reason from a response body)."""
    try:
        data = json.loads(body)
        detail = data.get("detail", data) if isinstance(data, dict) else data
        return str(detail)[:500]
    except (json.JSONDecodeError, UnicodeDecodeError):
        return body.decode("utf-8", errors="replace")[:500]


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """모든 API 요청/응답을 로깅하는 미들웨어.

    Middleware that logs every API request and its outcome.
    """

    def __init__(self, app: Any) -> None:
        super().__init__(app)
        self._client: AxiomClient | None = None
        self._dataset: str = settings.AXIOM_DATASET

        if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in _SKIP_PATHS:
            return await call_next(request)

        start_time = time.time()
        event: dict[str, Any] = {"method": request.method, "path": request.url.path}
        if request.query_params:
            event["query_params"] = dict(request.query_params)

        status_code: int = 500
        try:
            response = await call_next(request)
            status_code = response.status_code

            # 에러 응답시 body에서 사유 추출 후 다시 감싸서 반환 — Re-wrap consumed body
            if status_code >= 400:
                body = b""
                async for chunk in response.body_iterator:
                    body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")
                event["error"] = _error_detail(body)
                response = Response(
                    content=body,
                    status_code=status_code,
                    headers=dict(response.headers),
                    media_type=response.media_type,
                )
        except Exception as exc:
            event["error"] = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            event["status_code"] = status_code
            event["duration_ms"] = round((time.time() - start_time) * 1000, 2)
            self._emit(event)

        return response

    def _emit(self, event: dict[str, Any]) -> None:
        if self._client is None:
            logger.info("request %s", json.dumps(event, ensure_ascii=False))
            return
        try:
            self._client.ingest_events(self._dataset, [event])
        except Exception as exc:
            # 로깅 실패는 요청 결과에 반영하지 않음 (Ingest failures do not fail the request)
            logger.warning("Axiom ingest failed: %s", exc)
