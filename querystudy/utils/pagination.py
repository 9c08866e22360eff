"""페이지네이션 유틸리티 모듈.

Pagination utility module for query-builder queries.
Provides a ``paginate`` helper and a ``Page`` response model for
consistent pagination across list endpoints.
"""

import math
from typing import Any

from pydantic import BaseModel

from querystudy.query.builder import Query


class Page(BaseModel):
    """페이지네이션 결과 모델.

    Pagination result model for typed responses.

    Attributes:
        items: 현재 페이지 항목 목록 (Items for the current page)
        total: 전체 항목 수 (Total count across all pages)
        page: 현재 페이지 번호 (Current page number, 1-based)
        per_page: 페이지당 항목 수 (Items per page)
        pages: 전체 페이지 수 (Total number of pages)
    """

    items: list[Any]
    total: int
    page: int
    per_page: int
    pages: int  # ceil(total / per_page)


async def paginate(query: Query, page: int = 1, per_page: int = 20) -> Page:
    """쿼리에 페이지네이션을 적용해 한 페이지를 조회합니다.

    Execute ``query`` for one page. Runs two statements: a count over the
    unpaged query and the page itself with OFFSET/LIMIT.

    Args:
        query: 실행기에 바인딩된 쿼리 (Query bound to an executor)
        page: 요청 페이지 번호, 1부터 시작 (Page number, 1-indexed)
        per_page: 페이지당 항목 수 (Items per page)

    Returns:
        Page: 항목과 페이지 메타데이터 (Items plus paging metadata)
    """
    items, total = await query.fetch_page(page, per_page)
    pages: int = math.ceil(total / per_page) if per_page else 0
    return Page(items=items, total=total, page=page, per_page=per_page, pages=pages)
