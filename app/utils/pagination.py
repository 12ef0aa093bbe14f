"""페이지네이션 및 정렬 유틸리티 모듈.

Pagination and sorting utility module for SQLAlchemy async queries.
Pages are 0-indexed and sorting is expressed as "field,direction"
(e.g. "name,asc"), matching what the admin UI sends.
"""

import math
from typing import Any, Generic, Mapping, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from app.utils.exceptions import BadRequestError

T = TypeVar("T")

# 허용되는 정렬 방향 — Accepted sort directions
_DIRECTIONS: frozenset[str] = frozenset({"asc", "desc"})


class Page(BaseModel, Generic[T]):
    """페이지네이션 결과 모델.

    Pagination result model for typed responses.
    Serialized with camelCase keys (totalElements, totalPages).

    Attributes:
        content: 현재 페이지 항목 목록 (Items for the current page)
        page: 현재 페이지 번호, 0부터 시작 (Current page number, 0-based)
        size: 페이지당 항목 수 (Requested page size)
        total_elements: 전체 항목 수 (Total count across all pages)
        total_pages: 전체 페이지 수 (ceil(total_elements / size))
        first: 첫 페이지 여부 (True on page 0)
        last: 마지막 페이지 여부 (True when no page follows)
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    content: list[T]
    page: int
    size: int
    total_elements: int
    total_pages: int
    first: bool
    last: bool

    @classmethod
    def build(cls, content: list[T], total: int, page: int, size: int) -> "Page[T]":
        """조회 결과로 페이지 메타데이터를 계산합니다.

        Compute page metadata from a page of items and the total count.
        """
        total_pages: int = math.ceil(total / size) if size > 0 else 0
        return cls(
            content=content,
            page=page,
            size=size,
            total_elements=total,
            total_pages=total_pages,
            first=page == 0,
            last=page >= total_pages - 1,
        )


def parse_sort(
    sort: str | None,
    allowed: Mapping[str, Any],
    default: str,
) -> list[ColumnElement[Any]]:
    """정렬 식(필드,방향)을 ORDER BY 절 목록으로 변환합니다.

    Convert a "field[,direction]" sort expression into ORDER BY clauses.

    Args:
        sort: 정렬 식, None/빈 문자열이면 기본값 (Sort expression or None)
        allowed: 허용 필드명 → 컬럼 매핑 (Public field name to column mapping)
        default: 기본 정렬 필드 (Field used when sort is empty)

    Returns:
        list[ColumnElement]: ORDER BY 절 목록 (Ordering clauses)

    Raises:
        BadRequestError: 알 수 없는 필드 또는 방향 (Unknown field or direction)
    """
    if not sort or not sort.strip():
        sort = default
    parts: list[str] = [p.strip() for p in sort.split(",")]
    if len(parts) > 2:
        raise BadRequestError(f"Invalid sort expression: {sort}")

    field: str = parts[0]
    direction: str = parts[1].lower() if len(parts) == 2 and parts[1] else "asc"

    column = allowed.get(field)
    if column is None:
        raise BadRequestError(
            f"Invalid sort field: {field}. Allowed: {', '.join(sorted(allowed))}"
        )
    if direction not in _DIRECTIONS:
        raise BadRequestError(f"Invalid sort direction: {direction}. Allowed: asc, desc")

    return [column.desc() if direction == "desc" else column.asc()]


async def paginate(
    db: AsyncSession,
    query: Select[Any],
    page: int = 0,
    size: int = 20,
) -> tuple[Sequence[Any], int]:
    """SQLAlchemy 쿼리에 대한 페이지네이션을 수행합니다.

    Execute a paginated SQLAlchemy query, returning items and total count.
    Runs two queries: one for the total count (via subquery) and one for
    the actual page of results with OFFSET/LIMIT.

    Args:
        db: 비동기 DB 세션 (Async database session)
        query: SQLAlchemy Select 쿼리 (Base query to paginate)
        page: 요청 페이지 번호, 0부터 시작 (Page number, 0-indexed)
        size: 페이지당 항목 수 (Items per page)

    Returns:
        tuple[Sequence[Any], int]: (항목 목록, 전체 개수) 튜플
            (Tuple of paginated items and total count)
    """
    # 전체 개수 조회 — 정렬 제거 후 서브쿼리로 COUNT (Count total via subquery)
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total: int = (await db.execute(count_query)).scalar() or 0

    # 페이지 항목 조회 — OFFSET/LIMIT 적용 (Fetch page items with offset/limit)
    result = await db.execute(query.offset(page * size).limit(size))
    items: Sequence[Any] = result.scalars().all()

    return items, total
