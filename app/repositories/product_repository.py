"""상품 레포지토리 — 상품 CRUD, 페이지 조회 및 검색 쿼리.

Product Repository — CRUD, paged listing and substring search for products.
Nutritional facts are eager-loaded with every product (selectin relationship).
"""

from typing import Any

from sqlalchemy import Select, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.product import Product
from app.repositories.base import BaseRepository
from app.utils.pagination import paginate, parse_sort

# 공개 정렬 필드 → 컬럼 매핑 — Public sort field names accepted by ?sort=
SORTABLE_FIELDS: dict[str, Any] = {
    "id": Product.id,
    "name": Product.name,
    "manufacturer": Product.manufacturer,
    "weight": Product.weight,
    "gtin": Product.gtin,
    "createdAt": Product.created_at,
}
DEFAULT_SORT: str = "name,asc"


def _escape_like(term: str) -> str:
    """LIKE 와일드카드 문자를 이스케이프합니다 (Escape LIKE wildcards)."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ProductRepository(BaseRepository[Product]):
    """상품 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the product table.
    """

    def __init__(self) -> None:
        super().__init__(Product)

    def _build_query(self, sort: str | None, search: str | None = None) -> Select:
        """정렬/검색 조건이 적용된 기본 SELECT를 생성합니다.

        Build the base SELECT with optional name/manufacturer filter and ordering.
        The primary key is always the last ordering column so pages never overlap.
        """
        query: Select = select(Product)

        if search:
            pattern: str = f"%{_escape_like(search)}%"
            query = query.where(
                or_(
                    Product.name.ilike(pattern, escape="\\"),
                    Product.manufacturer.ilike(pattern, escape="\\"),
                )
            )

        order_by = parse_sort(sort, SORTABLE_FIELDS, DEFAULT_SORT)
        if not sort or not sort.strip().startswith("id"):
            order_by.append(Product.id.asc())
        return query.order_by(*order_by)

    async def get_page(
        self,
        db: AsyncSession,
        page: int,
        size: int,
        sort: str | None = None,
        search: str | None = None,
    ) -> tuple[list[Product], int]:
        """상품 목록을 페이지 단위로 조회합니다.

        Retrieve one page of products, optionally filtered by a search term.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            page: 페이지 번호, 0부터 시작 (0-based page number)
            size: 페이지 크기 (Page size)
            sort: 정렬 식 "필드,방향" (Sort expression, e.g. "name,desc")
            search: 이름/제조사 부분 문자열 (Name/manufacturer substring)

        Returns:
            tuple[list[Product], int]: (상품 목록, 전체 개수)
                                       (Products on the page, total count)
        """
        query: Select = self._build_query(sort, search)
        items, total = await paginate(db, query, page, size)
        return list(items), total

    async def gtin_taken(
        self,
        db: AsyncSession,
        gtin: str,
        exclude_id: int | None = None,
    ) -> bool:
        """다른 상품이 이미 같은 바코드를 사용하는지 확인합니다.

        Check whether another product already uses the given barcode.
        """
        return await self.exists(db, {"gtin": gtin}, exclude_id=exclude_id)


# 싱글턴 인스턴스 — Singleton instance
product_repository: ProductRepository = ProductRepository()
