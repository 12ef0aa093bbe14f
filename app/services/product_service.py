"""상품 서비스 — 상품 CRUD, 검색, 이미지 처리 비즈니스 로직.

Product Service — Business logic for product CRUD, search and photos.
Converts between the API shape (ProductPayload/ProductResponse) and the
ORM shape (Product/NutritionalFact), enforces barcode uniqueness, and
keeps stored images in step with the product rows.
"""

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.product import NutritionalFact, Product
from app.repositories.product_repository import product_repository
from app.schemas.product import (
    NutritionalFactPayload,
    NutritionalFactResponse,
    ProductPayload,
    ProductResponse,
)
from app.services.storage_service import storage_service
from app.utils.exceptions import DuplicateError, NotFoundError
from app.utils.pagination import Page

logger = logging.getLogger("catalog.products")

# 선택 영양소 필드 — Optional nutrient fields shared by DTO and entity
_NUTRIENT_FIELDS: tuple[str, ...] = (
    "fat",
    "carbohydrates",
    "sugars",
    "polyols",
    "fibers",
    "protein",
    "sodium",
    "vitamin_c",
    "calcium",
)


@dataclass
class PhotoChange:
    """쓰기 작업이 남긴 이미지 변경 (Photo side effects of a write).

    saved: 새로 저장된 이미지, 트랜잭션 실패 시 삭제 (Stored now, removed on failure)
    stale: 대체/삭제된 이미지, 커밋 후 삭제 (Replaced or removed, deleted after commit)
    """

    saved: str | None = None
    stale: str | None = None


class ProductService:
    """상품 관련 비즈니스 로직을 처리하는 서비스.

    Service handling product business logic.
    """

    def _fact_values(self, data: NutritionalFactPayload) -> dict[str, Any]:
        """영양 성분 DTO를 엔티티 컬럼 값으로 변환합니다.

        Map the nutritional facts DTO onto NutritionalFact column values.
        """
        values: dict[str, Any] = {
            "calories_per_100g": data.calories,
            "kilojoules_per_100g": data.kilojoules,
        }
        for field in _NUTRIENT_FIELDS:
            values[field] = getattr(data, field)
        return values

    def _to_response(self, product: Product) -> ProductResponse:
        """상품 모델을 응답 스키마로 변환합니다.

        Convert a Product model instance to a ProductResponse schema.
        """
        fact: NutritionalFact | None = product.nutritional_fact
        fact_response: NutritionalFactResponse | None = None
        if fact is not None:
            fact_response = NutritionalFactResponse(
                calories=fact.calories_per_100g,
                kilojoules=fact.kilojoules_per_100g,
                **{field: getattr(fact, field) for field in _NUTRIENT_FIELDS},
            )
        return ProductResponse(
            id=product.id,
            name=product.name,
            manufacturer=product.manufacturer,
            weight=product.weight,
            nutritional_fact=fact_response,
            photo_url=product.photo_url,
            gtin=product.gtin,
        )

    async def _get_or_404(self, db: AsyncSession, product_id: int) -> Product:
        product: Product | None = await product_repository.get_by_id(db, product_id)
        if product is None:
            raise NotFoundError(f"Product with id {product_id} not found")
        return product

    async def _check_gtin(
        self,
        db: AsyncSession,
        gtin: str | None,
        exclude_id: int | None = None,
    ) -> None:
        if gtin is not None and await product_repository.gtin_taken(db, gtin, exclude_id):
            raise DuplicateError(f"A product with barcode {gtin} already exists")

    async def list_products(
        self,
        db: AsyncSession,
        page: int,
        size: int,
        sort: str | None = None,
    ) -> Page[ProductResponse]:
        """상품 목록을 페이지 단위로 조회합니다.

        List one page of products in the requested order.

        Raises:
            BadRequestError: 잘못된 정렬 식 (Invalid sort expression)
        """
        products, total = await product_repository.get_page(db, page, size, sort)
        return Page[ProductResponse].build(
            [self._to_response(p) for p in products], total, page, size
        )

    async def search_products(
        self,
        db: AsyncSession,
        query: str | None,
        page: int,
        size: int,
        sort: str | None = None,
    ) -> Page[ProductResponse]:
        """이름 또는 제조사에 검색어가 포함된 상품을 조회합니다.

        Search products whose name or manufacturer contains the query,
        case-insensitively. A blank query returns the unfiltered listing.
        """
        term: str | None = query.strip() if query else None
        products, total = await product_repository.get_page(db, page, size, sort, term or None)
        return Page[ProductResponse].build(
            [self._to_response(p) for p in products], total, page, size
        )

    async def get_product(self, db: AsyncSession, product_id: int) -> ProductResponse:
        """상품 상세 정보를 조회합니다.

        Raises:
            NotFoundError: 상품을 찾을 수 없을 때 (Product not found)
        """
        return self._to_response(await self._get_or_404(db, product_id))

    async def _flush(self, db: AsyncSession, photos: PhotoChange, gtin: str | None) -> None:
        """변경을 flush하고, 실패하면 새로 저장한 이미지를 지웁니다.

        Flush pending rows. On failure the session is rolled back, a newly
        stored photo is removed, and a barcode unique violation becomes 409.
        """
        try:
            await db.flush()
        except Exception as exc:
            await db.rollback()
            storage_service.delete_image(photos.saved)
            if isinstance(exc, IntegrityError) and gtin is not None and "gtin" in str(exc.orig):
                raise DuplicateError(f"A product with barcode {gtin} already exists") from exc
            raise

    async def commit(self, db: AsyncSession, photos: PhotoChange) -> None:
        """트랜잭션을 커밋한 뒤 이미지 변경을 확정합니다.

        Commit the transaction, then delete the photo it made stale. If the
        commit fails the stale photo is kept and a newly stored one removed.
        """
        try:
            await db.commit()
        except Exception:
            await db.rollback()
            storage_service.delete_image(photos.saved)
            raise
        storage_service.delete_image(photos.stale)

    async def create_product(
        self,
        db: AsyncSession,
        data: ProductPayload,
        image: bytes | None = None,
        image_content_type: str | None = None,
    ) -> tuple[ProductResponse, PhotoChange]:
        """새 상품을 영양 성분 및 이미지와 함께 생성합니다.

        Create a product with its nutritional facts and optional photo.
        The caller finishes the transaction with commit().

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 상품 데이터 (Validated product payload)
            image: 이미지 바이트, 없으면 None (Image bytes or None)
            image_content_type: 이미지 MIME 타입 (Image content type)

        Returns:
            tuple[ProductResponse, PhotoChange]: 생성된 상품과 이미지 변경
                (Created product with generated id, and the stored photo)

        Raises:
            DuplicateError: 같은 바코드가 이미 존재할 때 (Barcode already used)
            BadRequestError: 이미지 타입/크기 오류 (Invalid image)
        """
        await self._check_gtin(db, data.gtin)

        photos: PhotoChange = PhotoChange()
        if image is not None:
            photos.saved = storage_service.save_image(image, image_content_type)

        product: Product = Product(
            name=data.name,
            manufacturer=data.manufacturer,
            weight=data.weight,
            gtin=data.gtin,
            photo_url=photos.saved,
            nutritional_fact=NutritionalFact(**self._fact_values(data.nutritional_fact)),
        )
        db.add(product)
        await self._flush(db, photos, data.gtin)

        logger.info("Created product %s (id=%s)", product.name, product.id)
        return self._to_response(product), photos

    async def update_product(
        self,
        db: AsyncSession,
        product_id: int,
        data: ProductPayload,
        image: bytes | None = None,
        image_content_type: str | None = None,
    ) -> tuple[ProductResponse, PhotoChange]:
        """상품 전체를 교체합니다. 새 이미지가 없으면 기존 사진을 유지합니다.

        Replace every product field and its nutritional facts. A new image
        replaces the old photo, which is deleted once commit() succeeds;
        without one the photo is kept.

        Raises:
            NotFoundError: 상품을 찾을 수 없을 때 (Product not found)
            DuplicateError: 다른 상품이 같은 바코드를 사용할 때
                            (Barcode used by another product)
        """
        product: Product = await self._get_or_404(db, product_id)
        await self._check_gtin(db, data.gtin, exclude_id=product_id)

        photos: PhotoChange = PhotoChange()
        if image is not None:
            photos.stale = product.photo_url
            photos.saved = storage_service.save_image(image, image_content_type)
            product.photo_url = photos.saved

        product.name = data.name
        product.manufacturer = data.manufacturer
        product.weight = data.weight
        product.gtin = data.gtin

        fact_values: dict[str, Any] = self._fact_values(data.nutritional_fact)
        if product.nutritional_fact is None:
            product.nutritional_fact = NutritionalFact(**fact_values)
        else:
            for field, value in fact_values.items():
                setattr(product.nutritional_fact, field, value)

        await self._flush(db, photos, data.gtin)

        logger.info("Updated product %s (id=%s)", product.name, product.id)
        return self._to_response(product), photos

    async def delete_product(self, db: AsyncSession, product_id: int) -> PhotoChange:
        """상품과 영양 성분을 삭제합니다. 이미지는 커밋 후 삭제됩니다.

        Delete a product and its nutritional facts. The stored photo is
        returned as stale and removed by commit().

        Raises:
            NotFoundError: 상품을 찾을 수 없을 때 (Product not found)
        """
        product: Product = await self._get_or_404(db, product_id)
        photos: PhotoChange = PhotoChange(stale=product.photo_url)

        await product_repository.delete(db, product)

        logger.info("Deleted product id=%s", product_id)
        return photos


# 싱글턴 인스턴스 — Singleton instance
product_service: ProductService = ProductService()
