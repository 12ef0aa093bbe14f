"""상품 라우터 — 상품 CRUD, 페이지 조회, 검색 엔드포인트.

Product Router — CRUD, paged listing and search endpoints.
Reads are open to any authenticated user; writes require ROLE_ADMIN.

Create/update accept multipart/form-data with a JSON "product" part and an
optional "image" file part. The "product" part may arrive as a plain field or
as a file (browsers send a JSON Blob with filename "blob"). A plain
application/json body is also accepted when there is no image.
"""

from dataclasses import dataclass
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import UploadFile

from app.api.deps import get_current_user, require_admin
from app.config import settings
from app.database import get_db
from app.models.user import User
from app.schemas.product import ProductPayload, ProductResponse
from app.services.product_service import product_service
from app.services.storage_service import storage_service
from app.utils.exceptions import BadRequestError
from app.utils.pagination import Page

router: APIRouter = APIRouter()

# multipart 요청 본문 문서화 — OpenAPI description of the multipart body
_MULTIPART_BODY: dict = {
    "requestBody": {
        "required": True,
        "content": {
            "multipart/form-data": {
                "schema": {
                    "type": "object",
                    "required": ["product"],
                    "properties": {
                        "product": {"type": "string", "description": "Product JSON"},
                        "image": {"type": "string", "format": "binary"},
                    },
                }
            },
        },
    }
}


@dataclass
class ProductForm:
    """파싱된 상품 요청 — Parsed product request (payload + optional image)."""

    data: ProductPayload
    image: bytes | None = None
    image_content_type: str | None = None


def _validate_payload(raw: str | bytes) -> ProductPayload:
    try:
        return ProductPayload.model_validate_json(raw)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors(include_url=False))


async def product_form(request: Request) -> ProductForm:
    """요청 본문에서 상품 JSON과 이미지를 추출합니다.

    Extract and validate the product payload and optional image from the
    request body. Validation failures surface as RequestValidationError so
    they render as the usual 400 field list.
    """
    content_type: str = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        return ProductForm(data=_validate_payload(await request.body()))

    if not content_type.startswith("multipart/form-data"):
        raise BadRequestError("Expected multipart/form-data or application/json body")

    form = await request.form()
    raw = form.get("product")
    if raw is None:
        raise RequestValidationError(
            [{"type": "missing", "loc": ("body", "product"), "msg": "Field required", "input": None}]
        )
    if isinstance(raw, UploadFile):
        raw = await raw.read()
    data: ProductPayload = _validate_payload(raw)

    image = form.get("image")
    if isinstance(image, UploadFile) and image.filename:
        # 크기를 아는 경우 읽기 전에 거부, 아니면 한도+1 바이트까지만 읽음
        if image.size is not None:
            storage_service.validate_image(image.content_type, image.size)
        return ProductForm(
            data=data,
            image=await image.read(storage_service.max_image_bytes + 1),
            image_content_type=image.content_type,
        )
    return ProductForm(data=data)


def page_size(
    size: Annotated[int | None, Query(ge=1, description="페이지 크기 (Page size)")] = None,
) -> int:
    """size 쿼리 파라미터를 기본값/상한과 함께 해석합니다."""
    if size is None:
        return settings.DEFAULT_PAGE_SIZE
    if size > settings.MAX_PAGE_SIZE:
        raise BadRequestError(f"Page size must not exceed {settings.MAX_PAGE_SIZE}")
    return size


@router.get("", response_model=Page[ProductResponse])
async def list_products(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    size: Annotated[int, Depends(page_size)],
    page: Annotated[int, Query(ge=0, description="페이지 번호, 0부터 (0-based page)")] = 0,
    sort: Annotated[str | None, Query(description="정렬 식 (e.g. name,asc)")] = None,
) -> Page[ProductResponse]:
    """상품 목록을 페이지 단위로 조회합니다.

    List products, one page at a time, in the requested order.
    """
    return await product_service.list_products(db, page, size, sort)


@router.get("/search", response_model=Page[ProductResponse])
async def search_products(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    size: Annotated[int, Depends(page_size)],
    query: Annotated[str | None, Query(description="이름/제조사 검색어 (Name/manufacturer substring)")] = None,
    page: Annotated[int, Query(ge=0)] = 0,
    sort: Annotated[str | None, Query()] = None,
) -> Page[ProductResponse]:
    """이름 또는 제조사로 상품을 검색합니다.

    Search products by name or manufacturer substring (case-insensitive).
    """
    return await product_service.search_products(db, query, page, size, sort)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> ProductResponse:
    """상품 상세 정보를 조회합니다."""
    return await product_service.get_product(db, product_id)


@router.post("", response_model=ProductResponse, status_code=201, openapi_extra=_MULTIPART_BODY)
async def create_product(
    current_user: Annotated[User, Depends(require_admin)],
    form: Annotated[ProductForm, Depends(product_form)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ProductResponse:
    """새 상품을 생성합니다 (관리자 전용).

    Create a product with its nutritional facts and optional image.
    """
    result, photos = await product_service.create_product(
        db, form.data, form.image, form.image_content_type
    )
    await product_service.commit(db, photos)
    return result


@router.put("/{product_id}", response_model=ProductResponse, openapi_extra=_MULTIPART_BODY)
async def update_product(
    product_id: int,
    current_user: Annotated[User, Depends(require_admin)],
    form: Annotated[ProductForm, Depends(product_form)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ProductResponse:
    """상품 정보를 전체 교체합니다 (관리자 전용).

    Replace a product. Without a new image the current photo is kept.
    """
    result, photos = await product_service.update_product(
        db, product_id, form.data, form.image, form.image_content_type
    )
    await product_service.commit(db, photos)
    return result


@router.delete("/{product_id}", status_code=204)
async def delete_product(
    product_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> None:
    """상품을 삭제합니다 (관리자 전용)."""
    photos = await product_service.delete_product(db, product_id)
    await product_service.commit(db, photos)
