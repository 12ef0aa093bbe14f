"""상품 관련 Pydantic 요청/응답 스키마 정의.

Product-related Pydantic request/response schema definitions (DTOs).
The wire shape differs from the ORM shape: energy values are "calories" and
"kilojoules" here, "*_per_100g" on the NutritionalFact entity.
"""

from decimal import Decimal

from pydantic import Field, field_validator

from app.schemas.common import CamelModel


class NutritionalFactPayload(CamelModel):
    """영양 성분 입력 스키마 (100g 기준).

    Nutritional facts input schema, values per 100 grams.
    Energy values are required; other nutrients are optional and non-negative.
    """

    calories: int = Field(ge=0, le=2_147_483_647)  # kcal
    kilojoules: int = Field(ge=0, le=2_147_483_647)  # kJ
    fat: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    carbohydrates: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    sugars: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    polyols: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    fibers: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    protein: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    sodium: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    vitamin_c: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)  # mg
    calcium: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)  # mg


class ProductPayload(CamelModel):
    """상품 생성/수정 요청 스키마.

    Product create/replace request schema, sent as the "product" part of a
    multipart request. Any id or photoUrl in the payload is ignored; the photo
    comes from the "image" part.

    Attributes:
        name: 상품명 (Product name, required)
        manufacturer: 제조사 (Manufacturer, required)
        weight: 중량 g (Net weight in grams, > 0)
        nutritional_fact: 영양 성분 (Nutritional facts, required)
        gtin: 바코드 (GTIN-8/12/13/14 digits, optional)
    """

    name: str = Field(min_length=1, max_length=255)
    manufacturer: str = Field(min_length=1, max_length=255)
    weight: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    nutritional_fact: NutritionalFactPayload
    gtin: str | None = Field(default=None, pattern=r"^(\d{8}|\d{12,14})$")

    @field_validator("gtin", mode="before")
    @classmethod
    def _blank_gtin_to_none(cls, value: object) -> object:
        # UI는 빈 바코드를 ""로 보냄 (The UI sends an empty barcode as "")
        if isinstance(value, str) and not value.strip():
            return None
        return value


class NutritionalFactResponse(CamelModel):
    """영양 성분 응답 스키마.

    Nutritional facts response schema.
    """

    calories: int
    kilojoules: int
    fat: float | None = None
    carbohydrates: float | None = None
    sugars: float | None = None
    polyols: float | None = None
    fibers: float | None = None
    protein: float | None = None
    sodium: float | None = None
    vitamin_c: float | None = None
    calcium: float | None = None


class ProductResponse(CamelModel):
    """상품 응답 스키마.

    Product response schema.

    Attributes:
        id: 상품 ID (Generated product identifier)
        name: 상품명 (Product name)
        manufacturer: 제조사 (Manufacturer)
        weight: 중량 g (Net weight in grams)
        nutritional_fact: 영양 성분 (Nutritional facts)
        photo_url: 이미지 URL (Photo URL, nullable)
        gtin: 바코드 (Barcode, nullable)
    """

    id: int
    name: str
    manufacturer: str
    weight: float
    nutritional_fact: NutritionalFactResponse | None = None
    photo_url: str | None = None
    gtin: str | None = None
