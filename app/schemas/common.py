"""공통 Pydantic 스키마 정의.

Common Pydantic schema definitions shared by every API domain:
the camelCase base model and the uniform error response body.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """camelCase JSON 키를 사용하는 베이스 스키마.

    Base schema whose JSON keys are camelCase (photoUrl, nutritionalFact)
    while Python attributes stay snake_case. Accepts either form on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class ErrorResponse(CamelModel):
    """오류 응답 스키마 — 모든 4xx/5xx 응답의 본문.

    Error response body returned for every 4xx/5xx response.

    Attributes:
        status: HTTP 상태 코드 (HTTP status code)
        message: 오류 요약 (Short error summary)
        time_stamp: 발생 시각 epoch ms (Epoch milliseconds)
        details: 세부 메시지 목록, 검증 오류 시 "필드: 메시지"
                 (Detail lines; "field: message" for validation failures)
    """

    status: int
    message: str
    time_stamp: int
    details: list[str] = Field(default_factory=list)
