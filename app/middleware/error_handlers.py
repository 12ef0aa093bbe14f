"""예외 핸들러 — 모든 오류를 공통 ErrorResponse 본문으로 변환.

Exception handlers — Render every error as the common ErrorResponse body:
{status, message, timeStamp, details}.

    - RequestValidationError → 400, details "필드: 메시지" ("field: message")
    - HTTPException (NotFoundError, DuplicateError, ...) → 해당 상태 코드
    - 기타 예외 (any other exception) → 500
"""

import logging
import time
from typing import Any, Sequence

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.schemas.common import ErrorResponse

logger = logging.getLogger("catalog.errors")

# 오류 위치에서 제거할 요청 영역 접두사 — Request-part prefixes dropped from error locations
_LOC_PREFIXES: frozenset[str] = frozenset({"body", "query", "path", "header", "cookie"})

EMPTY_FIELD_MESSAGE: str = "Field can't be empty"


def error_response(
    status_code: int,
    message: str,
    details: list[str] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """ErrorResponse 본문을 가진 JSONResponse를 생성합니다."""
    body = ErrorResponse(
        status=status_code,
        message=message,
        time_stamp=int(time.time() * 1000),
        details=details or [],
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True),
        headers=headers,
    )


def _field_path(loc: Sequence[Any]) -> str:
    parts = list(loc)
    if parts and parts[0] in _LOC_PREFIXES:
        parts = parts[1:]
    return ".".join(str(p) for p in parts)


def _field_message(error: dict[str, Any]) -> str:
    """누락/빈 값은 공통 문구로, 그 외는 pydantic 메시지를 사용합니다.

    Missing, null and empty values share one message; anything else keeps
    the pydantic message.
    """
    error_type: str = error.get("type", "")
    if error_type == "missing":
        return EMPTY_FIELD_MESSAGE
    if error.get("input") is None and error_type.endswith("_type"):
        return EMPTY_FIELD_MESSAGE
    if error_type == "string_too_short" and error.get("input") == "":
        return EMPTY_FIELD_MESSAGE
    return error.get("msg", "Invalid value")


def format_validation_errors(errors: Sequence[dict[str, Any]]) -> list[str]:
    """검증 오류 목록을 "필드: 메시지" 문자열 목록으로 변환합니다.

    Format validation errors as "dotted.path: message" lines, e.g.
    "nutritionalFact.calories: Field can't be empty".
    """
    details: list[str] = []
    for error in errors:
        path: str = _field_path(error.get("loc", ()))
        message: str = _field_message(error)
        details.append(f"{path}: {message}" if path else message)
    return details


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = format_validation_errors(exc.errors())
    logger.info("Validation failed on %s %s: %s", request.method, request.url.path, details)
    return error_response(status.HTTP_400_BAD_REQUEST, "Validation failed", details)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("HTTP %s on %s %s: %s", exc.status_code, request.method, request.url.path, exc.detail)
    message: str = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return error_response(exc.status_code, message, headers=getattr(exc, "headers", None))


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """처리되지 않은 예외 — 500 응답, 트레이스백 로깅.

    Unhandled exception: log with traceback and answer 500 without leaking
    internals.
    """
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred",
        [type(exc).__name__],
    )


def register_exception_handlers(app: FastAPI) -> None:
    """애플리케이션에 예외 핸들러를 등록합니다."""
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
