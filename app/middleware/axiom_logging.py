"""API 요청 로깅 미들웨어 — 표준 로깅 + Axiom 전송.

API request logging middleware.
Every request is logged through the standard "catalog.requests" logger; when
AXIOM_API_TOKEN and AXIOM_DATASET are set, a structured event is also shipped
to Axiom. Sensitive fields (password, token, secret) are masked and multipart
bodies (product images) are never captured.
"""

import json
import logging
import re
import time
from typing import Any

from axiom_py import Client as AxiomClient
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.config import settings

logger = logging.getLogger("catalog.requests")

# 마스킹 대상 필드 패턴 — Fields to mask in request bodies
_SENSITIVE_KEYS = re.compile(
    r"(password|passwd|secret|token|authorization|api_key|apikey|credential)",
    re.IGNORECASE,
)

# 로깅 제외 경로 — Paths excluded from logging
_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}


def _mask_dict(data: Any, depth: int = 0) -> Any:
    """민감 필드 자동 마스킹 — Recursively mask sensitive fields in dicts/lists."""
    if depth > 5:
        return "..."
    if isinstance(data, dict):
        return {
            k: "***" if _SENSITIVE_KEYS.search(str(k)) else _mask_dict(v, depth + 1)
            for k, v in data.items()
        }
    if isinstance(data, list):
        return [_mask_dict(item, depth + 1) for item in data[:20]]
    return data


def _error_message(body: bytes) -> str:
    """ErrorResponse 본문에서 message/details를 추출합니다."""
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return body.decode("utf-8", errors="replace")[:500]
    if not isinstance(data, dict):
        return str(data)[:500]
    message = str(data.get("message", data))
    details = data.get("details")
    if details:
        message = f"{message}: {'; '.join(map(str, details))}"
    return message[:500]


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """모든 API 요청/응답을 로깅하는 미들웨어.

    Middleware that logs all API requests locally and, when configured,
    to Axiom. Captures: method, path, query params, JSON body, status code,
    duration and error message.
    """

    def __init__(self, app: Any) -> None:
        super().__init__(app)
        self._client: AxiomClient | None = None
        self._dataset: str = settings.AXIOM_DATASET

        if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)

    async def _read_json_body(self, request: Request) -> Any:
        # multipart 이미지 업로드는 기록하지 않음 (never capture multipart uploads)
        if request.method not in ("POST", "PUT", "PATCH"):
            return None
        if not request.headers.get("content-type", "").startswith("application/json"):
            return None
        try:
            body_bytes = await request.body()
            return _mask_dict(json.loads(body_bytes)) if body_bytes else None
        except (json.JSONDecodeError, UnicodeDecodeError):
            return "(invalid json body)"

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in _SKIP_PATHS or path.startswith(settings.UPLOADS_URL_PREFIX):
            return await call_next(request)

        start_time = time.time()
        method = request.method
        request_body: Any = await self._read_json_body(request) if self._client else None

        error_detail: str | None = None
        status_code: int = 500
        try:
            response = await call_next(request)
            status_code = response.status_code

            # 에러 응답시 body에서 사유 추출 — Extract error message from error responses
            if status_code >= 400:
                resp_body = b""
                async for chunk in response.body_iterator:
                    resp_body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")
                error_detail = _error_message(resp_body)

                # 소비한 body를 다시 응답으로 반환 — Re-wrap consumed body
                response = Response(
                    content=resp_body,
                    status_code=status_code,
                    headers=dict(response.headers),
                    media_type=response.media_type,
                )
        except Exception as exc:
            error_detail = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            duration_ms = round((time.time() - start_time) * 1000, 2)

            if error_detail and status_code >= 500:
                logger.error("%s %s -> %s (%.2f ms) %s", method, path, status_code, duration_ms, error_detail)
            elif error_detail:
                logger.info("%s %s -> %s (%.2f ms) %s", method, path, status_code, duration_ms, error_detail)
            else:
                logger.info("%s %s -> %s (%.2f ms)", method, path, status_code, duration_ms)

            if self._client is not None:
                log_event: dict[str, Any] = {
                    "service": settings.APP_NAME,
                    "method": method,
                    "path": path,
                    "status_code": status_code,
                    "duration_ms": duration_ms,
                }
                if request.query_params:
                    log_event["query_params"] = _mask_dict(dict(request.query_params))
                if request_body is not None:
                    log_event["request_body"] = request_body
                if error_detail:
                    log_event["error"] = error_detail

                try:
                    self._client.ingest_events(self._dataset, [log_event])
                except Exception:
                    # 로깅 실패가 요청 처리에 영향주지 않도록 — Never break a request on log failure
                    logger.warning("Failed to ship request log to Axiom", exc_info=True)

        return response
