# ===================================================
# SchemaJeli - Metrics Collection Middleware
# Prometheus 메트릭 자동 수집
# ===================================================

import time
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from schemajeli.utils.metrics import (
    http_request_duration_seconds,
    http_requests_in_progress,
    http_requests_total,
    http_response_size_bytes,
)


# 메트릭 수집 제외 경로
EXCLUDE_PATHS = {
    "/metrics",
    "/health",
    "/docs",
    "/redoc",
    "/openapi.json",
}


def normalize_endpoint(path: str) -> str:
    """
    엔드포인트 정규화 (레이블 카디널리티 제어)

    예: /api/v1/servers/8f14e45f-ceea-4e6b-9d2a-6c1a2b3c4d5e/databases -> /api/v1/servers/{id}/databases
    """
    parts = []
    for part in path.split("/"):
        if not part:
            continue
        # UUID (8-4-4-4-12) 또는 숫자 ID
        if (len(part) == 36 and part.count("-") == 4) or part.isdigit():
            parts.append("{id}")
        else:
            parts.append(part)

    return "/" + "/".join(parts) if parts else "/"


class MetricsMiddleware(BaseHTTPMiddleware):
    """
    HTTP 요청/응답 메트릭 수집 미들웨어

    수집 항목:
    - 요청 수 (method, endpoint, status_code)
    - 응답 시간 (method, endpoint)
    - 처리 중인 요청 수
    - 응답 크기
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        if path in EXCLUDE_PATHS or path.startswith("/metrics"):
            return await call_next(request)

        endpoint = normalize_endpoint(path)
        method = request.method

        http_requests_in_progress.inc()
        start_time = time.perf_counter()
        status_code = "500"

        try:
            response = await call_next(request)
            status_code = str(response.status_code)

            response_size = response.headers.get("content-length")
            if response_size:
                http_response_size_bytes.labels(
                    method=method, endpoint=endpoint
                ).observe(int(response_size))

            return response

        finally:
            http_request_duration_seconds.labels(
                method=method, endpoint=endpoint
            ).observe(time.perf_counter() - start_time)
            http_requests_total.labels(
                method=method, endpoint=endpoint, status_code=status_code
            ).inc()
            http_requests_in_progress.dec()
