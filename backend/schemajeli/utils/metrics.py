# ===================================================
# SchemaJeli - Prometheus Custom Metrics
# HTTP, Auth, Catalog mutation, Side-effect Metrics
# ===================================================

from prometheus_client import Counter, Gauge, Histogram, Summary

# ========== HTTP Request Metrics ==========

# 총 HTTP 요청 수
http_requests_total = Counter(
    "schemajeli_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"]
)

# HTTP 요청 응답 시간
http_request_duration_seconds = Histogram(
    "schemajeli_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0]
)

# 처리 중인 요청 수
http_requests_in_progress = Gauge(
    "schemajeli_http_requests_in_progress",
    "Current number of in-flight HTTP requests"
)

# 응답 크기
http_response_size_bytes = Summary(
    "schemajeli_http_response_size_bytes",
    "HTTP response body size in bytes",
    ["method", "endpoint"]
)


# ========== Auth Metrics ==========

# 로그인 시도 수
auth_login_attempts_total = Counter(
    "schemajeli_auth_login_attempts_total",
    "Total login attempts",
    ["status"]  # status: success, failure
)


# ========== Catalog Metrics ==========

# 카탈로그 변경 작업 수
catalog_mutations_total = Counter(
    "schemajeli_catalog_mutations_total",
    "Total committed catalog mutations",
    ["entity_type", "action"]  # action: CREATE, UPDATE, DELETE
)

# best_effort 부수 효과 실패 수
side_effect_failures_total = Counter(
    "schemajeli_side_effect_failures_total",
    "Best-effort side effects that failed and were rolled back to their savepoint",
    ["kind"]  # kind: audit, search index
)


# ========== Helper Functions ==========


def record_login_attempt(success: bool) -> None:
    auth_login_attempts_total.labels(status="success" if success else "failure").inc()


def record_mutation(entity_type: str, action: str) -> None:
    """커밋된 변경 작업 기록"""
    catalog_mutations_total.labels(entity_type=entity_type, action=action).inc()


def record_side_effect_failure(label: str) -> None:
    """라벨의 첫 단어(audit, search ...)를 kind로 사용"""
    kind = label.split(" ", 1)[0] if label else "unknown"
    side_effect_failures_total.labels(kind=kind).inc()
