"""
SchemaJeli Backend - FastAPI Main Application
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
from starlette.exceptions import HTTPException as StarletteHTTPException

from schemajeli.config import Settings, get_settings
from schemajeli.database import Store
from schemajeli.utils.errors import (
    AppError,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
    classify_error,
    format_error_response,
)

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

# HTTPException 상태 코드 -> AppError
_HTTP_ERRORS = {
    400: ValidationError,
    401: AuthenticationError,
    403: AuthorizationError,
    404: NotFoundError,
    409: ConflictError,
}


def configure_logging(settings: Settings) -> None:
    """로깅 설정 (json 또는 text 포맷)"""
    if settings.log_format == "json":
        logging.basicConfig(
            level=settings.log_level,
            format='{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
        )
    else:
        logging.basicConfig(
            level=settings.log_level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )


def init_sentry(settings: Settings) -> None:
    """Sentry 초기화 (DSN이 설정된 경우에만)"""
    if not settings.sentry_dsn:
        return

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        release=f"schemajeli@{settings.app_version}",
        traces_sample_rate=settings.sentry_traces_sample_rate,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
            LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
        ],
        # PII 필터링
        send_default_pii=False,
        attach_stacktrace=True,
    )
    logger.info("Sentry initialized")


def build_store(settings: Settings) -> Store:
    return Store(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        echo=settings.database_echo,
    )


def _error_response(request: Request, error: AppError) -> JSONResponse:
    settings: Settings = request.app.state.settings
    return JSONResponse(
        status_code=error.http_status,
        content=format_error_response(error, include_technical=not settings.is_production),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """전역 예외 핸들러 등록"""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        """애플리케이션 에러 - 정의된 상태 코드와 메시지 그대로 반환"""
        if exc.http_status >= 500:
            logger.error(f"Application error on {request.method} {request.url.path}: {exc.message}")
        return _error_response(request, exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """HTTP 예외 핸들러 (라우팅 404, 405 등)"""
        error_class = _HTTP_ERRORS.get(exc.status_code)
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        if error_class is None:
            error = AppError(message)
            error.http_status = exc.status_code
        else:
            error = error_class(message)
        return _error_response(request, error)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Pydantic 유효성 검사 에러 핸들러 (400)"""
        details = []
        for error in exc.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            details.append(f"{loc}: {error['msg']}")
        return _error_response(request, ValidationError("Invalid request data", details=details))

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """일반 예외 핸들러 - 예상치 못한 에러 처리"""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return _error_response(request, classify_error(exc))


def register_routers(app: FastAPI) -> None:
    """API 라우터 등록"""
    from schemajeli.routers import (
        abbreviations,
        audit,
        auth,
        databases,
        elements,
        search,
        servers,
        tables,
        users,
    )

    app.include_router(auth.router, prefix=f"{API_PREFIX}/auth", tags=["auth"])
    app.include_router(servers.router, prefix=f"{API_PREFIX}/servers", tags=["servers"])
    app.include_router(databases.router, prefix=f"{API_PREFIX}/databases", tags=["databases"])
    app.include_router(tables.router, prefix=f"{API_PREFIX}/tables", tags=["tables"])
    app.include_router(elements.router, prefix=f"{API_PREFIX}/elements", tags=["elements"])
    app.include_router(
        abbreviations.router, prefix=f"{API_PREFIX}/abbreviations", tags=["abbreviations"]
    )
    app.include_router(users.router, prefix=f"{API_PREFIX}/users", tags=["users"])
    app.include_router(audit.router, prefix=f"{API_PREFIX}/audit", tags=["audit"])
    app.include_router(search.router, prefix=f"{API_PREFIX}/search", tags=["search"])


def create_app(settings: Optional[Settings] = None, store: Optional[Store] = None) -> FastAPI:
    """
    FastAPI 앱 생성

    Args:
        settings: 앱 설정 (기본: 환경변수 기반 전역 설정)
        store: 저장소 핸들 (기본: settings.database_url로 생성, lifespan에서 connect)

    Returns:
        FastAPI 앱
    """
    settings = settings or get_settings()
    store = store or build_store(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        앱 시작/종료 시 실행되는 이벤트
        - 시작: Store 연결, 스키마 마이그레이션, Admin 계정 시딩
        - 종료: Store 연결 해제
        """
        logger.info(f"Starting {settings.app_name} Backend...")
        store.connect()

        from schemajeli.init_db import init_database

        init_database(store, settings)
        logger.info("Database initialized successfully")

        yield

        logger.info(f"Shutting down {settings.app_name} Backend...")
        store.disconnect()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Database metadata catalog API",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store

    # ========== 미들웨어 설정 (등록 역순으로 실행됨) ==========

    if settings.metrics_enabled:
        from schemajeli.middleware import MetricsMiddleware

        app.add_middleware(MetricsMiddleware)
        app.mount("/metrics", make_asgi_app())
        logger.info("Metrics middleware enabled")

    # CORS는 마지막에 추가 → 가장 먼저 실행되어 에러 응답에도 CORS 헤더가 포함됨
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    register_routers(app)

    @app.get("/")
    async def root():
        """루트 엔드포인트"""
        return {
            "app": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
            "status": "ok",
        }

    @app.get("/health")
    async def health_check():
        """헬스 체크 엔드포인트"""
        db_status = "ok" if store.check_connection() else "error"
        return {
            "status": "healthy" if db_status == "ok" else "unhealthy",
            "checks": {"database": db_status},
        }

    return app


def create_default_app() -> FastAPI:
    """uvicorn 엔트리포인트 (uvicorn schemajeli.main:create_default_app --factory)"""
    settings = get_settings()
    configure_logging(settings)
    init_sentry(settings)
    return create_app(settings)
