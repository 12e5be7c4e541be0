"""
SchemaJeli - 에러 유틸리티
에러 분류 및 API 에러 응답 포맷
"""
import logging
from enum import Enum
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError, OperationalError

logger = logging.getLogger(__name__)


class ErrorCategory(str, Enum):
    """에러 카테고리"""
    VALIDATION = "validation"        # 입력 검증 실패
    AUTHENTICATION = "auth"          # 인증 실패
    AUTHORIZATION = "permission"     # 권한 부족
    NOT_FOUND = "not_found"          # 리소스 없음
    CONFLICT = "conflict"            # 충돌 (중복, 하위 엔티티 존재)
    INTERNAL = "internal"            # 내부 서버 오류


class AppError(Exception):
    """애플리케이션 에러 기본 클래스"""

    http_status: int = 500
    category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __repr__(self):
        return f"<{type(self).__name__}(status={self.http_status}, message='{self.message}')>"


class ValidationError(AppError):
    """입력값 누락/형식 오류"""
    http_status = 400
    category = ErrorCategory.VALIDATION


class AuthenticationError(AppError):
    """인증 정보 없음/무효/만료"""
    http_status = 401
    category = ErrorCategory.AUTHENTICATION


class AuthorizationError(AppError):
    """역할/권한 부족"""
    http_status = 403
    category = ErrorCategory.AUTHORIZATION


class NotFoundError(AppError):
    """엔티티 또는 상위 엔티티 없음 (삭제 포함)"""
    http_status = 404
    category = ErrorCategory.NOT_FOUND


class ConflictError(AppError):
    """이름 중복 또는 활성 하위 엔티티로 인한 삭제 차단"""
    http_status = 409
    category = ErrorCategory.CONFLICT


class UnexpectedError(AppError):
    """그 외 모든 오류"""
    http_status = 500
    category = ErrorCategory.INTERNAL


def raise_not_found(resource: str, resource_id: Optional[str] = None):
    """NotFoundError 발생 헬퍼"""
    message = f"{resource} not found"
    raise NotFoundError(message, details={"id": resource_id} if resource_id else None)


def classify_error(exception: Exception) -> AppError:
    """
    예외를 AppError로 분류

    Args:
        exception: 발생한 예외

    Returns:
        AppError (이미 AppError이면 그대로 반환)
    """
    if isinstance(exception, AppError):
        return exception

    # DB 제약 위반: 유니크 인덱스는 409, 외래키/CHECK 위반은 400
    if isinstance(exception, IntegrityError):
        details = str(exception.orig) if exception.orig else str(exception)
        if is_unique_violation(exception):
            return ConflictError("Resource conflicts with an existing record", details=details)
        return ValidationError("Request violates a data constraint", details=details)

    error_str = str(exception).lower()

    # DB 연결 에러
    if isinstance(exception, OperationalError) or (
        "connection" in error_str and ("refused" in error_str or "failed" in error_str)
    ):
        return UnexpectedError("Database connection failed", details=str(exception))

    # 기본 에러
    return UnexpectedError("Internal server error", details=str(exception))


def format_error_response(
    error: AppError,
    include_technical: bool = False,
) -> Dict[str, Any]:
    """
    에러를 API 응답 형식으로 포맷

    Args:
        error: AppError
        include_technical: 기술적 세부사항 포함 여부 (non-production)

    Returns:
        {"status": "error", "message": ...} 형태의 딕셔너리
    """
    response: Dict[str, Any] = {
        "status": "error",
        "message": error.message,
    }

    if include_technical:
        response["category"] = error.category.value
        if error.details is not None:
            response["details"] = error.details

    return response


def is_unique_violation(exception: IntegrityError) -> bool:
    """유니크 제약 위반 여부 (PostgreSQL: duplicate key, SQLite: UNIQUE constraint failed)"""
    text = str(exception.orig if exception.orig is not None else exception).lower()
    return "duplicate key" in text or "unique constraint" in text
