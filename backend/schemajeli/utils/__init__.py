"""
유틸리티 모듈
"""
from .errors import (
    AppError,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ErrorCategory,
    NotFoundError,
    UnexpectedError,
    ValidationError,
    classify_error,
    format_error_response,
)

__all__ = [
    "AppError",
    "AuthenticationError",
    "AuthorizationError",
    "ConflictError",
    "ErrorCategory",
    "NotFoundError",
    "UnexpectedError",
    "ValidationError",
    "classify_error",
    "format_error_response",
]
