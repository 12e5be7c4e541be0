"""
인증 모듈
JWT 기반 인증 시스템
"""
from .password import verify_password, get_password_hash
from .jwt import create_access_token, create_refresh_token, decode_token
from .dependencies import ActorContext, get_current_user, request_context

__all__ = [
    "verify_password",
    "get_password_hash",
    "create_access_token",
    "create_refresh_token",
    "decode_token",
    "ActorContext",
    "get_current_user",
    "request_context",
]
