"""
FastAPI 인증 의존성
Depends(get_current_user) 형태로 사용
JWT Bearer 토큰 인증
"""
import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from schemajeli.database import get_db
from schemajeli.models import User
from schemajeli.utils.errors import AuthenticationError, AuthorizationError
from .jwt import ACCESS_TOKEN, decode_token

logger = logging.getLogger(__name__)

# Bearer 토큰 스키마 (자동 401 대신 에러 엔벨로프 사용)
security = HTTPBearer(auto_error=False)


@dataclass
class ActorContext:
    """변경 작업의 수행자 정보 (감사 로그 기록용)"""
    user_id: Optional[UUID] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


def user_from_token(token: str, db: Session) -> User:
    """
    Access Token으로 사용자 조회

    Raises:
        AuthenticationError: 토큰 무효/만료, 타입 불일치, 사용자 없음/삭제됨
        AuthorizationError: 비활성 사용자
    """
    payload = decode_token(token)
    if not payload:
        raise AuthenticationError("Invalid or expired token")

    # access token만 허용
    if payload.get("type") != ACCESS_TOKEN:
        raise AuthenticationError("Invalid token type")

    subject = payload.get("sub")
    if not subject:
        raise AuthenticationError("Invalid token payload")

    try:
        user_id = UUID(str(subject))
    except ValueError:
        raise AuthenticationError("Invalid token payload")

    user = db.get(User, user_id)
    if user is None or user.deleted_at is not None:
        raise AuthenticationError("User not found")

    if not user.is_active:
        logger.warning(f"Inactive user attempted access: {user.username}")
        raise AuthorizationError("User account is inactive")

    return user


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """
    현재 인증된 사용자 조회 (Authorization: Bearer <token>)

    Returns:
        User 객체

    Raises:
        AuthenticationError 401: 인증 정보 없음/무효
        AuthorizationError 403: 비활성 사용자
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Authentication required")

    return user_from_token(credentials.credentials, db)


def client_ip(request: Request) -> Optional[str]:
    """클라이언트 IP (X-Forwarded-For 우선)"""
    forwarded = request.headers.get("X-Forwarded-For", "").split(",")[0].strip()
    if forwarded:
        return forwarded
    return request.client.host if request.client else None


def request_context(request: Request, user: Optional[User] = None) -> ActorContext:
    """요청과 사용자로부터 ActorContext 생성"""
    return ActorContext(
        user_id=user.id if user is not None else None,
        ip_address=client_ip(request),
        user_agent=request.headers.get("User-Agent"),
    )
