"""
JWT 토큰 생성 및 검증
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from uuid import UUID

from jose import JWTError, jwt

from schemajeli.config import settings

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


def _encode(data: Dict[str, Any], token_type: str, expires_delta: timedelta) -> str:
    now = datetime.now(timezone.utc)
    to_encode = {
        key: str(value) if isinstance(value, UUID) else value
        for key, value in data.items()
    }
    to_encode.update({
        "exp": now + expires_delta,
        "type": token_type,
        "iat": now,
    })
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def create_access_token(
    data: Dict[str, Any],
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Access Token 생성

    Args:
        data: 토큰에 포함할 데이터 (sub: user_id, role)
        expires_delta: 만료 시간 (기본: settings.access_token_expire_minutes)

    Returns:
        JWT access token 문자열
    """
    return _encode(
        data,
        ACCESS_TOKEN,
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes),
    )


def create_refresh_token(
    data: Dict[str, Any],
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Refresh Token 생성

    Args:
        data: 토큰에 포함할 데이터 (sub: user_id)
        expires_delta: 만료 시간 (기본: settings.refresh_token_expire_days)

    Returns:
        JWT refresh token 문자열
    """
    return _encode(
        data,
        REFRESH_TOKEN,
        expires_delta or timedelta(days=settings.refresh_token_expire_days),
    )


def decode_token(token: str) -> Optional[Dict[str, Any]]:
    """
    JWT 토큰 디코딩 및 검증 (서명, 만료)

    Returns:
        디코딩된 페이로드 또는 None (검증 실패 시)
    """
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None


def verify_token_type(token: str, expected_type: str) -> bool:
    """토큰 타입 검증 ("access" 또는 "refresh")"""
    payload = decode_token(token)
    if not payload:
        return False

    return payload.get("type") == expected_type
