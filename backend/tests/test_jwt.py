"""
JWT 토큰 생성 및 검증 테스트
schemajeli/auth/jwt.py 테스트
"""
from datetime import datetime, timedelta, timezone
from uuid import uuid4

from jose import jwt

from schemajeli.auth.jwt import (
    ACCESS_TOKEN,
    REFRESH_TOKEN,
    create_access_token,
    create_refresh_token,
    decode_token,
    verify_token_type,
)
from schemajeli.config import settings


# ========== create_access_token 테스트 ==========


class TestCreateAccessToken:
    """create_access_token 함수 테스트"""

    def test_token_contains_data(self):
        """토큰에 데이터 포함"""
        token = create_access_token({"sub": "user-123", "username": "kim", "role": "ADMIN"})

        payload = decode_token(token)
        assert payload is not None
        assert payload["sub"] == "user-123"
        assert payload["username"] == "kim"
        assert payload["role"] == "ADMIN"

    def test_token_type_is_access(self):
        """토큰 타입이 access"""
        payload = decode_token(create_access_token({"sub": "user-123"}))

        assert payload["type"] == ACCESS_TOKEN
        assert "exp" in payload
        assert "iat" in payload

    def test_token_with_custom_expiry(self):
        """사용자 지정 만료 시간"""
        token = create_access_token({"sub": "user-123"}, expires_delta=timedelta(hours=2))

        payload = decode_token(token)
        exp = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        time_diff = exp - datetime.now(timezone.utc)
        assert timedelta(hours=1, minutes=59) < time_diff < timedelta(hours=2, minutes=1)

    def test_default_expiry_uses_settings(self):
        """기본 만료 시간 (access_token_expire_minutes)"""
        payload = decode_token(create_access_token({"sub": "user-123"}))

        exp = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        time_diff = exp - datetime.now(timezone.utc)
        assert time_diff < timedelta(minutes=settings.access_token_expire_minutes + 1)

    def test_uuid_values_serialized(self):
        """UUID 값은 문자열로 저장"""
        user_id = uuid4()
        payload = decode_token(create_access_token({"sub": user_id}))

        assert payload["sub"] == str(user_id)


# ========== create_refresh_token 테스트 ==========


class TestCreateRefreshToken:
    """create_refresh_token 함수 테스트"""

    def test_token_type_is_refresh(self):
        payload = decode_token(create_refresh_token({"sub": "user-123"}))

        assert payload["type"] == REFRESH_TOKEN

    def test_refresh_outlives_access(self):
        """refresh 토큰은 access 토큰보다 오래 유효"""
        access = decode_token(create_access_token({"sub": "u"}))
        refresh = decode_token(create_refresh_token({"sub": "u"}))

        assert refresh["exp"] > access["exp"]


# ========== decode_token / verify_token_type 테스트 ==========


class TestDecodeToken:
    """decode_token 함수 테스트"""

    def test_invalid_token_returns_none(self):
        assert decode_token("not-a-jwt") is None

    def test_expired_token_returns_none(self):
        """만료된 토큰"""
        token = create_access_token({"sub": "user-123"}, expires_delta=timedelta(seconds=-10))

        assert decode_token(token) is None

    def test_wrong_signature_returns_none(self):
        """다른 키로 서명된 토큰"""
        token = jwt.encode({"sub": "user-123", "type": "access"}, "other-secret", algorithm="HS256")

        assert decode_token(token) is None


class TestVerifyTokenType:
    """verify_token_type 함수 테스트"""

    def test_matching_type(self):
        token = create_access_token({"sub": "u"})

        assert verify_token_type(token, ACCESS_TOKEN) is True
        assert verify_token_type(token, REFRESH_TOKEN) is False

    def test_invalid_token(self):
        assert verify_token_type("garbage", ACCESS_TOKEN) is False
