"""
Password 유틸리티 테스트
schemajeli/auth/password.py의 비밀번호 해싱/검증 테스트
"""
from schemajeli.auth.password import get_password_hash, verify_password


class TestGetPasswordHash:
    """get_password_hash 함수 테스트"""

    def test_hash_password(self):
        """비밀번호 해시 생성"""
        password = "secure_password123"

        hashed = get_password_hash(password)

        assert hashed != password
        # bcrypt 해시는 $2b$로 시작
        assert hashed.startswith("$2")

    def test_hash_different_each_time(self):
        """같은 비밀번호도 매번 다른 해시 생성 (salt)"""
        assert get_password_hash("same_password") != get_password_hash("same_password")


class TestVerifyPassword:
    """verify_password 함수 테스트"""

    def test_verify_correct_password(self):
        hashed = get_password_hash("correct_password")

        assert verify_password("correct_password", hashed) is True

    def test_verify_wrong_password(self):
        hashed = get_password_hash("correct_password")

        assert verify_password("wrong_password", hashed) is False

    def test_verify_unicode_password(self):
        """유니코드 비밀번호 검증"""
        hashed = get_password_hash("비밀번호123")

        assert verify_password("비밀번호123", hashed) is True

    def test_long_password_truncated_to_72_bytes(self):
        """72바이트 초과분은 무시 (bcrypt 제한)"""
        hashed = get_password_hash("a" * 100)

        assert verify_password("a" * 100, hashed) is True
        assert verify_password("a" * 72, hashed) is True

    def test_malformed_hash_returns_false(self):
        """잘못된 해시 형식"""
        assert verify_password("anything", "not-a-bcrypt-hash") is False
