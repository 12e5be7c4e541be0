"""
비밀번호 해싱 유틸리티
bcrypt 직접 사용
"""
import logging

import bcrypt

logger = logging.getLogger(__name__)

# bcrypt는 72바이트까지만 사용
BCRYPT_MAX_BYTES = 72


def _to_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    평문 비밀번호와 해시된 비밀번호 비교

    Args:
        plain_password: 사용자가 입력한 평문 비밀번호
        hashed_password: DB에 저장된 해시

    Returns:
        일치 여부 (해시 형식이 잘못된 경우 False)
    """
    try:
        return bcrypt.checkpw(_to_bytes(plain_password), hashed_password.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False


def get_password_hash(password: str) -> str:
    """비밀번호 해싱 (bcrypt, 랜덤 salt)"""
    return bcrypt.hashpw(_to_bytes(password), bcrypt.gensalt()).decode("utf-8")
