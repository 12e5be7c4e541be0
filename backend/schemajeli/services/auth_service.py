"""
인증 서비스
로그인, 토큰 발급 및 갱신
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from schemajeli.auth.dependencies import ActorContext
from schemajeli.auth.jwt import REFRESH_TOKEN, create_access_token, create_refresh_token, decode_token
from schemajeli.auth.password import verify_password
from schemajeli.config import Settings, get_settings
from schemajeli.models import AuditAction, EntityType, User
from schemajeli.repositories import UserRepository
from schemajeli.services.audit_service import AuditService
from schemajeli.utils.errors import AuthenticationError
from schemajeli.utils.metrics import record_login_attempt

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


class AuthService:
    """
    인증 서비스

    Usage:
        service = AuthService(db)
        user = service.authenticate("admin", "secret", ctx)
        tokens = service.issue_tokens(user)
    """

    def __init__(self, db: Session, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings or get_settings()
        self.users = UserRepository(db)
        self.audit = AuditService(db, self.settings.audit_log_durability)

    def authenticate(
        self,
        identifier: str,
        password: str,
        context: Optional[ActorContext] = None,
    ) -> User:
        """
        사용자명 또는 이메일과 비밀번호로 인증

        Args:
            identifier: username 또는 email
            password: 평문 비밀번호
            context: 요청 정보 (IP, User-Agent)

        Returns:
            인증된 User (last_login_at 갱신됨)

        Raises:
            AuthenticationError: 사용자 없음/비활성/삭제됨, 비밀번호 불일치
        """
        context = context or ActorContext()
        user = self.users.get_by_identifier(identifier)

        if user is None or not user.is_active:
            logger.warning(f"Login attempt failed: identifier={identifier}, ip={context.ip_address}")
            record_login_attempt(False)
            raise AuthenticationError(INVALID_CREDENTIALS)

        if not verify_password(password, user.password_hash):
            logger.warning(f"Invalid password attempt: user={user.id}, ip={context.ip_address}")
            record_login_attempt(False)
            raise AuthenticationError(INVALID_CREDENTIALS)

        try:
            user.last_login_at = datetime.now(timezone.utc)
            self.users.update(user)
            self.audit.record(
                EntityType.USER,
                user.id,
                AuditAction.UPDATE,
                user_id=user.id,
                changes={"action": "login"},
                ip_address=context.ip_address,
                user_agent=context.user_agent,
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"User logged in: {user.username}")
        record_login_attempt(True)
        return user

    def issue_tokens(self, user: User) -> Dict[str, Any]:
        """Access/Refresh 토큰 발급"""
        claims = {"sub": str(user.id), "username": user.username, "role": user.role}
        return {
            "access_token": create_access_token(claims),
            "refresh_token": create_refresh_token({"sub": str(user.id)}),
            "token_type": "bearer",
            "expires_in": self.settings.access_token_expire_minutes * 60,
        }

    def refresh(self, refresh_token: str) -> Dict[str, Any]:
        """
        Refresh Token으로 새 Access Token 발급

        Raises:
            AuthenticationError: 토큰 무효/만료, 타입 불일치, 사용자 비활성
        """
        payload = decode_token(refresh_token)
        if not payload or payload.get("type") != REFRESH_TOKEN:
            raise AuthenticationError("Invalid refresh token")

        try:
            user_id = UUID(str(payload.get("sub")))
        except ValueError:
            raise AuthenticationError("Invalid refresh token")

        user = self.users.get_by_id(user_id)
        if user is None or not user.is_active:
            raise AuthenticationError("User no longer active")

        logger.info(f"Access token refreshed: {user.username}")
        return {
            "access_token": create_access_token(
                {"sub": str(user.id), "username": user.username, "role": user.role}
            ),
            "token_type": "bearer",
            "expires_in": self.settings.access_token_expire_minutes * 60,
        }
