"""
데이터베이스 초기화 및 시드 데이터 생성
서버 시작 시 호출되어 기본 데이터 설정

Alembic 마이그레이션을 실행하여 스키마를 최신 상태로 유지
"""
import logging
from pathlib import Path
from typing import Optional

from alembic import command
from alembic.config import Config
from sqlalchemy.orm import Session

from schemajeli.config import Settings, get_settings
from schemajeli.database import Store
from schemajeli.models import User
from schemajeli.repositories import UserRepository
from schemajeli.services.rbac_service import Role
from schemajeli.services.user_service import UserService

logger = logging.getLogger(__name__)

# alembic.ini 위치 (backend 디렉토리 기준)
ALEMBIC_INI_PATH = Path(__file__).resolve().parent.parent / "alembic.ini"


def init_database(store: Store, settings: Optional[Settings] = None) -> None:
    """
    데이터베이스 초기화

    1. Alembic 마이그레이션 실행 (또는 SQLAlchemy 테이블 생성)
    2. 관리자 계정 생성 (시딩)
    """
    settings = settings or get_settings()
    logger.info("Initializing database...")

    if settings.use_alembic_migration and ALEMBIC_INI_PATH.exists():
        run_alembic_migrations(settings.database_url)
    else:
        store.create_all()
        logger.info("Database tables verified/created (SQLAlchemy create_all)")

    with store.session() as db:
        ensure_admin_user(db, settings)

    logger.info("Database initialization completed")


def run_alembic_migrations(database_url: str) -> None:
    """
    Alembic 마이그레이션을 프로그래밍 방식으로 실행 (upgrade head)
    """
    alembic_cfg = Config(str(ALEMBIC_INI_PATH))
    alembic_cfg.set_main_option("script_location", str(ALEMBIC_INI_PATH.parent / "alembic"))
    # configparser 보간 문자(%) 이스케이프
    alembic_cfg.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
    alembic_cfg.attributes["keep_app_logging"] = True

    logger.info("Running Alembic migrations...")
    command.upgrade(alembic_cfg, "head")
    logger.info("Database migrations completed successfully")


def ensure_admin_user(db: Session, settings: Settings) -> User:
    """
    관리자 계정 확인 및 생성

    Returns:
        관리자 User 객체
    """
    users = UserRepository(db)
    admin = users.get_by_username(settings.admin_username)
    if admin:
        logger.debug(f"Admin user already exists: {admin.username}")
        return admin

    admin = UserService(db, settings).create(
        {
            "username": settings.admin_username,
            "email": settings.admin_email,
            "full_name": "Administrator",
            "password": settings.admin_password,
            "role": Role.ADMIN.value,
        }
    )

    logger.info(f"Admin user created: {admin.username}")
    if settings.is_production and settings.admin_password == Settings.model_fields["admin_password"].default:
        logger.warning(
            "Default admin password is set. "
            "Please change it in production! (ADMIN_PASSWORD env var)"
        )

    return admin
