"""
Database 연결 및 세션 관리
SQLAlchemy Store 핸들 - 엔트리 포인트가 connect/disconnect 수명주기를 소유
"""
import logging
from contextlib import contextmanager
from typing import Generator, Optional

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """SQLAlchemy Base 클래스"""


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url


class Store:
    """
    백엔드 저장소 핸들

    프로세스 전역 클라이언트 대신 명시적으로 생성되어 서비스에 주입된다.

    Usage:
        store = Store(settings.database_url)
        store.connect()
        with store.session() as db:
            ...
        store.disconnect()
    """

    def __init__(
        self,
        url: str,
        pool_size: int = 20,
        max_overflow: int = 40,
        echo: bool = False,
    ):
        self.url = url
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.echo = echo
        self.engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def is_connected(self) -> bool:
        return self.engine is not None

    def connect(self) -> "Store":
        """엔진 및 세션 팩토리 생성 (이미 연결된 경우 무시)"""
        if self.engine is not None:
            return self

        if _is_sqlite(self.url):
            kwargs = {"connect_args": {"check_same_thread": False}}
            if _is_memory_sqlite(self.url):
                # 인메모리 SQLite는 단일 연결을 공유해야 데이터가 유지됨
                kwargs["poolclass"] = StaticPool
            engine = create_engine(self.url, echo=self.echo, **kwargs)
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)
            # pysqlite의 암묵적 트랜잭션 대신 직접 BEGIN (SAVEPOINT 지원)
            event.listen(engine, "begin", _sqlite_begin)
        else:
            engine = create_engine(
                self.url,
                pool_size=self.pool_size,
                max_overflow=self.max_overflow,
                pool_pre_ping=True,  # 연결 유효성 체크
                echo=self.echo,
            )

        self.engine = engine
        self._session_factory = sessionmaker(
            bind=engine,
            autoflush=False,
            expire_on_commit=False,
        )
        logger.info(f"Store connected: {engine.url.render_as_string(hide_password=True)}")
        return self

    def disconnect(self) -> None:
        """엔진 및 커넥션 풀 정리"""
        if self.engine is None:
            return
        self.engine.dispose()
        self.engine = None
        self._session_factory = None
        logger.info("Store disconnected")

    def new_session(self) -> Session:
        if self._session_factory is None:
            raise RuntimeError("Store is not connected")
        return self._session_factory()

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Context Manager로 사용할 DB 세션 제공

        Usage:
            with store.session() as db:
                servers = db.query(Server).all()
        """
        db = self.new_session()
        try:
            yield db
        finally:
            db.close()

    def create_all(self) -> None:
        """
        테이블이 없으면 생성 (개발/테스트 환경에서만 사용)

        Production에서는 Alembic 마이그레이션 사용
        """
        # 모든 모델을 import해야 Base.metadata에 등록됨
        from schemajeli import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def drop_all(self) -> None:
        from schemajeli import models  # noqa: F401

        Base.metadata.drop_all(bind=self.engine)

    def check_connection(self) -> bool:
        """
        데이터베이스 연결 상태 확인

        Returns:
            연결 성공 시 True, 실패 시 False
        """
        if self.engine is None:
            return False
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database connection failed: {e}")
            return False


def _enable_sqlite_foreign_keys(dbapi_conn, connection_record):
    """SQLite 연결 시 외래키 제약 활성화, 드라이버의 암묵적 트랜잭션 비활성화"""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()
    dbapi_conn.isolation_level = None


def _sqlite_begin(conn):
    conn.exec_driver_sql("BEGIN")


def get_store(request: Request) -> Store:
    """FastAPI 앱에 등록된 Store 조회"""
    return request.app.state.store


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    FastAPI Dependency로 사용할 DB 세션 제공

    Usage:
        @router.get("/items/")
        def read_items(db: Session = Depends(get_db)):
            return db.query(Item).all()
    """
    with get_store(request).session() as db:
        yield db
