"""
Pydantic Schemas (Request/Response 모델)
"""
from .abbreviation import AbbreviationCreate, AbbreviationResponse, AbbreviationUpdate
from .audit import AuditLogResponse
from .auth import (
    AccessTokenResponse,
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    RefreshTokenRequest,
    TokenResponse,
)
from .database import DatabaseCreate, DatabaseResponse, DatabaseUpdate
from .element import ElementCreate, ElementResponse, ElementUpdate
from .search import SearchIndexResponse
from .server import ServerCreate, ServerResponse, ServerUpdate
from .table import TableCreate, TableResponse, TableUpdate
from .user import UserCreate, UserResponse, UserUpdate

__all__ = [
    # Catalog
    "AbbreviationCreate",
    "AbbreviationResponse",
    "AbbreviationUpdate",
    "DatabaseCreate",
    "DatabaseResponse",
    "DatabaseUpdate",
    "ElementCreate",
    "ElementResponse",
    "ElementUpdate",
    "ServerCreate",
    "ServerResponse",
    "ServerUpdate",
    "TableCreate",
    "TableResponse",
    "TableUpdate",
    # Users / Auth
    "AccessTokenResponse",
    "ChangePasswordRequest",
    "LoginRequest",
    "LoginResponse",
    "RefreshTokenRequest",
    "TokenResponse",
    "UserCreate",
    "UserResponse",
    "UserUpdate",
    # Audit / Search
    "AuditLogResponse",
    "SearchIndexResponse",
]
