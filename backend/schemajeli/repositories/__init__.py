# -*- coding: utf-8 -*-
"""
Repositories
데이터 접근 계층
"""
from .base_repository import BaseRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
]
