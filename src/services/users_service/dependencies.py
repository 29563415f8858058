# src/services/users_service/dependencies.py
"""
Dependency Injection для Users Service.
"""

from fastapi import Depends

from src.core.users import PostgresUserRepository, UserRepository, UserService
from src.infra.database import DatabaseManager


def get_database() -> DatabaseManager:
    return DatabaseManager()


def get_user_repository(db: DatabaseManager = Depends(get_database)) -> UserRepository:
    return PostgresUserRepository(db)


def get_user_service(repo: UserRepository = Depends(get_user_repository)) -> UserService:
    return UserService(repo)
