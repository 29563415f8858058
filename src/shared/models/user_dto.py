from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class UserDTO(BaseModel):
    """Публичное представление пользователя (без хэша пароля)."""
    id: UUID
    name: str
    email: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=8)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    token: str
