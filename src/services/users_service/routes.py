from uuid import UUID

from fastapi import APIRouter, Depends, status

from src.core.auth import AuthProvider, JWTTokenManager
from src.core.users import UserService
from src.services.security import (
    get_auth_provider,
    get_bearer_token,
    get_current_user_id,
    get_token_manager,
)
from src.services.users_service.dependencies import get_user_service
from src.shared.models.common import MessageResponse
from src.shared.models.user_dto import LoginRequest, RegisterRequest, TokenResponse, UserDTO

router = APIRouter(tags=["Users"])


@router.post("/register", response_model=UserDTO, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    service: UserService = Depends(get_user_service),
):
    user = await service.register(request.name, request.email, request.password)
    return UserDTO.model_validate(user)


@router.post("/login", response_model=TokenResponse)
async def login(
    request: LoginRequest,
    service: UserService = Depends(get_user_service),
    tokens: JWTTokenManager = Depends(get_token_manager),
):
    user = await service.authenticate(request.email, request.password)
    return TokenResponse(token=tokens.issue_token(user.id))


@router.post("/logout", response_model=MessageResponse)
async def logout(
    user_id: UUID = Depends(get_current_user_id),
    token: str = Depends(get_bearer_token),
    auth: AuthProvider = Depends(get_auth_provider),
):
    """Отзывает текущий токен до истечения его срока."""
    await auth.revoke(token)
    return MessageResponse(message="Logout successful")


@router.get("/me", response_model=UserDTO)
async def get_me(
    user_id: UUID = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service),
):
    user = await service.get_user(user_id)
    return UserDTO.model_validate(user)
