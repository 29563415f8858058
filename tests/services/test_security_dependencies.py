# tests/services/test_security_dependencies.py
"""
Тесты зависимостей аутентификации.
"""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from src.core.auth import JWTTokenManager
from src.core.errors import AuthenticationError
from src.services.security import get_bearer_token, get_current_user_id, get_token_manager


def make_request(headers: dict) -> MagicMock:
    request = MagicMock()
    request.headers = headers
    return request


class TestBearerToken:
    def test_extracts_token(self) -> None:
        assert get_bearer_token(make_request({"Authorization": "Bearer abc.def"})) == "abc.def"

    def test_missing(self) -> None:
        with pytest.raises(AuthenticationError, match="Authorization header is required"):
            get_bearer_token(make_request({}))

    @pytest.mark.parametrize("header", ["Bearer", "Bearer ", "Basic abc", "Bearer a b", "bearer abc"])
    def test_bad_format(self, header: str) -> None:
        with pytest.raises(AuthenticationError, match="format must be Bearer"):
            get_bearer_token(make_request({"Authorization": header}))


@pytest.mark.asyncio
async def test_current_user_id_delegates_to_provider() -> None:
    user_id = uuid4()
    provider = AsyncMock()
    provider.resolve_caller = AsyncMock(return_value=user_id)

    assert await get_current_user_id(token="abc", auth=provider) == user_id
    provider.resolve_caller.assert_awaited_once_with("abc")


def test_token_manager_from_settings() -> None:
    manager = get_token_manager()

    assert isinstance(manager, JWTTokenManager)
    token = manager.issue_token(uuid4())
    assert manager.decode(token)["user_id"]
