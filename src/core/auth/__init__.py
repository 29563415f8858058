from src.core.auth.revocation import TokenRevocationStore
from src.core.auth.tokens import AuthProvider, JWTAuthProvider, JWTTokenManager

__all__ = [
    "AuthProvider",
    "JWTAuthProvider",
    "JWTTokenManager",
    "TokenRevocationStore",
]
