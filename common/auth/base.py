"""
Abstract authentication provider interface.

Defines the contract that token providers must implement. Account
management (registration, passwords, sessions) lives in a separate
service; this layer only issues and verifies bearer tokens.

Example:
    from common.auth import AuthProvider, JWTAuth

    def get_auth_provider(settings) -> AuthProvider:
        return JWTAuth(secret=settings.JWT_SECRET)
"""

from abc import ABC, abstractmethod
from typing import Dict, Any


class AuthProvider(ABC):
    """
    Abstract authentication provider.

    All methods are async to support both sync and async implementations.
    """

    @abstractmethod
    async def create_token(
        self,
        user_id: str,
        **claims: Any,
    ) -> str:
        """
        Create an authentication token for a user.

        Args:
            user_id: The user's ID (stored in the `sub` claim)
            **claims: Additional claims to include in the token

        Returns:
            Signed token string
        """
        pass

    @abstractmethod
    async def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode an authentication token.

        Args:
            token: The token to verify

        Returns:
            Dictionary of token claims (at minimum: sub)

        Raises:
            ValueError: If token is invalid or expired
        """
        pass
