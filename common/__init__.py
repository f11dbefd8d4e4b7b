"""
Common library for reusable infrastructure components.

This package provides generic modules that can be used across
multiple projects:

- database: Async MongoDB connection with Beanie ODM
- auth: Pluggable bearer-token authentication (JWT)
- utils: Standard responses and exceptions
- config: Base settings class
"""

from common.database import MongoDB, BaseDocument
from common.auth import AuthProvider, JWTAuth, create_auth_dependency
from common.utils import (
    success_response,
    error_response,
    APIException,
    BadRequestException,
    UnauthorizedException,
    NotFoundException,
)
from common.config import BaseAppSettings

__all__ = [
    # Database
    "MongoDB",
    "BaseDocument",
    # Auth
    "AuthProvider",
    "JWTAuth",
    "create_auth_dependency",
    # Utils
    "success_response",
    "error_response",
    "APIException",
    "BadRequestException",
    "UnauthorizedException",
    "NotFoundException",
    # Config
    "BaseAppSettings",
]
