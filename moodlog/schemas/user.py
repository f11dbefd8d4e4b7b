"""
Pydantic models for block management response validation.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class BlockedUser(BaseModel):
    id: str = Field(..., alias="_id")
    username: Optional[str] = None


class BlockedUsersData(BaseModel):
    """Response body for GET /api/users/me/blocked"""
    blockedUsers: List[BlockedUser]
    count: int
