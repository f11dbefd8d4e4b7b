"""User services."""

from moodlog.services.user.block_service import BlockService

__all__ = ["BlockService"]
