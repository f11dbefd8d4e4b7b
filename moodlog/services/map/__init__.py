"""Map services."""

from moodlog.services.map.map_service import MapService, to_map_item

__all__ = ["MapService", "to_map_item"]
