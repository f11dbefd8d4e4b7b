"""
Request value validation.

Runs before any store access so malformed input never reaches a query.
"""

from bson import ObjectId

from common.utils import BadRequestException


def parse_object_id(value: str, field: str = "id") -> ObjectId:
    """
    Parse a hex string into an ObjectId.

    Raises:
        BadRequestException: INVALID_ID when the value is not a valid ObjectId
    """
    if not value or not ObjectId.is_valid(value):
        raise BadRequestException(f"Invalid {field} format", code="INVALID_ID")
    return ObjectId(value)


def parse_coordinates(lat: float, lng: float) -> tuple:
    """
    Check a latitude/longitude pair.

    Returns:
        (lat, lng) as floats

    Raises:
        BadRequestException: INVALID_COORDINATES when either value is out of range
    """
    if not (-90 <= lat <= 90 and -180 <= lng <= 180):
        raise BadRequestException("Invalid coordinates", code="INVALID_COORDINATES")
    return float(lat), float(lng)
