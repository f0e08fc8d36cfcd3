"""Data models for tmslocation."""

from tmslocation.models.location import LocationFix, parse_timestamp
from tmslocation.models.sharing import SharingSnapshot

__all__ = [
    "LocationFix",
    "SharingSnapshot",
    "parse_timestamp",
]
