"""Device position model."""

from __future__ import annotations

import math
from datetime import UTC, datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

# Threshold to distinguish seconds from milliseconds.
_MS_THRESHOLD = 1_000_000_000_000


def parse_timestamp(value: Any) -> datetime:
    """Convert an epoch timestamp (seconds **or** milliseconds) to a UTC datetime.

    Naive datetimes are assumed to be UTC.
    """
    if isinstance(value, str) and not value.strip().replace(".", "", 1).isdigit():
        value = datetime.fromisoformat(value.strip())
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    ts = float(value)
    if math.isnan(ts):
        raise ValueError("timestamp must be a number")
    if ts >= _MS_THRESHOLD:
        ts /= 1000.0
    return datetime.fromtimestamp(ts, tz=UTC)


class LocationFix(BaseModel):
    """One position reported by the device.

    Parameters
    ----------
    latitude : float
        Latitude in degrees.
    longitude : float
        Longitude in degrees.
    accuracy : float
        Horizontal accuracy radius in metres.
    timestamp : datetime
        When the position was observed (UTC).
    speed : float or None
        Ground speed in m/s, when the source reports it.
    heading : float or None
        Direction of travel in degrees from true north.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    latitude: float = Field(..., ge=-90.0, le=90.0, validation_alias=AliasChoices("latitude", "lat"))
    longitude: float = Field(
        ...,
        ge=-180.0,
        le=180.0,
        validation_alias=AliasChoices("longitude", "lng", "lon"),
    )
    accuracy: float = Field(default=0.0, ge=0.0)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    speed: float | None = Field(default=None, ge=0.0)
    heading: float | None = Field(default=None, validation_alias=AliasChoices("heading", "direction", "course"))

    @field_validator("latitude", "longitude", "accuracy")
    @classmethod
    def _reject_nan(cls, value: float) -> float:
        if math.isnan(value):
            raise ValueError("value must be a number")
        return value

    @field_validator("timestamp", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> datetime:
        return parse_timestamp(value)

    @field_validator("heading")
    @classmethod
    def _normalize_heading(cls, value: float | None) -> float | None:
        if value is None or math.isnan(value):
            return None
        return value % 360.0

    def to_payload(self, driver_id: str) -> dict[str, Any]:
        """Body of the location update request."""
        return {
            "driver_id": driver_id,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "accuracy": self.accuracy,
            "timestamp": self.timestamp.isoformat(),
            "speed": self.speed,
            "heading": self.heading,
        }
