"""Change notifications emitted by the sharing state holder."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from tmslocation.models.sharing import SharingSnapshot


class SharingChangeKind(StrEnum):
    INITIALIZED = "initialized"
    STARTED = "started"
    STOPPED = "stopped"
    LOCATION_UPDATED = "location_updated"


class SharingChange(BaseModel):
    """A mutation of the sharing state, delivered to subscribers."""

    model_config = ConfigDict(frozen=True)

    kind: SharingChangeKind
    snapshot: SharingSnapshot
