"""Location sharing snapshot model."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, model_validator


class SharingSnapshot(BaseModel):
    """Point-in-time view of the sharing state.

    ``last_update`` is only kept while ``is_sharing`` is true and is held
    exactly as given (naive or aware).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    is_sharing: bool = False
    last_update: datetime | None = None

    @model_validator(mode="after")
    def _last_update_requires_sharing(self) -> SharingSnapshot:
        if not self.is_sharing and self.last_update is not None:
            raise ValueError("last_update must be None while sharing is off")
        return self
