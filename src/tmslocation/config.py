"""Client configuration for tmslocation."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from tmslocation._constants import (
    BASE_URL,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_UPDATE_INTERVAL,
    LOCATION_ENDPOINT,
    SHARING_STORAGE_KEY,
)
from tmslocation.exceptions import TmsConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_float(name: str, value: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise TmsConfigError(f"{name} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class TmsConfig:
    """Client configuration.

    Parameters
    ----------
    base_url : str
        Base URL of the TMS web application.
    api_token : str or None
        Bearer token sent with location updates.  Obtaining it is the
        job of the application's auth layer.
    storage_path : str or None
        JSON file used to persist the sharing flag.  ``None`` keeps the
        flag in memory only.
    storage_key : str
        Key the sharing flag is stored under.
    location_endpoint : str
        Path that location updates are POSTed to.
    update_interval : float
        Seconds between location emissions while sharing is on.
    request_timeout : float
        Total timeout in seconds for one location POST.
    api_trace_enabled : bool
        Log redacted request/response bodies at DEBUG level.
    """

    base_url: str = BASE_URL
    api_token: str | None = None
    storage_path: str | None = None
    storage_key: str = SHARING_STORAGE_KEY
    location_endpoint: str = LOCATION_ENDPOINT
    update_interval: float = DEFAULT_UPDATE_INTERVAL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    api_trace_enabled: bool = False

    def __post_init__(self) -> None:
        if self.update_interval <= 0:
            raise TmsConfigError(f"update_interval must be positive, got {self.update_interval}")
        if self.request_timeout <= 0:
            raise TmsConfigError(f"request_timeout must be positive, got {self.request_timeout}")
        if not self.storage_key:
            raise TmsConfigError("storage_key must be non-empty")

    @classmethod
    def from_env(cls, **overrides: Any) -> TmsConfig:
        """Create configuration from ``TMS_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "TMS_BASE_URL": "base_url",
            "TMS_API_TOKEN": "api_token",
            "TMS_STORAGE_PATH": "storage_path",
            "TMS_STORAGE_KEY": "storage_key",
            "TMS_LOCATION_ENDPOINT": "location_endpoint",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        interval_env = env.get("TMS_UPDATE_INTERVAL")
        if interval_env is not None and "update_interval" not in overrides:
            config_kwargs["update_interval"] = _env_float("TMS_UPDATE_INTERVAL", interval_env)

        timeout_env = env.get("TMS_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            config_kwargs["request_timeout"] = _env_float("TMS_REQUEST_TIMEOUT", timeout_env)

        if "api_trace_enabled" not in overrides:
            config_kwargs["api_trace_enabled"] = _env_bool(
                env.get("TMS_API_TRACE_ENABLED"),
                False,
            )

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
