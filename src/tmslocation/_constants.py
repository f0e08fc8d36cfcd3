"""Internal constants shared across the library."""

BASE_URL = "http://localhost:3000"
USER_AGENT = "tmslocation/1"

#: Storage key holding the persisted sharing flag.
SHARING_STORAGE_KEY = "tms-location-sharing"

#: Sentinel strings written under :data:`SHARING_STORAGE_KEY`.
SHARING_ENABLED = "true"
SHARING_DISABLED = "false"

LOCATION_ENDPOINT = "/api/driver/location"

#: Seconds between location emissions while sharing is on.
DEFAULT_UPDATE_INTERVAL: float = 30.0
DEFAULT_REQUEST_TIMEOUT: float = 15.0
