"""Internal constants shared across the library."""

USER_AGENT = "pyfleet/aiohttp"
VEHICLES_URL = "http://localhost:8002/vehicles"
ROADS_BASE_URL = "https://roads.googleapis.com"
SNAP_TO_ROADS_ENDPOINT = "/v1/snapToRoads"

# The Roads API rejects paths with more than 100 points per request.
SNAP_TO_ROADS_MAX_POINTS = 100

# ------------------------------------------------------------------
# Animation timing (milliseconds)
# ------------------------------------------------------------------

DEFAULT_SEGMENT_DURATION_MS = 4000.0
DEFAULT_FRAME_INTERVAL_MS = 1000.0 / 60.0

# ------------------------------------------------------------------
# State-of-charge tiers
#
# Thresholds are strict-greater-than: exactly 90 is MEDIUM, exactly 70 is LOW.
# ------------------------------------------------------------------

HIGH_STATUS_THRESHOLD = 90.0
MEDIUM_STATUS_THRESHOLD = 70.0
