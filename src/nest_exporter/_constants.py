"""Internal constants shared across the library."""

BASE_URL = "https://developer-api.nest.com"
AUTH_URL = "https://api.home.nest.com/oauth2/access_token"
USER_AGENT = "nest-exporter"

ENDPOINT_STRUCTURES = "/structures"
ENDPOINT_DEVICES = "/devices"

METRICS_PATH = "/metrics"

DEFAULT_BIND_ADDRESS = ":9264"
DEFAULT_POLL_INTERVAL = 2 * 60.0
DEFAULT_REQUEST_TIMEOUT = 30.0

#: Redirect statuses the Nest API uses to point clients at a data host.
REDIRECT_STATUSES: frozenset[int] = frozenset({301, 302, 303, 307, 308})
MAX_REDIRECTS = 5
