"""
Constants, cadences, timeouts and API endpoints.
"""

AGENT_VERSION = "1.0.0"

DEFAULT_SERVER_URL = "https://it-asset-project-production.up.railway.app"

# ─── Cadences ────────────────────────────────────────────────────
SYNC_INTERVAL_SEC = 300        # Refresh forbidden-app policy every 5 minutes
SCAN_INTERVAL_SEC = 60         # Scan running processes every minute
CREDENTIAL_WAIT_SEC = 10       # Re-check for a login token while unauthenticated
HEARTBEAT_INTERVAL_SEC = 180   # 0 disables the heartbeat

# ─── Network ─────────────────────────────────────────────────────
API_TIMEOUT_SYNC = 15          # Seconds — policy fetch, per attempt
SYNC_RETRIES = 1               # GET retries on 502/503/504 (POSTs never retry)
RETRY_BACKOFF_SEC = 1
ONLINE_CHECK_TIMEOUT = 3       # Socket check used to annotate sync fallbacks
API_TIMEOUT_REPORT = 15        # Seconds — one violation submission
API_TIMEOUT_HEARTBEAT = 15

FORBIDDEN_APPS_PATH = "/api/forbidden-apps"
ALERTS_PATH = "/api/alerts"
HEARTBEAT_PATH = "/api/agent/heartbeat"

# ─── Notifications ───────────────────────────────────────────────
EVENT_POLICY_UPDATED = "policy-updated"
EVENT_VIOLATION_DETECTED = "violation-detected"
EVENT_STATUS_CHANGED = "status-changed"
