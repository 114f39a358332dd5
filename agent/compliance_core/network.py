"""
Network utilities — device identity, connectivity check, heartbeat.

Connectivity: socket-level check (network-interface agnostic, works on
WiFi, LAN, or any adapter). Only used to annotate log lines; the sync
fallback does not depend on it.
"""

import socket
import time
from urllib.parse import urlsplit

from .config import log
from .constants import HEARTBEAT_PATH, API_TIMEOUT_HEARTBEAT, ONLINE_CHECK_TIMEOUT
from .errors import ApiError
from . import http_client


# ─── Device identity ─────────────────────────────────────────────

def get_device_id():
    """Host network name, used as device_id on every submission."""
    try:
        name = socket.gethostname()
    except OSError:
        name = ""
    return name or "unknown"


# ─── Connectivity check (network-interface agnostic) ─────────────

def authority_address(server_url):
    """(host, port) of the authority, honouring an explicit port in the URL."""
    parts = urlsplit(server_url)
    default_port = 443 if parts.scheme == "https" else 80
    return parts.hostname or "", parts.port or default_port


def is_online(server_url, timeout=ONLINE_CHECK_TIMEOUT):
    """True if a TCP connection to the authority can be opened right now."""
    host, port = authority_address(server_url)
    if not host:
        return False
    try:
        with socket.create_connection((host, port), timeout=timeout):
            return True
    except OSError:
        return False


# ─── Heartbeat ───────────────────────────────────────────────────

def send_heartbeat(session, server_url, token, device_id):
    """Tell the authority this device is alive. Returns True on success."""
    url = f"{server_url}{HEARTBEAT_PATH}"
    payload = {"device_id": device_id, "timestamp": int(time.time())}
    try:
        http_client.post_json(session, url, token, payload, API_TIMEOUT_HEARTBEAT)
    except ApiError as e:
        log.warning("Heartbeat failed: %s", e)
        return False
    log.info("Heartbeat OK | device=%s", device_id)
    return True
