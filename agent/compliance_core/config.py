"""
Paths, logging setup, config load/save, safe_print.
"""

import os
import json
import sys
import logging
from pathlib import Path

from .constants import (
    DEFAULT_SERVER_URL, SYNC_INTERVAL_SEC, SCAN_INTERVAL_SEC,
    CREDENTIAL_WAIT_SEC, HEARTBEAT_INTERVAL_SEC,
)


# ─── Paths ───────────────────────────────────────────────────────
# One config/cache directory per user. The login token is never stored here.
_FOLDER_NAME = "itam-agent"
_WIN_FOLDER_NAME = "ITAMAgent"


def get_base_dir():
    """Per-user agent directory. ITAM_AGENT_HOME overrides the default."""
    override = os.environ.get("ITAM_AGENT_HOME")
    if override:
        return Path(override)
    if sys.platform == "win32":
        return Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming")) / _WIN_FOLDER_NAME
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / _FOLDER_NAME


def config_file():
    return get_base_dir() / "config.json"


def log_file():
    return get_base_dir() / "svc.log"


def policy_cache_file():
    return get_base_dir() / "forbidden_cache.json"


# ─── Safe print (no crash when --noconsole) ──────────────────────

def safe_print(*args, **kwargs):
    try:
        print(*args, **kwargs)
    except Exception:
        pass


# ─── Logging ─────────────────────────────────────────────────────

log = logging.getLogger("svc")

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
_LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level=logging.INFO):
    """Attach the file + console handlers. Safe to call more than once."""
    if log.handlers:
        return log

    path = log_file()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        if path.exists() and path.stat().st_size > 1_000_000:
            path.write_text("")
    except OSError:
        pass

    formatter = logging.Formatter(_LOG_FORMAT, datefmt=_LOG_DATEFMT)
    try:
        file_handler = logging.FileHandler(str(path), encoding="utf-8")
        file_handler.setFormatter(formatter)
        log.addHandler(file_handler)
    except OSError as e:
        safe_print(f"Log file unavailable ({e}); logging to console only")

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    log.addHandler(console_handler)

    log.setLevel(level)
    return log


# ─── Config Management ──────────────────────────────────────────

DEFAULT_CONFIG = {
    "serverUrl": DEFAULT_SERVER_URL,
    "deviceId": "",
    "syncIntervalSec": SYNC_INTERVAL_SEC,
    "scanIntervalSec": SCAN_INTERVAL_SEC,
    "credentialWaitSec": CREDENTIAL_WAIT_SEC,
    "heartbeatIntervalSec": HEARTBEAT_INTERVAL_SEC,
}

# Never persisted, whatever the caller passes in.
_SECRET_KEYS = ("token", "authToken", "auth_token")


def load_config():
    """Load config from disk merged over defaults. Always returns a dict."""
    config = dict(DEFAULT_CONFIG)
    path = config_file()
    if path.exists():
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if isinstance(data, dict):
                config.update(data)
            else:
                log.warning("Ignoring config %s: not a JSON object", path)
        except (json.JSONDecodeError, OSError) as e:
            log.warning("Ignoring unreadable config %s: %s", path, e)

    for key in _SECRET_KEYS:
        config.pop(key, None)

    env_url = os.environ.get("ITAM_AGENT_SERVER_URL")
    if env_url:
        config["serverUrl"] = env_url
    config["serverUrl"] = str(config["serverUrl"]).rstrip("/")
    return config


def save_config(config):
    """Save config dict to disk (credentials stripped)."""
    data = {k: v for k, v in config.items() if k not in _SECRET_KEYS}
    path = config_file()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    log.info("Config saved to %s", path)
