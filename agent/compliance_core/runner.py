"""
Entry point and auto-restart wrapper.

The login flow is external: the token comes from ITAM_AGENT_TOKEN or, on an
interactive console, from a prompt answered while the monitor is already
waiting for it.
"""

import getpass
import os
import sys
import time

from .constants import (
    AGENT_VERSION, EVENT_POLICY_UPDATED, EVENT_VIOLATION_DETECTED,
)
from .config import log, safe_print, setup_logging, load_config
from .credentials import CredentialStore
from .scheduler import MonitorScheduler
from . import http_client


def console_listener(event, payload):
    """Stand-in for the tray UI: print the notifications the core emits."""
    if event == EVENT_POLICY_UPDATED:
        safe_print(f"Policy updated: {payload['count']} forbidden apps ({payload['source']})")
    elif event == EVENT_VIOLATION_DETECTED:
        safe_print(
            f"Forbidden app detected: {payload['app_detected']} "
            f"(pid {payload['process_id']}, {payload['severity']})"
        )


def _prompt_for_token(credentials):
    if credentials.is_set or not sys.stdin or not sys.stdin.isatty():
        return
    try:
        token = getpass.getpass("Login token: ").strip()
    except (EOFError, KeyboardInterrupt):
        return
    if token:
        credentials.set(token)


def main(credentials=None, config=None):
    """Primary agent entry point.

    ``credentials`` is passed in by the restart wrapper so a token entered
    once survives a crash-restart.
    """
    setup_logging()
    safe_print("ITAM Compliance Agent v" + AGENT_VERSION)
    safe_print()

    config = config or load_config()
    if credentials is None:
        credentials = CredentialStore(os.environ.get("ITAM_AGENT_TOKEN", ""))

    scheduler = MonitorScheduler(config, credentials)
    scheduler.notifier.subscribe(console_listener)
    if not scheduler.start():
        raise RuntimeError("Monitor loop could not be started")

    if not credentials.is_set:
        log.info("No credential yet — waiting for login")
        _prompt_for_token(credentials)

    safe_print("Service running.\n")
    try:
        while scheduler.is_running:
            time.sleep(1)
        raise RuntimeError("Monitor loop exited unexpectedly")
    finally:
        scheduler.stop()
        log.info("Agent shut down.")


def _restart_delay(crash_count, max_rapid_crashes=10):
    if crash_count >= max_rapid_crashes:
        return 120
    return min(10 * crash_count, 60)


def run_with_auto_restart(sleep=time.sleep):
    """
    Wrapper that auto-restarts on crash. Never gives up.
    Crash counter resets if the agent ran for 2+ minutes (not a boot-loop).
    The credential store outlives each restart.
    """
    crash_count = 0
    crash_window = 120
    credentials = CredentialStore(os.environ.get("ITAM_AGENT_TOKEN", ""))

    while True:
        start_time = time.time()
        try:
            main(credentials)
            break
        except KeyboardInterrupt:
            safe_print("\nAgent stopped by user.")
            break
        except SystemExit as e:
            if str(e) == "0":
                break
            log.error("Agent SystemExit: %s", e)
        except Exception as e:
            elapsed = time.time() - start_time
            log.error("Agent crashed after %.0fs: %s", elapsed, e, exc_info=True)

            if elapsed > crash_window:
                crash_count = 0
            crash_count += 1

            wait = _restart_delay(crash_count)
            if wait == 120:
                log.warning("Many rapid crashes (%d). Waiting %ds...", crash_count, wait)
            log.info("Restarting in %ds (crash %d)...", wait, crash_count)
            sleep(wait)

            http_client.http = http_client.reset_session(http_client.http)
