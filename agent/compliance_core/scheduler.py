"""
MonitorScheduler — the control loop.

    WAITING_FOR_CREDENTIAL ──token set──▶ IDLE ──sync due──▶ SYNCING
                 ▲                         │  ◀─────────────────┘
                 └──token cleared──────────┤
                                           └──policy non-empty──▶ SCANNING ──▶ IDLE

One tick = credential check → sync (if due) → heartbeat (if due) → scan
(if the policy is non-empty). tick() returns how long to sleep before the
next one. run() drives ticks on a single thread, so scan cycle N's report
loop always finishes before cycle N+1 starts.
"""

import threading
import time

from .config import log
from .constants import (
    SYNC_INTERVAL_SEC, SCAN_INTERVAL_SEC, CREDENTIAL_WAIT_SEC, HEARTBEAT_INTERVAL_SEC,
    EVENT_POLICY_UPDATED, EVENT_VIOLATION_DETECTED, EVENT_STATUS_CHANGED,
)
from .errors import ApiError
from .state import Phase, SchedulerState
from .cache import PolicyCache
from .sync import PolicySyncer
from .inspector import ProcessInspector
from .matcher import ViolationMatcher
from .dedup import ViolationDeduper
from .reporter import ViolationReporter
from .events import EventNotifier
from . import http_client
from . import network


class MonitorScheduler:
    """
    Owns the monitoring pipeline. Every collaborator can be injected; the
    defaults are the real implementations wired to the shared HTTP session.

    Config keys: serverUrl, deviceId, syncIntervalSec, scanIntervalSec,
    credentialWaitSec, heartbeatIntervalSec.
    """

    def __init__(self, config, credentials, syncer=None, inspector=None,
                 matcher=None, deduper=None, reporter=None, notifier=None,
                 heartbeat=None, clock=time.monotonic):
        self._config = config
        self.server_url = config["serverUrl"]
        self.device_id = config.get("deviceId") or network.get_device_id()
        self.sync_interval = config.get("syncIntervalSec", SYNC_INTERVAL_SEC)
        self.scan_interval = config.get("scanIntervalSec", SCAN_INTERVAL_SEC)
        self.credential_wait = config.get("credentialWaitSec", CREDENTIAL_WAIT_SEC)
        self.heartbeat_interval = config.get("heartbeatIntervalSec", HEARTBEAT_INTERVAL_SEC)

        self.credentials = credentials
        self.syncer = syncer or PolicySyncer(PolicyCache())
        self.inspector = inspector or ProcessInspector()
        self.matcher = matcher or ViolationMatcher(self.device_id)
        self.deduper = deduper or ViolationDeduper()
        self.reporter = reporter or ViolationReporter()
        self.notifier = notifier or EventNotifier()
        self._send_heartbeat = heartbeat or network.send_heartbeat
        self._clock = clock

        self.state = SchedulerState()
        self._stop = threading.Event()
        self._thread = None

    @property
    def status(self) -> str:
        return self.state.phase.value

    @property
    def current_policy(self):
        return self.state.policy

    # ─── Thread lifecycle ────────────────────────────────────

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        """Run the loop on one background daemon thread. Returns True if started.

        Refuses while a previous loop thread is still alive, including one
        that was told to stop but is still blocked in a network call.
        """
        if self.is_running:
            if self._stop.is_set():
                log.warning("Previous monitor loop still shutting down — not starting another")
            return False
        # One event per run: a stopped loop stays stopped.
        self._stop = threading.Event()
        self._thread = threading.Thread(
            target=self.run, args=(self._stop,), name="monitor-scheduler", daemon=True,
        )
        self._thread.start()
        return True

    def stop(self, timeout=5):
        """Signal the loop and wait. Returns True once the thread has exited."""
        self._stop.set()
        if self._thread is None:
            return True
        self._thread.join(timeout)
        if self._thread.is_alive():
            log.warning("Monitor loop did not exit within %ss", timeout)
            return False
        self._thread = None
        return True

    def run(self, stop_event=None):
        stop_event = stop_event or self._stop
        log.info(
            "Monitor loop started (sync=%ds, scan=%ds, device=%s, server=%s)",
            self.sync_interval, self.scan_interval, self.device_id, self.server_url,
        )
        while not stop_event.is_set():
            try:
                delay = self.tick()
            except Exception as e:
                log.error("Unexpected error in monitor loop: %s", e, exc_info=True)
                http_client.http = http_client.reset_session(http_client.http)
                delay = self.credential_wait
            stop_event.wait(delay)
        log.info("Monitor loop stopped")

    # ─── One iteration ───────────────────────────────────────

    def tick(self):
        token = self.credentials.get()
        if not token:
            if self.state.phase is not Phase.WAITING_FOR_CREDENTIAL:
                log.warning("Credential cleared — pausing monitoring")
            self._set_phase(Phase.WAITING_FOR_CREDENTIAL)
            return self.credential_wait

        if self.state.phase is Phase.WAITING_FOR_CREDENTIAL:
            log.info("Credential available — monitoring enabled")
        self._set_phase(Phase.IDLE)

        now = self._clock()
        if self.state.sync_due(now, self.sync_interval):
            self.sync_policy(token, now)

        if self.state.heartbeat_due(now, self.heartbeat_interval):
            self.state.last_heartbeat_ts = now
            self._send_heartbeat(http_client.http, self.server_url, token, self.device_id)

        if self.state.policy:
            self.scan(token)

        self._set_phase(Phase.IDLE)
        return self.scan_interval

    def sync_policy(self, token, now):
        self._set_phase(Phase.SYNCING)
        policy = self.syncer.sync(self.server_url, token)
        self.state.on_sync_attempted(policy, now)
        self.notifier.emit(EVENT_POLICY_UPDATED, {
            "count": len(policy),
            "source": self.syncer.last_source,
        })

    def scan(self, token):
        """One scan cycle: inspect → match → dedupe → report. Returns reported violations."""
        self._set_phase(Phase.SCANNING)
        policy = self.state.policy
        snapshots = self.inspector.snapshot()
        matched = self.matcher.match(snapshots, policy)
        fresh = self.deduper.filter_new(matched)
        self.state.scan_count += 1

        if fresh:
            log.warning("Found %d new violation(s) in %d processes", len(fresh), len(snapshots))

        reported = []
        for violation in fresh:
            try:
                self.reporter.report(self.server_url, token, violation)
            except ApiError as e:
                self.state.report_failures += 1
                log.error("Failed to report %s (pid %d): %s",
                          violation.app_detected, violation.process_id, e)
                continue
            self.state.reported_count += 1
            reported.append(violation)
            self.notifier.emit(EVENT_VIOLATION_DETECTED, violation.to_dict())
        return reported

    def _set_phase(self, phase):
        if phase is self.state.phase:
            return
        self.state.phase = phase
        self.notifier.emit(EVENT_STATUS_CHANGED, {"status": phase.value})
