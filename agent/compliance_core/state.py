"""
SchedulerState — single source of truth for the monitor loop.

Only the scheduler thread mutates it. Cadences are plain "due" checks
against stored timestamps, evaluated once per tick, so sync, heartbeat and
scan can never overlap.
"""

import enum
from dataclasses import dataclass, field
from typing import Optional

from .models import Policy


class Phase(enum.Enum):
    WAITING_FOR_CREDENTIAL = "Waiting for login"
    IDLE = "Monitoring Active"
    SYNCING = "Syncing policy"
    SCANNING = "Scanning processes"


@dataclass
class SchedulerState:
    phase: Phase = Phase.WAITING_FOR_CREDENTIAL

    # ── Policy ────────────────────────────────────────────────
    policy: Policy = field(default_factory=Policy.empty)
    last_sync_ts: Optional[float] = None   # monotonic; None = never attempted

    # ── Heartbeat ─────────────────────────────────────────────
    last_heartbeat_ts: Optional[float] = None

    # ── Counters (status display / tests) ─────────────────────
    scan_count: int = 0
    reported_count: int = 0
    report_failures: int = 0

    @staticmethod
    def _due(last, now, interval) -> bool:
        return last is None or (now - last) >= interval

    def sync_due(self, now, interval) -> bool:
        return self._due(self.last_sync_ts, now, interval)

    def heartbeat_due(self, now, interval) -> bool:
        if interval <= 0:
            return False
        return self._due(self.last_heartbeat_ts, now, interval)

    def on_sync_attempted(self, policy, now):
        """A fallback still counts as an attempt (no sync storm)."""
        self.policy = policy
        self.last_sync_ts = now
