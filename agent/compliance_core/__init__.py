"""
compliance_core — Forbidden-App Compliance Agent v1.0
=====================================================
Architecture: one background monitor thread, two cadences, no busy-wait.

  constants.py    → Version, cadences, timeouts, endpoints, event names
  config.py       → Paths, logging, config load/save, helpers
  errors.py       → AgentError taxonomy (storage / network / auth / parse)
  models.py       → PolicyEntry, Policy, ProcessSnapshot, Violation
  http_client.py  → HTTP session with pooling, GET-only retry, SSL fix
  cache.py        → PolicyCache (atomic JSON file, offline fallback source)
  sync.py         → PolicySyncer (fetch → cache, or cache on failure)
  inspector.py    → ProcessInspector (psutil full enumeration)
  matcher.py      → ViolationMatcher (case-insensitive substring rules)
  dedup.py        → ViolationDeduper (report each PID once per run)
  reporter.py     → ViolationReporter (one POST per violation)
  credentials.py  → CredentialStore (lock-guarded bearer token)
  events.py       → EventNotifier (fire-and-forget UI notifications)
  network.py      → Device id, connectivity check, heartbeat
  state.py        → SchedulerState dataclass (single source of truth)
  scheduler.py    → MonitorScheduler (the control loop)
  runner.py       → main() + auto-restart wrapper
"""

from .constants import AGENT_VERSION

__version__ = AGENT_VERSION
