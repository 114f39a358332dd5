"""
Policy, process and violation records.

All records are frozen: a Policy handed to a scan can be shared with the
scheduler without copying, and a sync replaces it instead of mutating it.
"""

import time
from dataclasses import dataclass, asdict
from typing import Tuple


@dataclass(frozen=True)
class PolicyEntry:
    """One forbidden-application rule (case-insensitive substring pattern)."""

    process_name_pattern: str
    severity: str

    @classmethod
    def from_dict(cls, data: dict) -> "PolicyEntry":
        """Build from the wire form ``{"process_name", "severity"}``.

        Raises KeyError/TypeError on a malformed record; callers map that to
        their own error type.
        """
        if not isinstance(data, dict):
            raise TypeError(f"policy entry must be an object, got {type(data).__name__}")
        pattern = data["process_name"]
        if not isinstance(pattern, str):
            raise TypeError("process_name must be a string")
        severity = data.get("severity") or "medium"
        return cls(process_name_pattern=pattern, severity=str(severity))

    @property
    def is_blank(self) -> bool:
        """A blank pattern is a substring of every name; such rules are never applied."""
        return not self.process_name_pattern.strip()

    def to_dict(self) -> dict:
        return {"process_name": self.process_name_pattern, "severity": self.severity}


@dataclass(frozen=True)
class Policy:
    entries: Tuple[PolicyEntry, ...] = ()
    last_updated: int = 0

    @classmethod
    def empty(cls) -> "Policy":
        return cls()

    @classmethod
    def fetched_now(cls, entries) -> "Policy":
        return cls(entries=tuple(entries), last_updated=int(time.time()))

    def __len__(self):
        return len(self.entries)

    def __bool__(self):
        return bool(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def to_dict(self) -> dict:
        return {
            "apps": [e.to_dict() for e in self.entries],
            "last_updated": self.last_updated,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Policy":
        if not isinstance(data, dict):
            raise TypeError("policy document must be an object")
        apps = data.get("apps", [])
        if not isinstance(apps, list):
            raise TypeError("apps must be a list")
        entries = (PolicyEntry.from_dict(a) for a in apps)
        return cls(
            entries=tuple(e for e in entries if not e.is_blank),
            last_updated=int(data.get("last_updated", 0)),
        )


@dataclass(frozen=True)
class ProcessSnapshot:
    process_id: int
    process_name: str


@dataclass(frozen=True)
class Violation:
    device_id: str
    app_detected: str
    severity: str
    process_id: int

    def to_dict(self) -> dict:
        return asdict(self)
