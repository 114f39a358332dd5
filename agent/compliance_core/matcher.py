"""
ViolationMatcher — running processes vs. the forbidden-app policy.
"""

from .models import Violation


def match(snapshots, policy, device_id):
    """
    Case-insensitive substring match of every process against every rule.

    One process may match several rules; each match is its own Violation.
    Output order is snapshot order, then policy order.
    """
    patterns = [(entry.process_name_pattern.lower(), entry.severity) for entry in policy]
    violations = []
    for snap in snapshots:
        name = snap.process_name.lower()
        for pattern, severity in patterns:
            if pattern in name:
                violations.append(Violation(
                    device_id=device_id,
                    app_detected=name,
                    severity=severity,
                    process_id=snap.process_id,
                ))
    return violations


class ViolationMatcher:
    """Binds ``match`` to this device's id."""

    def __init__(self, device_id):
        self.device_id = device_id

    def match(self, snapshots, policy):
        return match(snapshots, policy, self.device_id)
