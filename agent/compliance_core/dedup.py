"""
ViolationDeduper — report each process instance once per agent run.

The reported-PID set lives only in memory: after a restart a PID reused by
the OS for another program is not suppressed.
"""

import threading


class ViolationDeduper:

    def __init__(self):
        self._reported = set()
        self._lock = threading.Lock()

    def filter_new(self, violations):
        """Return violations whose PID has not been reported, and mark them.

        Check-and-insert is one critical section, so two callers can never
        both see the same PID as new. Within one call the first violation for
        a PID wins.
        """
        fresh = []
        with self._lock:
            for violation in violations:
                if violation.process_id in self._reported:
                    continue
                self._reported.add(violation.process_id)
                fresh.append(violation)
        return fresh

    def clear(self):
        with self._lock:
            self._reported.clear()

    def __contains__(self, process_id):
        with self._lock:
            return process_id in self._reported

    def __len__(self):
        with self._lock:
            return len(self._reported)
