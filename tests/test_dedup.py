"""Tests for per-run violation deduplication."""

import threading

from compliance_core.dedup import ViolationDeduper
from compliance_core.models import Violation


def _v(pid, severity="high"):
    return Violation(device_id="h", app_detected=f"app{pid}", severity=severity, process_id=pid)


class TestViolationDeduper:

    def test_first_sighting_passes_and_is_recorded(self):
        deduper = ViolationDeduper()
        assert deduper.filter_new([_v(1), _v(2)]) == [_v(1), _v(2)]
        assert 1 in deduper and 2 in deduper
        assert len(deduper) == 2

    def test_reported_pid_never_passes_again(self):
        deduper = ViolationDeduper()
        deduper.filter_new([_v(1)])
        for _ in range(5):
            assert deduper.filter_new([_v(1), _v(1, "low")]) == []

    def test_only_new_pids_pass(self):
        deduper = ViolationDeduper()
        deduper.filter_new([_v(1)])
        assert deduper.filter_new([_v(1), _v(3)]) == [_v(3)]

    def test_same_pid_twice_in_one_call_keeps_first(self):
        deduper = ViolationDeduper()
        assert deduper.filter_new([_v(9, "critical"), _v(9, "low")]) == [_v(9, "critical")]

    def test_clear_forgets_everything(self):
        deduper = ViolationDeduper()
        deduper.filter_new([_v(1)])
        deduper.clear()
        assert len(deduper) == 0
        assert deduper.filter_new([_v(1)]) == [_v(1)]

    def test_fresh_instance_does_not_inherit_state(self):
        ViolationDeduper().filter_new([_v(1)])
        assert ViolationDeduper().filter_new([_v(1)]) == [_v(1)]

    def test_concurrent_callers_never_both_see_a_pid_as_new(self):
        deduper = ViolationDeduper()
        batch = [_v(pid) for pid in range(200)]
        results = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            results.append(deduper.filter_new(batch))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        passed = [v.process_id for r in results for v in r]
        assert sorted(passed) == list(range(200))
