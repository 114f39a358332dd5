"""
ViolationReporter — submit one violation to the authority.

One POST per call: no retry, no batching, no offline buffer. The scheduler
decides what to do with a failure.
"""

from .config import log
from .constants import ALERTS_PATH, API_TIMEOUT_REPORT
from . import http_client


class ViolationReporter:

    def __init__(self, session=None, timeout=API_TIMEOUT_REPORT):
        self.timeout = timeout
        self._session = session

    @property
    def session(self):
        return self._session or http_client.http

    def report(self, authority_url, credential, violation):
        """POST the violation. Returns True, or raises NetworkError / AuthError."""
        url = f"{authority_url}{ALERTS_PATH}"
        http_client.post_json(self.session, url, credential, violation.to_dict(), self.timeout)
        log.info("Violation reported | app=%s | pid=%d | severity=%s",
                 violation.app_detected, violation.process_id, violation.severity)
        return True
