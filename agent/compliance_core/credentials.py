"""
CredentialStore — the bearer token shared between the login flow and the
scheduler thread. Last write wins; a reader always gets a whole string.
"""

import threading


class CredentialStore:

    def __init__(self, token=""):
        self._lock = threading.Lock()
        self._token = token or ""

    def set(self, token):
        with self._lock:
            self._token = token or ""

    def get(self) -> str:
        with self._lock:
            return self._token

    def clear(self):
        self.set("")

    @property
    def is_set(self) -> bool:
        return bool(self.get())
