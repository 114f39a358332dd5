"""
PolicySyncer — fetch the forbidden-app list, cache it, fall back to the cache.

The caller always gets a usable Policy: fetched, cached, or empty. Sync
errors never leave this module.
"""

from .config import log
from .constants import FORBIDDEN_APPS_PATH, API_TIMEOUT_SYNC
from .errors import ApiError, ParseError, StorageError
from .models import Policy, PolicyEntry
from . import http_client
from . import network

SOURCE_REMOTE = "remote"
SOURCE_CACHE = "cache"
SOURCE_EMPTY = "empty"


def parse_policy(body):
    """Turn a ``/api/forbidden-apps`` response body into a Policy."""
    if not isinstance(body, list):
        raise ParseError(f"Expected a list of forbidden apps, got {type(body).__name__}")
    entries = []
    for item in body:
        try:
            entry = PolicyEntry.from_dict(item)
        except (KeyError, TypeError) as e:
            raise ParseError(f"Malformed forbidden app record {item!r}: {e}") from e
        if entry.is_blank:
            log.warning("Skipping forbidden app with blank process_name: %r", item)
            continue
        entries.append(entry)
    return Policy.fetched_now(entries)


class PolicySyncer:

    def __init__(self, cache, session=None, timeout=API_TIMEOUT_SYNC):
        self.cache = cache
        self.timeout = timeout
        self.last_source = SOURCE_EMPTY
        self._session = session

    @property
    def session(self):
        return self._session or http_client.http

    def fetch(self, authority_url, credential):
        """Authenticated fetch. Raises NetworkError / AuthError / ParseError."""
        url = f"{authority_url}{FORBIDDEN_APPS_PATH}"
        body = http_client.get_json(self.session, url, credential, self.timeout)
        return parse_policy(body)

    def sync(self, authority_url, credential):
        """Return the current policy, falling back to the cache on failure."""
        try:
            policy = self.fetch(authority_url, credential)
        except ApiError as e:
            offline = "" if network.is_online(authority_url) else " (offline)"
            log.warning("Forbidden list fetch failed%s: %s — loading from cache", offline, e)
            return self._load_fallback()

        try:
            self.cache.save(policy)
        except StorageError as e:
            log.warning("Failed to cache forbidden list: %s", e)

        self.last_source = SOURCE_REMOTE
        log.info("Forbidden list synced: %d apps", len(policy))
        return policy

    def _load_fallback(self):
        try:
            policy = self.cache.load()
        except StorageError as e:
            log.warning("Policy cache unavailable: %s — using empty policy", e)
            self.last_source = SOURCE_EMPTY
            return Policy.empty()

        self.last_source = SOURCE_CACHE if policy else SOURCE_EMPTY
        log.info("Using cached forbidden list: %d apps (last updated %d)",
                 len(policy), policy.last_updated)
        return policy
