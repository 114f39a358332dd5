"""
HTTP session with connection pooling, GET-only retry, and CA bundle fix.

Violation reports are POSTs and must reach the authority at most once per
call, so the retry strategy never covers POST. A policy fetch, retries and
backoff included, has to fit inside one scan interval.
"""

import os

import certifi
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import log
from .constants import AGENT_VERSION, SYNC_RETRIES, RETRY_BACKOFF_SEC
from .errors import NetworkError, AuthError, ParseError

_retry_strategy = Retry(
    total=SYNC_RETRIES,
    backoff_factor=RETRY_BACKOFF_SEC,
    status_forcelist=[502, 503, 504],
    allowed_methods=["HEAD", "GET"],
    respect_retry_after_header=False,           # a 503 must not park the loop
    raise_on_status=False,
)


def worst_case_get_seconds(timeout):
    """Upper bound on one GET through the shared session: attempts plus backoff."""
    attempts = _retry_strategy.total + 1
    backoff = sum(_retry_strategy.backoff_factor * 2 ** i for i in range(_retry_strategy.total))
    return attempts * timeout + backoff


def _get_ca_bundle():
    """Get the CA bundle path.

    Priority: env var → certifi. Frozen builds set REQUESTS_CA_BUNDLE.
    """
    env_ca = os.environ.get('REQUESTS_CA_BUNDLE') or os.environ.get('SSL_CERT_FILE')
    if env_ca and os.path.isfile(env_ca):
        return env_ca
    return certifi.where()


def create_session():
    """Session for the monitor thread: one host, small pool, JSON in and out."""
    session = requests.Session()
    adapter = HTTPAdapter(pool_connections=1, pool_maxsize=2, max_retries=_retry_strategy)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.verify = _get_ca_bundle()
    session.headers.update({
        "User-Agent": f"itam-compliance-agent/{AGENT_VERSION}",
        "Accept": "application/json",
    })
    return session


def reset_session(session):
    """Drop pooled connections (stale after sleep/network change) and start fresh."""
    try:
        session.close()
    except (requests.RequestException, OSError) as e:
        log.debug("Closing old HTTP session failed: %s", e)
    return create_session()


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


# ─── Request helpers (map failures onto errors.py) ───────────────

def _check_status(resp, what):
    if 200 <= resp.status_code < 300:
        return
    raise AuthError(
        f"{what} failed: HTTP {resp.status_code} {resp.text[:200]}",
        status_code=resp.status_code,
    )


def get_json(session, url, token, timeout):
    """Authenticated GET returning the decoded JSON body."""
    try:
        resp = session.get(url, headers=auth_headers(token), timeout=timeout)
    except requests.RequestException as e:
        raise NetworkError(f"GET {url}: {e}") from e
    _check_status(resp, f"GET {url}")
    try:
        return resp.json()
    except ValueError as e:
        raise ParseError(f"GET {url}: response is not JSON") from e


def post_json(session, url, token, payload, timeout):
    """Authenticated POST of a JSON body. Returns the response."""
    try:
        resp = session.post(url, json=payload, headers=auth_headers(token), timeout=timeout)
    except requests.RequestException as e:
        raise NetworkError(f"POST {url}: {e}") from e
    _check_status(resp, f"POST {url}")
    return resp


# Global shared session
http = create_session()
