"""
Shared pytest fixtures for the compliance agent test suite.

Autouse fixtures isolate every test from the real machine:
  - Agent home     -> temp directory  (config, log and policy cache)
  - Connectivity   -> always offline   (no real sockets from sync fallback)
"""

from unittest.mock import MagicMock

import pytest
import requests


@pytest.fixture(autouse=True)
def _isolate_agent_home(tmp_path, monkeypatch):
    home = tmp_path / "agent_home"
    monkeypatch.setenv("ITAM_AGENT_HOME", str(home))
    monkeypatch.delenv("ITAM_AGENT_SERVER_URL", raising=False)
    monkeypatch.delenv("ITAM_AGENT_TOKEN", raising=False)
    return home


@pytest.fixture(autouse=True)
def _offline(monkeypatch):
    import compliance_core.network as network_mod

    monkeypatch.setattr(network_mod, "is_online", lambda server_url: False)


def make_response(status_code=200, body=None, text=None):
    resp = MagicMock()
    resp.status_code = status_code
    if isinstance(body, Exception):
        resp.json.side_effect = body
    else:
        resp.json.return_value = body
    resp.text = text if text is not None else ("" if body is None else str(body))
    return resp


@pytest.fixture
def session():
    """A requests.Session stand-in; set .get/.post return values per test."""
    return MagicMock(spec=requests.Session)


@pytest.fixture
def policy_body():
    return [
        {"process_name": "chrome", "severity": "high", "description": "Browser"},
        {"process_name": "steam", "severity": "medium"},
    ]
