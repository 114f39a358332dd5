"""
Forbidden-App Compliance Agent — Desktop Agent
==============================================
Keeps a cached list of forbidden applications from the ITAM server, scans
running processes every minute, and reports each offending process once.
Keeps enforcing the last known list when the server is unreachable.

It sends ONLY: process name, process id, severity and this host's name.

Usage:
    ITAM_AGENT_TOKEN=<token> python agent.py
"""

from compliance_core.runner import run_with_auto_restart


if __name__ == "__main__":
    run_with_auto_restart()
