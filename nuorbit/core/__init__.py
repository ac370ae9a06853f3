"""Core client machinery: HTTP helper, session client, status guard, orchestrator."""
