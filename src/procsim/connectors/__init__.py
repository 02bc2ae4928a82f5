"""Operator-facing connectors (console menu)."""
