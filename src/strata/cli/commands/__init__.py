"""Strata CLI commands (auto-discovered)."""
