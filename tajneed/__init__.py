"""Tajneed directory: hierarchy resolution and external reconciliation."""
