"""Adapters for external systems (count sources, Discord)."""
