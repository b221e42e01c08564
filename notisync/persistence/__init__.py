"""Tracking store and live store adapters."""
