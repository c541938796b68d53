"""Adapters for external systems: store backends and the Square API."""
