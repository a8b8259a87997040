"""Adapters - implementations of the core protocols."""
