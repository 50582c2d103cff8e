"""Sync agent HTTP API."""
