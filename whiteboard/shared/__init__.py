"""Shared: telemetry and utilities used across layers."""
