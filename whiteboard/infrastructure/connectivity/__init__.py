"""Connectivity probe."""

from whiteboard.infrastructure.connectivity.probe import ConnectivityProbe

__all__ = ["ConnectivityProbe"]
