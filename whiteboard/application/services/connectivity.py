"""Process-wide connectivity state with transition listeners.

Written only by the platform's network-change notification (the sync
agent's connectivity endpoint or the connectivity probe); read by the
request gateway on every call.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

ConnectivityListener = Callable[[bool], Awaitable[None]]


class ConnectivityMonitor:
    """Online/offline flag. Listeners run only on an actual transition."""

    def __init__(self, online: bool = True) -> None:
        self._online = online
        self._listeners: list[ConnectivityListener] = []

    @property
    def is_online(self) -> bool:
        return self._online

    def subscribe(self, listener: ConnectivityListener) -> Callable[[], None]:
        """Register an async listener called with the new state.

        Returns:
            Callable that unsubscribes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def set_online(self, online: bool) -> bool:
        """Apply a connectivity notification.

        Listeners are awaited in subscription order. A failing listener is
        logged and does not prevent the others from running.

        Returns:
            True if the state changed.
        """
        if online == self._online:
            return False
        self._online = online
        logger.info("Connectivity changed: %s", "online" if online else "offline")
        for listener in list(self._listeners):
            try:
                await listener(online)
            except Exception:
                logger.exception("Connectivity listener %r failed", listener)
        return True
