"""Connectivity probe: background reachability check of the backend.

Stands in for the platform's network-change notification when the sync
agent runs headless. Any HTTP answer from the health URL means online
(even an error status: the server was reached); a transport error means
offline. Results are written to the ConnectivityMonitor, whose listeners
(the replay service) react to transitions.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from whiteboard.application.services.connectivity import ConnectivityMonitor

logger = logging.getLogger(__name__)


class ConnectivityProbe:
    """Periodic GET of the backend health URL.

    Args:
        monitor: Connectivity state to update.
        url: Absolute health URL (SERVER_URL/HEALTH_PATH).
        interval: Seconds between checks.
        timeout: Per-check timeout in seconds.
        client: Optional httpx.AsyncClient (shared client or test MockTransport).
    """

    def __init__(
        self,
        monitor: ConnectivityMonitor,
        url: str,
        interval: float = 15.0,
        timeout: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.monitor = monitor
        self.url = url
        self.interval = interval
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def check(self) -> bool:
        """Run one reachability check and report it to the monitor.

        Returns:
            True if the backend answered.
        """
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout))
        try:
            response = await self._client.get(self.url, timeout=self.timeout)
            reachable = True
            logger.debug("Probe %s -> %s", self.url, response.status_code)
        except httpx.HTTPError as e:
            reachable = False
            logger.debug("Probe %s failed: %s", self.url, type(e).__name__)
        await self.monitor.set_online(reachable)
        return reachable

    async def _run(self) -> None:
        try:
            while True:
                try:
                    await self.check()
                except Exception:
                    logger.exception("Connectivity probe error")
                await asyncio.sleep(self.interval)
        except asyncio.CancelledError:
            logger.info("Connectivity probe cancelled")
            raise

    def start(self) -> None:
        """Start the probe loop as a background task (idempotent)."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="connectivity-probe")
        logger.info("Connectivity probe started: %s every %ss", self.url, self.interval)

    async def stop(self) -> None:
        """Cancel the loop and close the client if the probe created it."""
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
