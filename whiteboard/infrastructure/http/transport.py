"""httpx transport to the backend resource API.

One shared httpx.AsyncClient per process (connection reuse), created in
the application lifespan. Any HTTP answer becomes an ApiResponse through
normalize_response; only transport failures (no answer at all) raise.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from whiteboard.domain.enums import HttpMethod
from whiteboard.domain.exceptions import NetworkException
from whiteboard.domain.value_objects.core import ApiResponse
from whiteboard.infrastructure.http.envelope import normalize_response

logger = logging.getLogger(__name__)


class HttpxTransport:
    """ITransport over httpx.

    Args:
        base_url: Backend root (e.g. http://localhost:4050); paths are joined to it.
        timeout: Request timeout in seconds, so hung calls fail over to the cache path.
        client: Optional httpx.AsyncClient (tests pass one with MockTransport).
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout))
        return self._client

    async def aclose(self) -> None:
        """Close the client if this transport created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    async def send(
        self,
        method: HttpMethod,
        path: str,
        body: Any = None,
        token: str | None = None,
    ) -> ApiResponse:
        """Issue one call and normalize the answer.

        Raises:
            NetworkException: On DNS, connection, protocol or timeout errors.
            ValueError: If a 2xx answer carries a malformed JSON body.
        """
        url = self.url_for(path)
        headers: dict[str, str] = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        kwargs: dict[str, Any] = {"headers": headers}
        if body is not None and method is not HttpMethod.GET:
            kwargs["json"] = body

        try:
            response = await self.client.request(method.value.upper(), url, **kwargs)
        except httpx.TimeoutException as e:
            logger.warning("HTTP %s %s timed out", method.value.upper(), url)
            raise NetworkException(f"Request timed out: {e}", url=url) from e
        except httpx.TransportError as e:
            logger.warning("HTTP %s %s failed: %s", method.value.upper(), url, type(e).__name__)
            raise NetworkException(str(e) or type(e).__name__, url=url) from e

        logger.debug("HTTP %s %s -> %s", method.value.upper(), url, response.status_code)
        return normalize_response(response.status_code, self._decode(response))

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        """Decode the JSON body; None when empty.

        Error answers with a non-JSON body (e.g. a proxy's HTML page) decode
        to None; a malformed body on success propagates as ValueError.
        """
        if not response.content:
            return None
        try:
            return response.json()
        except json.JSONDecodeError:
            if response.is_success:
                raise
            return None
