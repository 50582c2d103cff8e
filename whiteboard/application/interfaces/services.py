"""Service interfaces (ports) for the application layer.

Protocols define the collaborators of the request gateway: where the
bearer token comes from and how a call reaches the backend.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from whiteboard.domain.enums import HttpMethod
    from whiteboard.domain.value_objects.core import ApiResponse


class ITokenProvider(Protocol):
    """Protocol for the authentication token source (active session)."""

    async def get_token(self) -> str | None:
        """Return the bearer token, or None when signed out."""


class ITransport(Protocol):
    """Protocol for the network path to the backend resource API."""

    async def send(
        self,
        method: HttpMethod,
        path: str,
        body: Any = None,
        token: str | None = None,
    ) -> ApiResponse:
        """Issue the call and return the normalized envelope.

        Any HTTP answer (2xx or not) is returned as an ApiResponse.

        Raises:
            NetworkException: If no HTTP response was received.
        """
