"""HttpxTransport: request building, error mapping and body decoding."""

import httpx
import pytest

from tests.fakes import BACKEND_URL, FakeBackend
from whiteboard.domain.enums import HttpMethod
from whiteboard.domain.exceptions import NetworkException
from whiteboard.infrastructure.http import HttpxTransport


async def test_get_sends_no_body(transport: HttpxTransport, backend: FakeBackend) -> None:
    await transport.send(HttpMethod.GET, "courses?page=2", {"ignored": True}, token="t")
    request = backend.requests[0]
    assert str(request.url) == f"{BACKEND_URL}/courses?page=2"
    assert request.content == b""
    assert request.headers["Authorization"] == "Bearer t"
    assert request.headers["Accept"] == "application/json"


async def test_leading_slash_in_path(transport: HttpxTransport, backend: FakeBackend) -> None:
    await transport.send(HttpMethod.DELETE, "/courses/1")
    assert str(backend.requests[0].url) == f"{BACKEND_URL}/courses/1"


async def test_timeout_raises_network_exception() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        transport = HttpxTransport(BACKEND_URL, client=client)
        with pytest.raises(NetworkException) as exc_info:
            await transport.send(HttpMethod.GET, "courses")
    assert exc_info.value.error_code == "NETWORK_ERROR"
    assert exc_info.value.details["url"] == f"{BACKEND_URL}/courses"


async def test_connection_error_raises_network_exception(
    transport: HttpxTransport, backend: FakeBackend
) -> None:
    backend.down = True
    with pytest.raises(NetworkException):
        await transport.send(HttpMethod.POST, "messages", {"text": "hi"})


async def test_html_error_page_decodes_to_none() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>Bad gateway</html>")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        result = await HttpxTransport(BACKEND_URL, client=client).send(HttpMethod.GET, "x")
    assert result.error_code == "SERVER_ERROR"
    assert result.error.status == 502


async def test_malformed_json_on_success_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200, content=b"{not json", headers={"Content-Type": "application/json"}
        )

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(ValueError):
            await HttpxTransport(BACKEND_URL, client=client).send(HttpMethod.GET, "x")


async def test_aclose_keeps_injected_client(http_client: httpx.AsyncClient) -> None:
    transport = HttpxTransport(BACKEND_URL, client=http_client)
    await transport.aclose()
    assert not http_client.is_closed


async def test_owned_client_created_lazily_and_closed() -> None:
    transport = HttpxTransport(BACKEND_URL, timeout=3.0)
    client = transport.client
    assert client.timeout.read == 3.0
    await transport.aclose()
    assert client.is_closed
