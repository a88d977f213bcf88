import inspect
import sys
from pathlib import Path

import httpx
import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

BASE_URL = "https://panel.example.com"


def json_reply(payload, status_code: int = 200):
    return lambda _request: httpx.Response(status_code, json=payload)


def text_reply(status_code: int, text: str):
    return lambda _request: httpx.Response(status_code, text=text)


class FakeAPI:
    # Routes map (method, path) to a handler returning a response, an
    # awaitable response, or an exception to raise.
    def __init__(self, routes: dict | None = None):
        self.routes = dict(routes or {})
        self.requests: list[httpx.Request] = []

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, text="not found")
        result = route(request)
        if inspect.isawaitable(result):
            result = await result
        if isinstance(result, Exception):
            raise result
        return result

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handle))

    def count(self, method: str, path: str) -> int:
        return sum(
            1 for request in self.requests
            if request.method == method and request.url.path == path
        )


def token_payload(access_token: str = "abc", expires_in: int = 3600) -> dict:
    return {"access_token": access_token, "token_type": "Bearer", "expires_in": expires_in}


def domain_payload(value) -> dict:
    return {"data": {"gate.hostredirect.domain": {"value": value}}}


class FakeConnection:
    def __init__(self, virtual_host: str, username: str = "Steve"):
        self.virtual_host = virtual_host
        self.username = username
        self.initial_server = None
        self.disconnect_message = None

    def set_initial_server(self, server) -> None:
        self.initial_server = server

    def disconnect(self, message: str) -> None:
        self.disconnect_message = message


@pytest.fixture
def credentials():
    import auth

    return auth.Credentials(client_id="client", client_secret="secret", base_url=BASE_URL)


@pytest.fixture
def fake_api_factory():
    def _make(routes: dict | None = None) -> FakeAPI:
        return FakeAPI(routes)

    return _make


@pytest.fixture
def registry():
    import registry as registry_module

    return registry_module.StaticServerRegistry.from_mapping({
        "lobby": "srv-lobby",
        "survival": "srv-1",
    })


@pytest.fixture
def connection_factory():
    def _make(virtual_host: str, username: str = "Steve") -> FakeConnection:
        return FakeConnection(virtual_host, username)

    return _make
