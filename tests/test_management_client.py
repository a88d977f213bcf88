import asyncio

import httpx
import pytest

import management_client
from conftest import domain_payload, json_reply, text_reply, token_payload
from errors import APIError, AuthError, NoDomainAssigned

TOKEN_ROUTE = ("POST", "/oauth2/token")
SERVERS_ROUTE = ("GET", "/api/servers")


@pytest.fixture
def client_factory(fake_api_factory, credentials):
    def _make(routes: dict):
        routes = {TOKEN_ROUTE: json_reply(token_payload("tok", 3600)), **routes}
        api = fake_api_factory(routes)
        client = management_client.ManagementAPIClient(credentials, http=api.client(), timeout=7)
        return client, api

    return _make


@pytest.mark.parametrize(
    "payload",
    [
        [{"identifier": "a"}, {"identifier": "b"}],
        {"servers": [{"identifier": "a", "name": "Lobby"}, {"identifier": "b"}], "paging": {}},
    ],
)
def test_list_servers_payload_shapes(client_factory, payload) -> None:
    client, api = client_factory({SERVERS_ROUTE: json_reply(payload)})

    servers = asyncio.run(client.list_servers())

    assert servers == [
        management_client.ServerSummary("a"),
        management_client.ServerSummary("b"),
    ]
    request = api.requests[-1]
    assert request.headers["Authorization"] == "Bearer tok"
    assert request.extensions["timeout"]["read"] == 7


def test_list_servers_skips_malformed_entries(
    client_factory,
    caplog: pytest.LogCaptureFixture,
) -> None:
    payload = [
        {"identifier": "a"},
        {"identifier": None},
        {"name": "no identifier"},
        "not an object",
        {"identifier": "b"},
    ]
    client, _api = client_factory({SERVERS_ROUTE: json_reply(payload)})

    with caplog.at_level("WARNING"):
        servers = asyncio.run(client.list_servers())

    assert [server.identifier for server in servers] == ["a", "b"]
    assert caplog.text.count("Skipping server listing entry") == 3


@pytest.mark.parametrize(
    "reply",
    [
        text_reply(500, "boom"),
        text_reply(200, "not json"),
        json_reply({"unexpected": True}),
        json_reply("servers"),
        lambda _request: httpx.ReadTimeout("slow"),
    ],
)
def test_list_servers_failures_raise_api_error(client_factory, reply) -> None:
    client, _api = client_factory({SERVERS_ROUTE: reply})
    with pytest.raises(APIError):
        asyncio.run(client.list_servers())


def test_list_servers_propagates_auth_error(client_factory) -> None:
    client, api = client_factory({TOKEN_ROUTE: text_reply(401, "denied")})
    with pytest.raises(AuthError):
        asyncio.run(client.list_servers())
    assert api.count(*SERVERS_ROUTE) == 0


def test_requests_reuse_cached_token(client_factory) -> None:
    client, api = client_factory({
        SERVERS_ROUTE: json_reply([]),
        ("GET", "/api/servers/a/data"): json_reply(domain_payload("play.example.com")),
    })

    async def run():
        await client.list_servers()
        await client.fetch_domain("a")

    asyncio.run(run())
    assert api.count(*TOKEN_ROUTE) == 1


def test_fetch_domain_returns_value(client_factory) -> None:
    client, _api = client_factory({
        ("GET", "/api/servers/srv-1/data"): json_reply(domain_payload(" play.example.com ")),
    })

    domain = asyncio.run(client.fetch_domain("srv-1"))

    assert domain == management_client.ServerDomain("srv-1", "play.example.com")


@pytest.mark.parametrize(
    "payload",
    [
        domain_payload(""),
        domain_payload(None),
        {"data": {}},
        {"data": {"other.variable": {"value": "x"}}},
        {},
    ],
)
def test_fetch_domain_unset(client_factory, payload) -> None:
    client, _api = client_factory({("GET", "/api/servers/a/data"): json_reply(payload)})
    with pytest.raises(NoDomainAssigned) as excinfo:
        asyncio.run(client.fetch_domain("a"))
    assert excinfo.value.server_id == "a"


@pytest.mark.parametrize(
    "reply",
    [
        text_reply(404, "missing"),
        json_reply(["not", "an", "object"]),
        json_reply({"data": "oops"}),
        json_reply(domain_payload(42)),
    ],
)
def test_fetch_domain_failures_raise_api_error(client_factory, reply) -> None:
    client, _api = client_factory({("GET", "/api/servers/a/data"): reply})
    with pytest.raises(APIError):
        asyncio.run(client.fetch_domain("a"))


def test_cancelled_fetch_does_not_complete(client_factory) -> None:
    completed = []

    async def slow_data(_request):
        await asyncio.sleep(0.3)
        completed.append(True)
        return httpx.Response(200, json=domain_payload("a.example.com"))

    client, api = client_factory({("GET", "/api/servers/a/data"): slow_data})

    async def abandon():
        await client.ensure_token()
        task = asyncio.create_task(client.fetch_domain("a"))
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        await asyncio.sleep(0.35)

    asyncio.run(abandon())
    assert api.count("GET", "/api/servers/a/data") == 1
    assert completed == []


def test_no_domain_assigned_is_not_api_error() -> None:
    assert not issubclass(NoDomainAssigned, APIError)


def test_close_closes_http_client(client_factory) -> None:
    client, _api = client_factory({})
    asyncio.run(client.close())
    assert client._http.is_closed is True
