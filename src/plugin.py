from typing import Any, Awaitable, Callable, Protocol

import config
import redirect_logging
from auth import Credentials
from constants import MODE_DYNAMIC
from management_client import ManagementAPIClient
from mapping import MappingBuilder
from registry import ServerRegistry
from resolvers import HostResolver, build_resolver, select_mode
from router import ConnectionRouter

CHOOSE_INITIAL_SERVER_EVENT = "choose_initial_server"


# The proxy runtime the plugin is installed into.
class Proxy(Protocol):
    servers: ServerRegistry

    def subscribe(self, event: str, handler: Callable[[Any], Awaitable[Any]]) -> None:
        ...


def build_client() -> ManagementAPIClient:
    if not config.HOSTREDIRECT_URL:
        raise ValueError("HOSTREDIRECT_URL must be set for dynamic resolution")
    if not config.HOSTREDIRECT_CLIENTID or not config.HOSTREDIRECT_CLIENTSECRET:
        raise ValueError("HOSTREDIRECT_CLIENTID and HOSTREDIRECT_CLIENTSECRET must be set")

    credentials = Credentials(
        client_id=config.HOSTREDIRECT_CLIENTID,
        client_secret=config.HOSTREDIRECT_CLIENTSECRET,
        base_url=config.HOSTREDIRECT_URL,
    )
    return ManagementAPIClient(
        credentials,
        token_margin_seconds=config.HOSTREDIRECT_TOKEN_EXPIRY_MARGIN_SECONDS,
        timeout=config.HTTP_TIMEOUT_SECONDS,
    )


def build_configured_resolver() -> HostResolver:
    # Selection is fixed for the process lifetime.
    mode = select_mode(
        config.HOSTREDIRECT_MODE,
        config.HOSTREDIRECT_URL,
        config.HOSTREDIRECT_DOMAIN,
    )
    builder = None
    if mode == MODE_DYNAMIC:
        builder = MappingBuilder(build_client(), concurrency=config.HOSTREDIRECT_FETCH_CONCURRENCY)
    return build_resolver(mode, builder=builder, base_domain=config.HOSTREDIRECT_DOMAIN)


def build_router(registry: ServerRegistry) -> ConnectionRouter:
    return ConnectionRouter(
        build_configured_resolver(),
        registry,
        timeout=config.HOSTREDIRECT_RESOLUTION_TIMEOUT_SECONDS,
    )


class HostRedirectPlugin:
    name = "HostRedirect"

    def init(self, proxy: Proxy) -> ConnectionRouter:
        redirect_logging.log_plugin_initializing()
        router = build_router(proxy.servers)
        proxy.subscribe(CHOOSE_INITIAL_SERVER_EVENT, router.on_choose_initial_server)
        redirect_logging.log_plugin_initialized(router.resolver.name)
        return router
