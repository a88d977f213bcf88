import asyncio
from typing import Protocol

import redirect_logging
from registry import RegisteredServer, ServerRegistry
from resolvers import HostResolver, NotFound, NotFoundReason, Resolution, Resolved
from virtual_host import clear_virtual_host


# The proxy's view of a connection that is choosing its first backend.
class Connection(Protocol):
    virtual_host: str | None
    username: str | None

    def set_initial_server(self, server: RegisteredServer) -> None:
        ...

    def disconnect(self, message: str) -> None:
        ...


# Invoked once per connection when the proxy picks the initial server.
class ConnectionRouter:
    def __init__(
        self,
        resolver: HostResolver,
        registry: ServerRegistry,
        timeout: float | None = None,
    ):
        self.resolver = resolver
        self.registry = registry
        self.timeout = timeout

    async def on_choose_initial_server(self, connection: Connection) -> Resolution:
        host = clear_virtual_host(connection.virtual_host)
        username = getattr(connection, "username", None)

        resolution = await self._resolve(host)

        if isinstance(resolution, Resolved):
            connection.set_initial_server(resolution.server)
            redirect_logging.log_redirecting_player(username, resolution.server.name)
            return resolution

        redirect_logging.log_player_disconnected(
            username,
            resolution.reason.value,
            resolution.detail or resolution.key,
        )
        connection.disconnect(resolution.message)
        return resolution

    async def _resolve(self, host: str) -> Resolution:
        try:
            if self.timeout:
                return await asyncio.wait_for(
                    self.resolver.resolve(host, self.registry),
                    timeout=self.timeout,
                )
            return await self.resolver.resolve(host, self.registry)
        except asyncio.TimeoutError:
            redirect_logging.log_resolver_timeout(host, self.timeout)
            return NotFound(NotFoundReason.RESOLVER_ERROR, host, detail="timed out")
        except Exception as e:
            redirect_logging.log_resolver_error(host, e)
            return NotFound(NotFoundReason.RESOLVER_ERROR, host, detail=str(e))
