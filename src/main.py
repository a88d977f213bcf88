import asyncio
import logging
import sys
from dataclasses import dataclass

import config
import redirect_logging
from plugin import build_router
from registry import RegisteredServer, StaticServerRegistry
from resolvers import Resolved


# Stand-in connection used to dry-run routing decisions from the command line.
@dataclass
class DryRunConnection:
    virtual_host: str
    username: str | None = None
    initial_server: RegisteredServer | None = None
    disconnect_message: str | None = None

    def set_initial_server(self, server: RegisteredServer) -> None:
        self.initial_server = server

    def disconnect(self, message: str) -> None:
        self.disconnect_message = message


async def amain(hosts: list[str]) -> int:
    registry = StaticServerRegistry.from_mapping(config.HOSTREDIRECT_SERVERS)
    router = build_router(registry)
    misses = 0
    try:
        for host in hosts:
            connection = DryRunConnection(virtual_host=host)
            resolution = await router.on_choose_initial_server(connection)
            if isinstance(resolution, Resolved):
                print(f"{host} -> {resolution.server.name} ({resolution.server.address})")
            else:
                misses += 1
                print(f"{host} -> not found: {resolution.reason.value} ({connection.disconnect_message})")
    finally:
        await router.resolver.close()
    return 1 if misses else 0


if __name__ == '__main__':
    # Setup logging
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)

    exit_code = 1
    try:
        exit_code = loop.run_until_complete(amain(sys.argv[1:]))
    except KeyboardInterrupt:
        redirect_logging.log_shutting_down()
    except Exception as e:
        redirect_logging.log_unexpected_error(e)
    finally:
        loop.close()
    sys.exit(exit_code)
