from dataclasses import dataclass
from typing import Iterable, Protocol


@dataclass(frozen=True)
class RegisteredServer:
    name: str
    address: str


# Read-only view of the proxy's registered backends.
class ServerRegistry(Protocol):
    def get(self, name: str) -> RegisteredServer | None:
        ...

    def servers(self) -> Iterable[RegisteredServer]:
        ...


class StaticServerRegistry:
    def __init__(self, servers: Iterable[RegisteredServer] = ()):
        self._servers: dict[str, RegisteredServer] = {}
        for server in servers:
            self.register(server)

    @classmethod
    def from_mapping(cls, mapping: dict[str, str]) -> "StaticServerRegistry":
        return cls(RegisteredServer(name=name, address=address) for name, address in mapping.items())

    def register(self, server: RegisteredServer) -> None:
        self._servers[server.name] = server

    def get(self, name: str) -> RegisteredServer | None:
        return self._servers.get(name)

    def servers(self) -> list[RegisteredServer]:
        return list(self._servers.values())


def find_by_address(registry: ServerRegistry, address: str) -> RegisteredServer | None:
    # Linear scan, first exact match wins.
    for server in registry.servers():
        if server.address == address:
            return server
    return None
