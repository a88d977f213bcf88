"""Host-to-server resolution strategies.

Each strategy turns a cleared virtual host into either a ``Resolved`` server
from the registry or a ``NotFound`` carrying the reason for the miss. The
active strategy is chosen once from configuration by ``build_resolver``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

import redirect_logging
from constants import (
    DISCONNECT_NO_MAPPING,
    DISCONNECT_NO_SPLIT,
    DISCONNECT_RESOLVER_ERROR,
    DISCONNECT_UNKNOWN_SERVER,
    DISCONNECT_UNREGISTERED,
    MODE_AUTO,
    MODE_DYNAMIC,
    MODE_FIRST_LABEL,
    MODE_SUFFIX,
)
from mapping import MappingBuilder
from registry import RegisteredServer, ServerRegistry, find_by_address
from virtual_host import clear_virtual_host


class NotFoundReason(str, Enum):
    NO_MAPPING = "no mapping for host"
    UNREGISTERED = "mapping pointed at unregistered server"
    NO_SPLIT = "no split possible"
    UNKNOWN_SERVER = "no registered server with that name"
    RESOLVER_ERROR = "resolver failure"


_DISCONNECT_MESSAGES = {
    NotFoundReason.NO_MAPPING: DISCONNECT_NO_MAPPING,
    NotFoundReason.UNREGISTERED: DISCONNECT_UNREGISTERED,
    NotFoundReason.NO_SPLIT: DISCONNECT_NO_SPLIT,
    NotFoundReason.UNKNOWN_SERVER: DISCONNECT_UNKNOWN_SERVER,
    NotFoundReason.RESOLVER_ERROR: DISCONNECT_RESOLVER_ERROR,
}


@dataclass(frozen=True)
class Resolved:
    server: RegisteredServer
    key: str


@dataclass(frozen=True)
class NotFound:
    reason: NotFoundReason
    # The host or server name that was attempted.
    key: str
    detail: str | None = None

    @property
    def message(self) -> str:
        return _DISCONNECT_MESSAGES[self.reason].format(key=self.key)


Resolution = Resolved | NotFound


class HostResolver(ABC):
    name = "resolver"

    @abstractmethod
    async def resolve(self, host: str, registry: ServerRegistry) -> Resolution:
        """Resolve a virtual host to a registered server."""

    async def close(self) -> None:
        return None


def _lookup_by_name(key: str, registry: ServerRegistry) -> Resolution:
    server = registry.get(key)
    if server is None:
        redirect_logging.log_server_not_found(key)
        return NotFound(NotFoundReason.UNKNOWN_SERVER, key)
    return Resolved(server, key)


class DynamicResolver(HostResolver):
    """Resolve through the host mapping published by the management API.

    The mapping is rebuilt on every call; there is no caching across
    resolution events.
    """

    name = "dynamic"

    def __init__(self, builder: MappingBuilder):
        self._builder = builder

    async def close(self) -> None:
        await self._builder.close()

    async def resolve(self, host: str, registry: ServerRegistry) -> Resolution:
        host = clear_virtual_host(host)
        mapping = await self._builder.build()

        server_id = mapping.get(host)
        if server_id is None:
            redirect_logging.log_no_server_mapping(host)
            return NotFound(NotFoundReason.NO_MAPPING, host)

        server = find_by_address(registry, server_id)
        if server is None:
            redirect_logging.log_server_not_found(server_id)
            return NotFound(NotFoundReason.UNREGISTERED, server_id, detail=f"host {host}")
        return Resolved(server, host)


class SuffixResolver(HostResolver):
    # "lobby.example.net" with base domain "example.net" -> "lobby"
    name = "suffix"

    def __init__(self, base_domain: str):
        base_domain = base_domain.strip().strip(".").lower()
        if not base_domain:
            raise ValueError("SuffixResolver requires a base domain")
        self.base_domain = base_domain
        self._separator = f".{base_domain}"

    async def resolve(self, host: str, registry: ServerRegistry) -> Resolution:
        host = clear_virtual_host(host)
        key, separator, _ = host.partition(self._separator)
        if not separator or not key:
            return NotFound(NotFoundReason.NO_SPLIT, host, detail=f"expected *{self._separator}")
        return _lookup_by_name(key, registry)


class FirstLabelResolver(HostResolver):
    # "lobby.anything.tld" -> "lobby"
    name = "first_label"

    async def resolve(self, host: str, registry: ServerRegistry) -> Resolution:
        host = clear_virtual_host(host)
        key, separator, _ = host.partition(".")
        if not separator or not key:
            return NotFound(NotFoundReason.NO_SPLIT, host)
        return _lookup_by_name(key, registry)


def select_mode(mode: str, base_url: str | None, base_domain: str | None) -> str:
    if mode != MODE_AUTO:
        return mode
    if base_url:
        return MODE_DYNAMIC
    if base_domain:
        return MODE_SUFFIX
    return MODE_FIRST_LABEL


def build_resolver(
    mode: str,
    builder: MappingBuilder | None = None,
    base_domain: str | None = None,
) -> HostResolver:
    match mode:
        case 'dynamic':
            if builder is None:
                raise ValueError("Dynamic resolution requires a management API client")
            resolver = DynamicResolver(builder)

        case 'suffix':
            if not base_domain:
                raise ValueError("HOSTREDIRECT_DOMAIN must be set for suffix resolution")
            resolver = SuffixResolver(base_domain)

        case 'first_label':
            resolver = FirstLabelResolver()

        case _:
            raise ValueError(f"Invalid HOSTREDIRECT_MODE: {mode}")

    logging.debug("Selected %s resolver", resolver.name)
    return resolver
