import asyncio
from collections.abc import Mapping
from types import MappingProxyType

import redirect_logging
from errors import NoDomainAssigned
from management_client import ManagementAPIClient, ServerDomain, ServerSummary
from virtual_host import clear_virtual_host

HostServerMap = Mapping[str, str]

EMPTY_MAP: HostServerMap = MappingProxyType({})


# Aggregates the management API into a host -> server identifier table.
class MappingBuilder:
    def __init__(self, client: ManagementAPIClient, concurrency: int = 8):
        self._client = client
        self._concurrency = max(1, concurrency)

    async def close(self) -> None:
        await self._client.close()

    async def build(self) -> HostServerMap:
        try:
            summaries = await self._client.list_servers()
        except Exception as e:
            redirect_logging.log_server_listing_failed(e)
            return EMPTY_MAP

        semaphore = asyncio.Semaphore(self._concurrency)
        results = await asyncio.gather(
            *(self._fetch(semaphore, summary) for summary in summaries)
        )

        # Applied in listing order: a later server claiming the same domain wins.
        mapping: dict[str, str] = {}
        for result in results:
            if result is None:
                continue
            domain = clear_virtual_host(result.domain)
            if not domain:
                continue
            previous = mapping.get(domain)
            if previous is not None and previous != result.server_identifier:
                redirect_logging.log_duplicate_domain(domain, previous, result.server_identifier)
            mapping[domain] = result.server_identifier

        redirect_logging.log_mapping_built(len(mapping), len(summaries))
        return MappingProxyType(mapping)

    async def _fetch(self, semaphore: asyncio.Semaphore, summary: ServerSummary) -> ServerDomain | None:
        async with semaphore:
            try:
                return await self._client.fetch_domain(summary.identifier)
            except NoDomainAssigned:
                redirect_logging.log_domain_unset(summary.identifier)
            except Exception as e:
                redirect_logging.log_domain_fetch_failed(summary.identifier, e)
        return None
