import logging
from dataclasses import dataclass
from typing import Any

import httpx

import redirect_logging
from auth import Credentials, Token, TokenCache
from config import HTTP_TIMEOUT_SECONDS
from constants import DOMAIN_DATA_KEY, SERVER_DATA_PATH, SERVERS_PATH
from errors import APIError, NoDomainAssigned


@dataclass(frozen=True)
class ServerSummary:
    identifier: str


@dataclass(frozen=True)
class ServerDomain:
    server_identifier: str
    domain: str


def parse_server_summaries(payload: Any) -> list[ServerSummary]:
    # Accept a bare array or the search envelope {"servers": [...]}.
    if isinstance(payload, dict):
        payload = payload.get("servers")
    if not isinstance(payload, list):
        raise APIError("Server listing is not a list")

    summaries = []
    for item in payload:
        identifier = item.get("identifier") if isinstance(item, dict) else None
        if not isinstance(identifier, str) or not identifier:
            # One malformed entry only drops that entry.
            redirect_logging.log_malformed_server_entry(item)
            continue
        summaries.append(ServerSummary(identifier=identifier))
    return summaries


def parse_server_domain(server_id: str, payload: Any) -> ServerDomain:
    if not isinstance(payload, dict):
        raise APIError(f"Server data for {server_id} is not an object")

    # Unset variables are omitted by the API, so missing keys mean "no domain".
    data = payload.get("data") or {}
    if not isinstance(data, dict):
        raise APIError(f"Server data for {server_id} has an invalid 'data' entry")
    entry = data.get(DOMAIN_DATA_KEY) or {}
    if not isinstance(entry, dict):
        raise APIError(f"Server data for {server_id} has an invalid '{DOMAIN_DATA_KEY}' entry")

    value = entry.get("value", "")
    if value is None:
        value = ""
    if not isinstance(value, str):
        raise APIError(f"Domain for server {server_id} is not a string: {value!r}")
    if not value.strip():
        raise NoDomainAssigned(server_id)
    return ServerDomain(server_identifier=server_id, domain=value.strip())


class ManagementAPIClient:
    def __init__(
        self,
        credentials: Credentials,
        http: httpx.AsyncClient | None = None,
        token_cache: TokenCache | None = None,
        token_margin_seconds: float = 0.0,
        timeout: float = HTTP_TIMEOUT_SECONDS,
    ):
        self.credentials = credentials
        self._http = http if http is not None else httpx.AsyncClient(timeout=timeout)
        self._timeout = timeout
        self.token_cache = token_cache or TokenCache(
            self._http,
            credentials,
            margin_seconds=token_margin_seconds,
            timeout=timeout,
        )

    async def ensure_token(self) -> Token:
        return await self.token_cache.ensure_valid()

    async def list_servers(self) -> list[ServerSummary]:
        payload = await self._get(SERVERS_PATH)
        return parse_server_summaries(payload)

    async def fetch_domain(self, server_id: str) -> ServerDomain:
        payload = await self._get(SERVER_DATA_PATH.format(server_id=server_id))
        return parse_server_domain(server_id, payload)

    async def _get(self, path: str) -> Any:
        token = await self.ensure_token()
        url = f"{self.credentials.base_url}{path}"
        headers = {
            "Authorization": token.authorization,
            "Accept": "application/json",
        }

        try:
            logging.debug(f"GET {url}")
            response = await self._http.get(url, headers=headers, timeout=self._timeout)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            redirect_logging.log_api_request_failed(path, e)
            raise APIError(f"Request to {path} failed: {e}") from e
        except ValueError as e:
            redirect_logging.log_api_request_failed(path, e)
            raise APIError(f"Invalid JSON from {path}: {e}") from e

    async def close(self) -> None:
        await self._http.aclose()
