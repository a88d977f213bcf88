# Shared logging helpers to keep client/resolver/router modules focused on flow.

import logging


def log_plugin_initializing() -> None:
    logging.info("HostRedirect initializing...")


def log_plugin_initialized(resolver_name: str) -> None:
    logging.info("HostRedirect initialized with %s", resolver_name)


def log_token_renewed(expires_in: float) -> None:
    logging.debug("Access token renewed, expires in %s seconds", expires_in)


def log_oauth_token_request_failed(exc: Exception) -> None:
    logging.error("OAuth token request failed: %s", exc)


def log_oauth_token_response_details(status_code: int, response_body: str) -> None:
    logging.error("Response status: %s, Response body: %s", status_code, response_body)


def log_api_request_failed(path: str, exc: Exception) -> None:
    logging.error("Management API request to %s failed: %s", path, exc)


def log_server_listing_failed(exc: Exception) -> None:
    logging.warning("Server listing failed, no host mapping available: %s", exc)


def log_malformed_server_entry(entry: object) -> None:
    logging.warning("Skipping server listing entry without identifier: %r", entry)


def log_domain_fetch_failed(server_id: str, exc: Exception) -> None:
    logging.warning("Domain lookup for server %s failed: %s", server_id, exc)


def log_domain_unset(server_id: str) -> None:
    logging.debug("Server %s has no domain assigned", server_id)


def log_duplicate_domain(domain: str, previous: str, server_id: str) -> None:
    logging.warning(
        "Domain %s is claimed by servers %s and %s; using %s",
        domain,
        previous,
        server_id,
        server_id,
    )


def log_mapping_built(size: int, server_count: int) -> None:
    logging.debug("Built host mapping with %s entries from %s servers", size, server_count)


def log_no_server_mapping(host: str) -> None:
    logging.info("No server mapping for host: %s", host)


def log_server_not_found(key: str) -> None:
    logging.info("Server not found: %s", key)


def log_redirecting_player(username: str | None, server: str) -> None:
    logging.info("Redirecting player %s to server %s", username, server)


def log_player_disconnected(username: str | None, reason: str, detail: str) -> None:
    logging.info("Disconnecting player %s (%s): %s", username, reason, detail)


def log_resolver_error(host: str, exc: BaseException) -> None:
    logging.error("Resolver failed for host %s: %s", host, exc)


def log_resolver_timeout(host: str, timeout: float) -> None:
    logging.warning("Resolution for host %s timed out after %s seconds", host, timeout)


def log_unexpected_error(exc: Exception) -> None:
    logging.exception("Unexpected error: %s", exc)


def log_shutting_down() -> None:
    logging.info("Shutting down...")
