"""Errors raised by the management API client.

Resolution misses are not exceptions; see ``resolvers.NotFound``.
"""


class HostRedirectError(Exception):
    """Base exception for host redirect failures."""

    pass


class AuthError(HostRedirectError):
    """Raised when the client-credentials token exchange fails."""

    pass


class APIError(HostRedirectError):
    """Raised when a server listing or metadata call fails."""

    pass


class NoDomainAssigned(HostRedirectError):
    """Raised when a server has no routing domain configured.

    This is a normal "unset" state reported by a valid response, not a
    transport failure.
    """

    def __init__(self, server_id: str):
        super().__init__(f"No domain assigned to server '{server_id}'")
        self.server_id = server_id
