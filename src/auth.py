import asyncio
from dataclasses import dataclass
from time import time

import httpx

import redirect_logging
from config import HTTP_TIMEOUT_SECONDS
from constants import TOKEN_PATH
from errors import AuthError


@dataclass(frozen=True)
class Credentials:
    client_id: str
    client_secret: str
    base_url: str


@dataclass(frozen=True)
class Token:
    access_token: str
    token_type: str
    expires_at: float

    @property
    def authorization(self) -> str:
        return f"{self.token_type} {self.access_token}"


async def request_token(
    http: httpx.AsyncClient,
    credentials: Credentials,
    timeout: float = HTTP_TIMEOUT_SECONDS
) -> tuple[str, str, float]:
    """
    Exchange the client credentials for an access token.
    Returns (access_token, token_type, expires_in) or raises AuthError.
    """
    data = {
        "grant_type": "client_credentials",
        "client_id": credentials.client_id,
        "client_secret": credentials.client_secret,
    }
    headers = {"Content-Type": "application/x-www-form-urlencoded"}

    try:
        response = await http.post(
            url=f"{credentials.base_url}{TOKEN_PATH}",
            data=data,
            headers=headers,
            timeout=timeout
        )
        response.raise_for_status()
        payload = response.json()
    except httpx.HTTPStatusError as e:
        redirect_logging.log_oauth_token_request_failed(e)
        redirect_logging.log_oauth_token_response_details(
            e.response.status_code,
            e.response.text
        )
        raise AuthError(f"Token request failed: {e}") from e
    except httpx.HTTPError as e:
        redirect_logging.log_oauth_token_request_failed(e)
        raise AuthError(f"Token request failed: {e}") from e
    except ValueError as e:
        redirect_logging.log_oauth_token_request_failed(e)
        raise AuthError(f"Invalid token response: {e}") from e

    if not isinstance(payload, dict) or not payload.get("access_token"):
        raise AuthError("OAuth token response missing access_token")

    try:
        expires_in = float(payload.get("expires_in", 0))
    except (TypeError, ValueError) as e:
        raise AuthError(f"Invalid expires_in in token response: {payload.get('expires_in')!r}") from e

    return payload["access_token"], payload.get("token_type") or "Bearer", expires_in


# Holds the single client-credentials token and renews it on demand.
class TokenCache:
    def __init__(
        self,
        http: httpx.AsyncClient,
        credentials: Credentials,
        margin_seconds: float = 0.0,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        time_fn=time,
    ):
        self._http = http
        self._credentials = credentials
        self._margin = margin_seconds
        self._timeout = timeout
        self._time_fn = time_fn
        self._token: Token | None = None
        # Serializes renewal so concurrent callers share one exchange.
        self._lock = asyncio.Lock()

    @property
    def token(self) -> Token | None:
        return self._token

    def is_valid(self, token: Token | None) -> bool:
        if token is None:
            return False
        return self._time_fn() < token.expires_at - self._margin

    def invalidate(self) -> None:
        self._token = None

    async def ensure_valid(self) -> Token:
        token = self._token
        if self.is_valid(token):
            return token

        async with self._lock:
            # Another caller may have renewed while we waited.
            token = self._token
            if self.is_valid(token):
                return token
            token = await self._renew()
            self._token = token
            return token

    async def _renew(self) -> Token:
        access_token, token_type, expires_in = await request_token(
            self._http,
            self._credentials,
            self._timeout,
        )
        redirect_logging.log_token_renewed(expires_in)
        return Token(
            access_token=access_token,
            token_type=token_type,
            expires_at=self._time_fn() + expires_in,
        )
