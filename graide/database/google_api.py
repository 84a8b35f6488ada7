from __future__ import annotations
import logging
from typing import Any, Optional, Protocol

import httpx

from graide.core.errors import AuthExpiredError, BackendError, NotAuthenticatedError

logger = logging.getLogger("graide.google")

# reported for network failures and timeouts, where no response arrived
UNREACHABLE_STATUS = 503


class TokenProvider(Protocol):
    async def get_token(self) -> Optional[str]:
        ...


class StaticTokenProvider:
    """Hands out one fixed OAuth access token (or none)."""

    def __init__(self, token: Optional[str]) -> None:
        self._token = token

    async def get_token(self) -> Optional[str]:
        return self._token or None


class GoogleApiClient:
    """Authenticated JSON calls against one Google REST API root.

    Every call asks the token provider first; a missing token fails before
    anything goes on the wire.
    """

    api_name = "Google API"

    def __init__(self, http: httpx.AsyncClient, tokens: TokenProvider, base_url: str) -> None:
        self.http = http
        self.tokens = tokens
        self.base_url = base_url.rstrip("/")

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[dict[str, Any]] = None,
        json: Any = None,
    ) -> Any:
        token = await self.tokens.get_token()
        if not token:
            raise NotAuthenticatedError()

        try:
            response = await self.http.request(
                method,
                url,
                params=params,
                json=json,
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as exc:
            logger.warning(
                "%s unreachable",
                self.api_name,
                extra={"method": method, "url": url, "error": repr(exc)},
            )
            raise BackendError(UNREACHABLE_STATUS, str(exc) or type(exc).__name__, api=self.api_name) from exc

        if response.status_code == 401:
            raise AuthExpiredError()
        if not response.is_success:
            logger.warning(
                "%s call failed",
                self.api_name,
                extra={"method": method, "url": url, "status": response.status_code},
            )
            raise BackendError(response.status_code, response.text, api=self.api_name)

        if not response.content:
            return {}
        return response.json()
