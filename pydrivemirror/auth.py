"""OAuth2 client-credentials authentication for Microsoft Graph."""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from .config import config
from .exceptions import (
    GraphAuthenticationError,
    GraphConfigError,
    GraphNetworkError,
)

logger = logging.getLogger(__name__)

TOKEN_URL_TEMPLATE = "https://login.microsoftonline.com/{tenant_id}/oauth2/v2.0/token"
GRAPH_SCOPE = "https://graph.microsoft.com/.default"

# Refresh this many seconds before the token actually expires
EXPIRY_MARGIN = 60.0


class ClientCredentialsAuth:
    """Fetches and caches an app-only access token."""

    def __init__(
        self,
        tenant_id: str | None = None,
        client_id: str | None = None,
        client_secret: str | None = None,
        scope: str = GRAPH_SCOPE,
        timeout: float = 30.0,
        http_client: httpx.Client | None = None,
    ):
        """Initialize the token provider.

        Args:
            tenant_id: Azure AD tenant (uses config if not provided)
            client_id: Application (client) ID (uses config if not provided)
            client_secret: Client secret (uses config if not provided)
            scope: OAuth scope to request
            timeout: Token request timeout in seconds
            http_client: Optional httpx client (mainly for tests)
        """
        self.tenant_id = tenant_id or config.tenant_id
        self.client_id = client_id or config.client_id
        self.client_secret = client_secret or config.client_secret
        self.scope = scope
        self.timeout = timeout

        if not self.tenant_id or not self.client_id or not self.client_secret:
            raise GraphConfigError(
                "Missing auth data. Please set TENANT_ID, CLIENT_ID and "
                "CLIENT_SECRET environment variables."
            )

        self._http = http_client
        self._token: str | None = None
        self._expires_at = 0.0

    @property
    def token_url(self) -> str:
        return TOKEN_URL_TEMPLATE.format(tenant_id=self.tenant_id)

    def _fetch_token(self) -> dict[str, Any]:
        data = {
            "grant_type": "client_credentials",
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "scope": self.scope,
        }
        try:
            if self._http is not None:
                response = self._http.post(self.token_url, data=data)
            else:
                response = httpx.post(self.token_url, data=data, timeout=self.timeout)
        except httpx.RequestError as e:
            raise GraphNetworkError(f"Network error while requesting token: {e}") from e

        if response.status_code != 200:
            detail = ""
            try:
                payload = response.json()
                if isinstance(payload, dict):
                    detail = payload.get("error_description") or payload.get(
                        "error", ""
                    )
            except ValueError:
                pass
            message = f"Token request failed with status {response.status_code}"
            if detail:
                message = f"{message}: {detail}"
            raise GraphAuthenticationError(message)

        try:
            payload = response.json()
        except ValueError as e:
            raise GraphAuthenticationError("Token endpoint returned invalid JSON") from e
        if not isinstance(payload, dict) or "access_token" not in payload:
            raise GraphAuthenticationError("Token endpoint returned no access token")
        return payload

    def get_token(self) -> str:
        """Return a valid access token, requesting a new one if needed."""
        if self._token is None or time.monotonic() >= self._expires_at:
            payload = self._fetch_token()
            self._token = payload["access_token"]
            expires_in = float(payload.get("expires_in", 3600))
            self._expires_at = time.monotonic() + max(expires_in - EXPIRY_MARGIN, 0)
            logger.debug("Acquired access token (expires in %.0fs)", expires_in)
        return self._token

    def headers(self) -> dict[str, str]:
        """Authorization header for API requests."""
        return {"Authorization": f"Bearer {self.get_token()}"}
