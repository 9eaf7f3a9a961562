"""API client for Microsoft Graph drives."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, NoReturn, Protocol
from urllib.parse import quote

import httpx

from .config import config
from .exceptions import (
    GraphAPIError,
    GraphAuthenticationError,
    GraphDownloadError,
    GraphInvalidResponseError,
    GraphNetworkError,
    GraphNotFoundError,
    GraphPermissionError,
    GraphRateLimitError,
)
from .utils import DEFAULT_PAGE_SIZE, DOWNLOAD_CHUNK_SIZE

logger = logging.getLogger(__name__)


class TokenProvider(Protocol):
    def headers(self) -> dict[str, str]: ...


class GraphClient:
    """Client for listing and downloading drive items through Microsoft Graph.

    Every request is attempted once; failures surface as ``GraphAPIError``
    subclasses.
    """

    def __init__(
        self,
        auth: TokenProvider,
        drive_api_base: str | None = None,
        timeout: float = 30.0,
        page_size: int = DEFAULT_PAGE_SIZE,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize Graph API client.

        Args:
            auth: Token provider supplying the Authorization header
            drive_api_base: Drive URL (uses config if not provided)
            timeout: Request timeout in seconds (default: 30.0)
            page_size: Number of children requested per page
            transport: Optional httpx transport (mainly for tests)
        """
        self.auth = auth
        self.drive_api_base = (drive_api_base or config.drive_api_base).rstrip("/")
        self.timeout = timeout
        self.page_size = page_size
        self._transport = transport
        self._client: httpx.Client | None = None

    def _get_client(self) -> httpx.Client:
        """Get or create the httpx client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    def close(self) -> None:
        """Close the client and release connections."""
        if self._client is not None and not self._client.is_closed:
            self._client.close()
            self._client = None

    def __enter__(self) -> GraphClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _raise_for_status(self, e: httpx.HTTPStatusError) -> NoReturn:
        """Translate an HTTP error into the matching GraphAPIError."""
        status_code = e.response.status_code

        if status_code == 401:
            raise GraphAuthenticationError(
                "Access token rejected or unauthorized access"
            ) from e
        elif status_code == 403:
            raise GraphPermissionError(
                "Access forbidden - check the application permissions"
            ) from e
        elif status_code == 404:
            raise GraphNotFoundError(f"Item not found: {e.request.url}") from e
        elif status_code == 429:
            raise GraphRateLimitError(
                "Rate limit exceeded - please try again later"
            ) from e

        error_msg = f"API request failed with status {status_code}"
        try:
            error_data = e.response.json()
            if isinstance(error_data, dict):
                error = error_data.get("error")
                if isinstance(error, dict) and error.get("message"):
                    error_msg = f"{error_msg}: {error['message']}"
        except ValueError:
            # Body is not JSON, keep the status based message
            pass
        raise GraphAPIError(error_msg) from e

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        """Make an authenticated API request.

        Args:
            method: HTTP method
            url: Absolute URL or path relative to the drive base
            **kwargs: Additional arguments passed to httpx

        Returns:
            Response JSON data

        Raises:
            GraphAPIError: If the request fails
        """
        if not url.startswith(("http://", "https://")):
            url = f"{self.drive_api_base}/{url.lstrip('/')}"

        headers = dict(kwargs.pop("headers", None) or {})
        headers.update(self.auth.headers())

        try:
            response = self._get_client().request(method, url, headers=headers, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            self._raise_for_status(e)
        except httpx.RequestError as e:
            raise GraphNetworkError(f"Network error: {e}") from e

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise GraphInvalidResponseError("Invalid JSON response from server") from e

    def _children_url(self, path: str) -> str:
        path = path.strip("/")
        if not path:
            return f"{self.drive_api_base}/root/children"
        return f"{self.drive_api_base}/root:/{quote(path)}:/children"

    def list_children(self, path: str) -> list[dict[str, Any]] | None:
        """List the children of a folder, following ``@odata.nextLink`` pages.

        Args:
            path: Folder path relative to the drive root ("" for the root)

        Returns:
            List of driveItem dictionaries, or None when the first response
            carries no enumerable ``value`` collection

        Raises:
            GraphInvalidResponseError: If a follow-up page has no ``value``
                list. A truncated listing would make the mirror delete the
                local entries of the missing pages.
        """
        logger.debug("Querying %s", path or "/")
        url: str | None = self._children_url(path)
        first_page = True
        params: dict[str, Any] | None = {"$top": self.page_size}
        items: list[dict[str, Any]] = []

        while url:
            result = self._request("GET", url, params=params)
            value = result.get("value") if isinstance(result, dict) else None
            if not isinstance(value, list):
                if first_page:
                    return None
                raise GraphInvalidResponseError(
                    f"Listing of '{path}' ended with a page without items"
                )
            items.extend(value)
            first_page = False
            url = result.get("@odata.nextLink")
            # nextLink already carries the query string
            params = None

        return items

    def download_file(self, url: str | None, output_path: Path) -> Path:
        """Stream a file from a pre-authenticated download URL to disk.

        On failure the partially written file is removed.

        Args:
            url: ``@microsoft.graph.downloadUrl`` of the item
            output_path: Destination path

        Returns:
            Path where the file was saved

        Raises:
            GraphDownloadError: If the URL, the server or the disk write fails
            GraphNetworkError: If the connection fails
        """
        if not url:
            raise GraphDownloadError(f"No download URL for {output_path}")

        logger.info("Downloading %s", output_path)
        client = self._get_client()
        try:
            # The URL embeds its own credentials, no Authorization header
            with client.stream("GET", url) as response:
                response.raise_for_status()
                with open(output_path, "wb") as f:
                    for chunk in response.iter_bytes(chunk_size=DOWNLOAD_CHUNK_SIZE):
                        if chunk:
                            f.write(chunk)
            logger.debug("Finished %s", output_path)
            return output_path
        except httpx.HTTPStatusError as e:
            output_path.unlink(missing_ok=True)
            raise GraphDownloadError(f"Download failed: {e}") from e
        except httpx.RequestError as e:
            output_path.unlink(missing_ok=True)
            raise GraphNetworkError(f"Network error during download: {e}") from e
        except (httpx.InvalidURL, httpx.StreamError) as e:
            output_path.unlink(missing_ok=True)
            raise GraphDownloadError(f"Download failed: {e}") from e
        except OSError as e:
            output_path.unlink(missing_ok=True)
            raise GraphDownloadError(f"Failed to write file: {e}") from e
