"""pydrivemirror - mirror a OneDrive / SharePoint folder onto a local directory."""

from .api import GraphClient
from .auth import ClientCredentialsAuth
from .exceptions import (
    GraphAPIError,
    GraphAuthenticationError,
    GraphConfigError,
    GraphDownloadError,
    GraphInvalidResponseError,
    GraphNetworkError,
    GraphNotFoundError,
    GraphPermissionError,
    GraphRateLimitError,
    InvalidEntryError,
    SyncError,
    TypeConflictError,
)
from .models import EntryKind, TreeEntry

__all__ = [
    "GraphClient",
    "ClientCredentialsAuth",
    "EntryKind",
    "TreeEntry",
    "GraphAPIError",
    "GraphAuthenticationError",
    "GraphConfigError",
    "GraphDownloadError",
    "GraphInvalidResponseError",
    "GraphNetworkError",
    "GraphNotFoundError",
    "GraphPermissionError",
    "GraphRateLimitError",
    "InvalidEntryError",
    "SyncError",
    "TypeConflictError",
]
