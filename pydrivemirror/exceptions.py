"""Exceptions raised by pydrivemirror."""


class GraphAPIError(Exception):
    """Base exception for Microsoft Graph API errors."""

    pass


class GraphConfigError(GraphAPIError):
    """Required configuration (credentials, drive URL) is missing."""

    pass


class GraphAuthenticationError(GraphAPIError):
    """Token request failed or the token was rejected."""

    pass


class GraphPermissionError(GraphAPIError):
    """Access to the requested resource is forbidden."""

    pass


class GraphNotFoundError(GraphAPIError):
    """The requested drive item does not exist."""

    pass


class GraphRateLimitError(GraphAPIError):
    """The API throttled the request."""

    pass


class GraphNetworkError(GraphAPIError):
    """A transport level error occurred."""

    pass


class GraphInvalidResponseError(GraphAPIError):
    """The API returned a payload that could not be parsed."""

    pass


class GraphDownloadError(GraphAPIError):
    """Streaming a file to disk failed."""

    pass


class SyncError(Exception):
    """Base exception for mirror runs."""

    pass


class InvalidEntryError(SyncError):
    """A remote listing item cannot be turned into a tree entry."""

    pass


class TypeConflictError(SyncError):
    """A path is a file on one side and a directory on the other.

    Raised after the conflicting local path has been removed. The run must
    stop: the remaining traversal and the orphan sweep are skipped.
    """

    def __init__(self, path: str, local_kind: str, remote_kind: str):
        self.path = path
        self.local_kind = local_kind
        self.remote_kind = remote_kind
        super().__init__(
            f"Entry type changed for {path}: "
            f"local {local_kind}, remote {remote_kind}"
        )
