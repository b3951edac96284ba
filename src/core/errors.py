from __future__ import annotations


class ReadManyFilesError(Exception):
    """Base error for the file reading server."""


class ValidationError(ReadManyFilesError):
    """Raised when user input is invalid."""


class AccessDeniedError(ReadManyFilesError):
    """Raised when an operation tries to access data outside allowed scope."""


class NotFoundError(ReadManyFilesError):
    """Raised when a requested resource is not found."""


class DiscoveryError(ReadManyFilesError):
    """Raised when file discovery cannot enumerate a workspace root.

    Fatal to the whole call: bad root, traversal I/O error or cancellation.
    """
