"""Exceptions raised by sftpmirror."""

from typing import Optional


class MirrorError(Exception):
    """Base exception for all sftpmirror errors."""


class MirrorConfigError(MirrorError):
    """Raised when required configuration is missing or invalid."""


class MirrorConnectionError(MirrorError):
    """Raised when the SSH/SFTP session cannot be established."""


class MirrorSyncError(MirrorError):
    """Raised when a folder's sync has to stop.

    Attributes:
        path: The remote or local path the failure relates to
    """

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class MirrorTransferError(MirrorSyncError):
    """Raised when a remote file cannot be opened, read or written locally."""


class MirrorDirectoryError(MirrorSyncError):
    """Raised when a local directory cannot be created."""
