"""Remote traversal data model for sync operations."""

import posixpath
import stat
from dataclasses import dataclass
from typing import Any, Optional

import paramiko

# Errors a remote read or listing may raise once the session is up
REMOTE_ERRORS = (OSError, paramiko.SSHException)


@dataclass(frozen=True)
class RemoteEntry:
    """Represents one remote file or directory seen during traversal."""

    path: str
    """Absolute remote path"""

    is_directory: bool
    """Whether the entry is a directory"""

    size: int = 0
    """File size in bytes (0 for directories)"""

    @classmethod
    def from_attributes(cls, path: str, attrs: Any) -> "RemoteEntry":
        """Create a RemoteEntry from SFTP attributes.

        Args:
            path: Absolute remote path of the entry
            attrs: Object with ``st_mode`` and ``st_size`` (e.g.
                ``paramiko.SFTPAttributes``)

        Returns:
            RemoteEntry instance
        """
        # Symlinks are not followed, so they are reported as non-directories
        is_directory = stat.S_ISDIR(attrs.st_mode or 0)
        return cls(
            path=path,
            is_directory=is_directory,
            size=0 if is_directory else (attrs.st_size or 0),
        )


@dataclass(frozen=True)
class WalkStep:
    """One traversal step: either an entry or the error that replaced it."""

    path: str
    """Remote path this step refers to"""

    entry: Optional[RemoteEntry] = None
    """Entry metadata when the step succeeded"""

    error: Optional[Exception] = None
    """Listing or stat error when the step failed"""

    @property
    def ok(self) -> bool:
        """True if the step carries an entry."""
        return self.error is None and self.entry is not None


def relative_remote_path(path: str, remote_root: str) -> str:
    """Strip the remote root prefix from a remote path.

    Args:
        path: Absolute remote path of an entry
        remote_root: Configured remote root

    Returns:
        Relative path without leading slashes ("" for the root itself)

    Examples:
        >>> relative_remote_path("/data/sub/b.txt", "/data")
        'sub/b.txt'
        >>> relative_remote_path("/data", "/data")
        ''
        >>> relative_remote_path("/data/a.txt", "/data/")
        'a.txt'
    """
    root = posixpath.normpath(remote_root)
    path = posixpath.normpath(path)
    if path == root:
        return ""

    prefix = root if root.endswith("/") else root + "/"
    if path.startswith(prefix):
        return path[len(prefix) :]
    # Outside the root (e.g. a relative root such as ".")
    return path.lstrip("/")
