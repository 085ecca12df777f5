"""sftpmirror - mirror remote SFTP directory trees onto local storage."""

__version__ = "1.0.0"

APP_NAME = "sftpmirror"

from .config import (  # noqa: E402
    AuthMethod,
    HostKeyPolicy,
    MirrorConfig,
    SyncFolder,
    load_config,
)
from .exceptions import (  # noqa: E402
    MirrorConfigError,
    MirrorConnectionError,
    MirrorDirectoryError,
    MirrorError,
    MirrorSyncError,
    MirrorTransferError,
)
from .session import SftpSession  # noqa: E402
from .sync import SyncEngine, SyncSummary  # noqa: E402
from .utils import format_size  # noqa: E402

__all__ = [
    "APP_NAME",
    "__version__",
    "AuthMethod",
    "HostKeyPolicy",
    "MirrorConfig",
    "SyncFolder",
    "load_config",
    "MirrorError",
    "MirrorConfigError",
    "MirrorConnectionError",
    "MirrorSyncError",
    "MirrorTransferError",
    "MirrorDirectoryError",
    "SftpSession",
    "SyncEngine",
    "SyncSummary",
    "format_size",
]
