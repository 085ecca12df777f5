"""Local filesystem queries and directory creation."""

import logging
from dataclasses import dataclass
from pathlib import Path

from ..exceptions import MirrorDirectoryError

logger = logging.getLogger(__name__)

DIRECTORY_MODE = 0o777


@dataclass(frozen=True)
class LocalFileState:
    """Observed state of a candidate local path."""

    exists: bool
    """Whether the path exists"""

    size: int = 0
    """Size in bytes (0 when missing)"""

    @classmethod
    def missing(cls) -> "LocalFileState":
        return cls(exists=False)


def ensure_directory(path: Path) -> bool:
    """Create ``path`` and any missing parents.

    Args:
        path: Directory to create

    Returns:
        True if the directory was created, False if it already existed

    Raises:
        MirrorDirectoryError: If the directory cannot be created
    """
    if path.is_dir():
        return False

    try:
        path.mkdir(mode=DIRECTORY_MODE, parents=True, exist_ok=True)
    except OSError as e:
        raise MirrorDirectoryError(
            f"Cannot create directory {path}: {e}", path=str(path)
        ) from e

    logger.debug(f"Created directory {path}")
    return True


def stat_local(path: Path) -> LocalFileState:
    """Query the state of a local file.

    A missing path is not an error.

    Args:
        path: Local path to inspect

    Returns:
        LocalFileState for the path

    Raises:
        OSError: For any failure other than the path being absent
    """
    try:
        st = path.stat()
    except FileNotFoundError:
        return LocalFileState.missing()
    return LocalFileState(exists=True, size=st.st_size)
