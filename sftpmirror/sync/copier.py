"""Streamed copy of one remote file to local storage."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Callable, Optional

from ..exceptions import MirrorTransferError
from ..utils import DEFAULT_CHUNK_SIZE
from .scanner import REMOTE_ERRORS

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int, int], None]


@dataclass(frozen=True)
class TransferOutcome:
    """Result of a successful copy."""

    remote_path: str
    local_path: Path
    bytes_copied: int


def copy_stream(
    remote_file: BinaryIO,
    local_path: Path,
    remote_path: str,
    total_size: int = 0,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    progress_callback: Optional[ProgressCallback] = None,
) -> TransferOutcome:
    """Copy a remote readable stream into a local file.

    The local file is truncated, written in chunks of ``chunk_size`` and
    synced to disk before returning. There is no staging file: a failure
    part way leaves a partial local file behind.

    Args:
        remote_file: Open binary readable for the remote file
        local_path: Destination path
        remote_path: Remote path, used in errors and progress reports
        total_size: Expected size, only used for progress reports
        chunk_size: Bytes per read
        progress_callback: Optional callback
            function(remote_path, bytes_copied, total_size)

    Returns:
        TransferOutcome with the number of bytes written

    Raises:
        MirrorTransferError: If opening, reading, writing or syncing fails
    """
    bytes_copied = 0

    try:
        with open(local_path, "wb") as f:
            while True:
                chunk = remote_file.read(chunk_size)
                if not chunk:
                    break
                f.write(chunk)
                bytes_copied += len(chunk)
                if progress_callback:
                    progress_callback(remote_path, bytes_copied, total_size)

            f.flush()
            os.fsync(f.fileno())
    except REMOTE_ERRORS as e:
        raise MirrorTransferError(
            f"Failed to copy {remote_path}: {e}", path=remote_path
        ) from e

    logger.debug(f"Copied {bytes_copied} bytes from {remote_path} to {local_path}")
    return TransferOutcome(
        remote_path=remote_path,
        local_path=local_path,
        bytes_copied=bytes_copied,
    )
