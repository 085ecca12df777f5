"""File comparison logic for sync operations."""

from dataclasses import dataclass
from enum import Enum

from .local_store import LocalFileState


class SyncAction(str, Enum):
    """Actions that can be taken for a remote file."""

    COPY = "copy"
    """Copy remote file to local"""

    SKIP = "skip"
    """Skip file (no action needed)"""


@dataclass(frozen=True)
class SyncDecision:
    """Represents a decision about how to sync a file."""

    action: SyncAction
    """Action to take"""

    reason: str
    """Human-readable reason for this decision"""

    @property
    def should_copy(self) -> bool:
        return self.action == SyncAction.COPY


def should_copy(local: LocalFileState, remote_size: int) -> bool:
    """Decide whether a remote file must be copied.

    Args:
        local: State of the local counterpart
        remote_size: Remote file size in bytes

    Returns:
        True if the local file is missing or differs in size
    """
    return not local.exists or local.size != remote_size


class FileComparator:
    """Compares a local file state with a remote file size.

    Size is the only change signal. Subclasses may override
    :meth:`compare` to use a stronger strategy.
    """

    def compare(self, local: LocalFileState, remote_size: int) -> SyncDecision:
        """Determine the action for one remote file.

        Args:
            local: State of the local counterpart
            remote_size: Remote file size in bytes

        Returns:
            SyncDecision for this file
        """
        if not local.exists:
            return SyncDecision(
                action=SyncAction.COPY,
                reason="Local file does not exist",
            )

        if should_copy(local, remote_size):
            return SyncDecision(
                action=SyncAction.COPY,
                reason="Local and remote files have different size. Allow copy.",
            )

        return SyncDecision(
            action=SyncAction.SKIP,
            reason="Local and remote files have equal size. Don't allow copy.",
        )
