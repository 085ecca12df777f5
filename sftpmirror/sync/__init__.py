"""Sync engine for sftpmirror - one-way remote to local mirroring."""

from .comparator import FileComparator, SyncAction, SyncDecision, should_copy
from .copier import TransferOutcome, copy_stream
from .engine import SyncEngine, SyncSummary
from .local_store import LocalFileState, ensure_directory, stat_local
from .scanner import RemoteEntry, WalkStep, relative_remote_path
from .walker import FolderResult, TreeWalker

__all__ = [
    "SyncEngine",
    "SyncSummary",
    "TreeWalker",
    "FolderResult",
    "FileComparator",
    "SyncAction",
    "SyncDecision",
    "should_copy",
    "TransferOutcome",
    "copy_stream",
    "LocalFileState",
    "ensure_directory",
    "stat_local",
    "RemoteEntry",
    "WalkStep",
    "relative_remote_path",
]
