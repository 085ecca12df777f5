"""Remote tree traversal for one sync folder."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Optional, Protocol

from ..config import SyncFolder
from ..exceptions import MirrorDirectoryError, MirrorTransferError
from ..output import OutputFormatter
from ..utils import DEFAULT_CHUNK_SIZE, format_size
from .comparator import FileComparator
from .copier import ProgressCallback, TransferOutcome, copy_stream
from .local_store import ensure_directory, stat_local
from .scanner import REMOTE_ERRORS, RemoteEntry, WalkStep, relative_remote_path

logger = logging.getLogger(__name__)


class RemoteSession(Protocol):
    """Remote operations the walker needs from a session."""

    def walk(self, root: str) -> Iterator[WalkStep]: ...

    def open(self, path: str) -> Any: ...


@dataclass
class FolderResult:
    """Statistics for one folder's walk."""

    folder: SyncFolder
    files_copied: int = 0
    files_skipped: int = 0
    bytes_copied: int = 0
    directories_created: int = 0
    listing_errors: int = 0
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        return {
            "remote": self.folder.remote_root,
            "local": str(self.folder.local_root),
            "files_copied": self.files_copied,
            "files_skipped": self.files_skipped,
            "bytes_copied": self.bytes_copied,
            "directories_created": self.directories_created,
            "listing_errors": self.listing_errors,
            "error": str(self.error) if self.error else None,
        }


class TreeWalker:
    """Mirrors one remote tree into its local root.

    Directories are created as they are reached, so a directory always
    exists before any file beneath it is written. A step that failed to
    list is skipped; any error on a file stops the walk.
    """

    def __init__(
        self,
        session: RemoteSession,
        output: Optional[OutputFormatter] = None,
        comparator: Optional[FileComparator] = None,
        dry_run: bool = False,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        """Initialize tree walker.

        Args:
            session: Open remote session
            output: Output formatter for per-file messages
            comparator: Decides whether a file needs copying
            dry_run: If True, report actions without writing anything
            chunk_size: Read size for streamed copies
            progress_callback: Optional callback
                function(remote_path, bytes_copied, total_bytes)
        """
        self.session = session
        self.output = output or OutputFormatter()
        self.comparator = comparator or FileComparator()
        self.dry_run = dry_run
        self.chunk_size = chunk_size
        self.progress_callback = progress_callback

    def walk(
        self, folder: SyncFolder, result: Optional[FolderResult] = None
    ) -> FolderResult:
        """Walk ``folder.remote_root`` and copy what changed.

        Args:
            folder: Sync folder to process
            result: Result object to fill in (a new one is created if omitted)

        Returns:
            FolderResult with the walk statistics

        Raises:
            MirrorDirectoryError: If a local directory cannot be created
            MirrorTransferError: If a remote file cannot be opened or copied,
                or its local counterpart cannot be inspected
        """
        if result is None:
            result = FolderResult(folder=folder)

        self._ensure_local_directory(folder.local_root, result)

        for step in self.session.walk(folder.remote_root):
            if not step.ok:
                result.listing_errors += 1
                logger.warning(f"Skipping {step.path}: {step.error}")
                self.output.warning(f"Cannot read {step.path}: {step.error}")
                continue

            entry = step.entry
            relative_path = relative_remote_path(entry.path, folder.remote_root)
            local_path = (
                folder.local_root / relative_path
                if relative_path
                else folder.local_root
            )

            if entry.is_directory:
                if relative_path:
                    self._ensure_local_directory(local_path, result)
                continue

            self._sync_file(entry, local_path, result)

        return result

    def _ensure_local_directory(self, path: Path, result: FolderResult) -> None:
        if self.dry_run:
            if path.exists() and not path.is_dir():
                raise MirrorDirectoryError(
                    f"Cannot create directory {path}: not a directory",
                    path=str(path),
                )
            if not path.is_dir():
                result.directories_created += 1
                self.output.info(f"Would create directory {path}")
            return

        if ensure_directory(path):
            result.directories_created += 1

    def _sync_file(
        self, entry: RemoteEntry, local_path: Path, result: FolderResult
    ) -> None:
        try:
            remote_file = self.session.open(entry.path)
        except REMOTE_ERRORS as e:
            raise MirrorTransferError(
                f"Cannot open {entry.path}: {e}", path=entry.path
            ) from e

        with remote_file:
            try:
                remote_size = remote_file.stat().st_size
                local_state = stat_local(local_path)
            except REMOTE_ERRORS as e:
                raise MirrorTransferError(
                    f"Cannot compare {entry.path} with {local_path}: {e}",
                    path=entry.path,
                ) from e

            if not local_state.exists:
                self.output.info(f"File {local_path} not exist")

            decision = self.comparator.compare(local_state, remote_size)
            logger.debug(f"{entry.path}: {decision.action.value} ({decision.reason})")

            if not decision.should_copy:
                result.files_skipped += 1
                self.output.info(decision.reason)
                return

            if local_state.exists:
                self.output.info(decision.reason)

            if self.dry_run:
                result.files_copied += 1
                result.bytes_copied += remote_size
                self.output.info(
                    f"Would copy {entry.path} ({format_size(remote_size)})"
                )
                return

            self.output.info(f"Copy {entry.path} ...")
            outcome = copy_stream(
                remote_file,
                local_path,
                remote_path=entry.path,
                total_size=remote_size,
                chunk_size=self.chunk_size,
                progress_callback=self.progress_callback,
            )

        self._record_copy(outcome, result)

    def _record_copy(self, outcome: TransferOutcome, result: FolderResult) -> None:
        result.files_copied += 1
        result.bytes_copied += outcome.bytes_copied
        self.output.success(
            f"{outcome.remote_path} copied ({format_size(outcome.bytes_copied)})"
        )
