"""Core sync engine that runs every configured folder."""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from ..config import SyncFolder
from ..exceptions import MirrorSyncError
from ..output import OutputFormatter
from ..utils import DEFAULT_CHUNK_SIZE, format_size
from .comparator import FileComparator
from .copier import ProgressCallback
from .walker import FolderResult, RemoteSession, TreeWalker

logger = logging.getLogger(__name__)


@dataclass
class SyncSummary:
    """Aggregated results of one run."""

    results: list[FolderResult] = field(default_factory=list)

    @property
    def folders_failed(self) -> int:
        return sum(1 for r in self.results if not r.ok)

    @property
    def files_copied(self) -> int:
        return sum(r.files_copied for r in self.results)

    @property
    def files_skipped(self) -> int:
        return sum(r.files_skipped for r in self.results)

    @property
    def bytes_copied(self) -> int:
        return sum(r.bytes_copied for r in self.results)

    @property
    def listing_errors(self) -> int:
        return sum(r.listing_errors for r in self.results)

    def to_dict(self) -> dict:
        """Convert summary to dictionary for JSON output."""
        return {
            "folders": len(self.results),
            "folders_failed": self.folders_failed,
            "files_copied": self.files_copied,
            "files_skipped": self.files_skipped,
            "bytes_copied": self.bytes_copied,
            "listing_errors": self.listing_errors,
            "results": [r.to_dict() for r in self.results],
        }


class SyncEngine:
    """Runs the tree walker over each sync folder in order.

    A folder that fails is reported and the remaining folders are still
    processed. Nothing is retried.
    """

    def __init__(
        self,
        session: RemoteSession,
        output: Optional[OutputFormatter] = None,
        comparator: Optional[FileComparator] = None,
    ):
        """Initialize sync engine.

        Args:
            session: Open remote session
            output: Output formatter for displaying progress/status
            comparator: Change detection strategy passed to the walker
        """
        self.session = session
        self.output = output or OutputFormatter()
        self.comparator = comparator or FileComparator()

    def run(
        self,
        folders: Iterable[SyncFolder],
        dry_run: bool = False,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> SyncSummary:
        """Sync every folder in configuration order.

        Args:
            folders: Sync folders to process
            dry_run: If True, only show what would be done
            chunk_size: Read size for streamed copies
            progress_callback: Optional callback
                function(remote_path, bytes_copied, total_bytes)

        Returns:
            SyncSummary with one FolderResult per folder

        Examples:
            >>> engine = SyncEngine(session)
            >>> summary = engine.run(config.folders)
            >>> print(f"Copied {summary.files_copied} files")
        """
        walker = TreeWalker(
            self.session,
            output=self.output,
            comparator=self.comparator,
            dry_run=dry_run,
            chunk_size=chunk_size,
            progress_callback=progress_callback,
        )
        summary = SyncSummary()

        for folder in folders:
            result = FolderResult(folder=folder)
            summary.results.append(result)

            self.output.info(f"Syncing: {folder}")
            try:
                walker.walk(folder, result)
            except MirrorSyncError as e:
                result.error = e
                logger.debug(f"Folder {folder} failed", exc_info=True)
                self.output.error(f"Error {folder.remote_root}: {e}")
                continue

            logger.debug(
                f"Folder {folder} done: {result.files_copied} copied, "
                f"{result.files_skipped} skipped, {format_size(result.bytes_copied)}"
            )

        return summary

    def display_summary(self, summary: SyncSummary, dry_run: bool = False) -> None:
        """Display the run summary.

        Args:
            summary: Summary returned by :meth:`run`
            dry_run: Whether this was a dry run
        """
        if self.output.json_output:
            self.output.output_json(summary.to_dict())
            return

        self.output.print("")
        if dry_run:
            self.output.success("Dry run complete!")
        elif summary.folders_failed:
            self.output.warning(
                f"Sync finished with {summary.folders_failed} failed folder(s)"
            )
        else:
            self.output.success("Sync complete!")

        copied_label = "Would copy" if dry_run else "Copied"
        self.output.print_summary(
            "Summary",
            [
                ("Folders", str(len(summary.results))),
                ("Failed folders", str(summary.folders_failed)),
                (copied_label, f"{summary.files_copied} file(s)"),
                ("Skipped", f"{summary.files_skipped} file(s)"),
                ("Transferred", format_size(summary.bytes_copied)),
                ("Listing errors", str(summary.listing_errors)),
            ],
        )
