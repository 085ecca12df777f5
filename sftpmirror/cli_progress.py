"""CLI progress display for file transfers.

This module provides a Rich-based progress bar fed by the copy
progress callback of the sync engine.
"""

from typing import Optional

from rich.console import Console
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TaskID,
    TextColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)


class TransferProgressDisplay:
    """Rich-based progress display for one file at a time.

    A new task is started whenever the reported remote path changes; the
    previous one is removed so only the current transfer is shown.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        """Initialize the progress display.

        Args:
            console: Console to render on (shared with the output formatter)
        """
        self._console = console
        self._progress: Optional[Progress] = None
        self._task: Optional[TaskID] = None
        self._current_path: Optional[str] = None

    def update(self, remote_path: str, bytes_copied: int, total_bytes: int) -> None:
        """Progress callback for the sync engine.

        Args:
            remote_path: File being copied
            bytes_copied: Bytes written so far
            total_bytes: Expected size of the file
        """
        if self._progress is None:
            return

        if remote_path != self._current_path:
            if self._task is not None:
                self._progress.remove_task(self._task)
            self._current_path = remote_path
            self._task = self._progress.add_task(
                remote_path, total=total_bytes or None
            )

        self._progress.update(self._task, completed=bytes_copied)

    def __enter__(self) -> "TransferProgressDisplay":
        """Enter context manager - start progress display."""
        self._progress = Progress(
            TextColumn("{task.description}", style="bold blue", markup=False),
            BarColumn(),
            DownloadColumn(binary_units=True),
            TransferSpeedColumn(),
            TimeRemainingColumn(),
            console=self._console,
            transient=True,
        )
        self._progress.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit context manager - stop progress display."""
        if self._progress is not None:
            self._progress.__exit__(exc_type, exc_val, exc_tb)
            self._progress = None
            self._task = None
            self._current_path = None
