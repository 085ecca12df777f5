"""Tests for console output and the transfer progress display."""

import json

from rich.console import Console

from sftpmirror.cli_progress import TransferProgressDisplay
from sftpmirror.output import OutputFormatter


def _formatter(**kwargs):
    console = Console(record=True, width=120)
    return OutputFormatter(console=console, **kwargs), console


class TestOutputFormatter:
    """Tests for OutputFormatter."""

    def test_info_and_success(self):
        """Test printing informational and success messages."""
        out, console = _formatter()

        out.info("Copy /data/a.txt ...")
        out.success("/data/a.txt copied (10 B)")

        text = console.export_text()
        assert "Copy /data/a.txt ..." in text
        assert "/data/a.txt copied (10 B)" in text

    def test_markup_is_not_interpreted(self):
        """Test that rich markup in messages is printed literally."""
        out, console = _formatter()

        out.info("File [bold]x[/bold] not exist")

        assert "[bold]x[/bold]" in console.export_text()

    def test_quiet_suppresses_info_but_not_errors(self):
        """Test that quiet mode keeps warnings and errors."""
        out, console = _formatter(quiet=True)

        out.info("hidden")
        out.success("hidden")
        out.print("hidden")
        out.print_summary("Summary", [("a", "b")])
        out.warning("careful")
        out.error("broken")

        text = console.export_text()
        assert "hidden" not in text
        assert "careful" in text
        assert "broken" in text

    def test_print_summary(self):
        """Test printing a summary table."""
        out, console = _formatter()

        out.print_summary("Summary", [("Copied", "2 file(s)")])

        text = console.export_text()
        assert "Summary" in text
        assert "Copied" in text
        assert "2 file(s)" in text

    def test_json_mode_sends_warnings_and_errors_to_error_console(self):
        """Test that JSON mode keeps standard output free of plain messages."""
        console = Console(record=True, width=120)
        error_console = Console(record=True, width=120)
        out = OutputFormatter(
            json_output=True, quiet=True, console=console, error_console=error_console
        )

        out.warning("Cannot read /data/locked")
        out.error("Error /data: broken")
        out.output_json({"folders": 1})

        assert json.loads(console.export_text()) == {"folders": 1}
        errors = error_console.export_text()
        assert "Cannot read /data/locked" in errors
        assert "Error /data: broken" in errors

    def test_json_mode_defaults_to_stderr(self):
        """Test that JSON mode writes warnings and errors to stderr by default."""
        out = OutputFormatter(json_output=True)

        assert out.error_console.stderr
        assert out.error_console is not out.console

    def test_text_mode_shares_console(self):
        """Test that text mode writes warnings and errors with other output."""
        out = OutputFormatter()

        assert out.error_console is out.console


class TestTransferProgressDisplay:
    """Tests for TransferProgressDisplay."""

    def test_update_outside_context_is_ignored(self):
        """Test that updates before entering the display are ignored."""
        display = TransferProgressDisplay()

        display.update("/data/a.txt", 5, 10)

    def test_tracks_current_file(self):
        """Test that a new file replaces the previous progress task."""
        console = Console(record=True, width=120)

        with TransferProgressDisplay(console) as display:
            display.update("/data/a.txt", 5, 10)
            first_task = display._task
            display.update("/data/a.txt", 10, 10)
            assert display._task == first_task

            display.update("/data/b.txt", 1, 20)
            assert display._task != first_task
            assert len(display._progress.tasks) == 1
            assert display._progress.tasks[0].description == "/data/b.txt"

        assert display._progress is None
