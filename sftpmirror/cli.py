"""CLI interface for sftpmirror."""

import logging
from typing import Any, Optional

import click

from . import APP_NAME, __version__
from .cli_progress import TransferProgressDisplay
from .config import HostKeyPolicy, load_config
from .exceptions import MirrorConfigError, MirrorConnectionError
from .output import OutputFormatter
from .session import SftpSession, format_target
from .sync import SyncEngine

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        # Enable debug logging for sftpmirror modules
        logging.getLogger("sftpmirror").setLevel(logging.DEBUG)
    else:
        # Set default logging level to WARNING to suppress debug/info messages
        logging.basicConfig(level=logging.WARNING)


@click.command()
@click.option("--host", "-H", help="Remote host (overrides SFTP_HOST)")
@click.option("--user", "-u", help="Remote username (overrides SFTP_USER)")
@click.option(
    "--remote-paths",
    "-r",
    help="Comma-separated remote directories (overrides REMOTE_PATHS)",
)
@click.option(
    "--local-paths",
    "-l",
    help="Comma-separated local directories (overrides LOCAL_PATHS)",
)
@click.option(
    "--key",
    "-i",
    type=click.Path(dir_okay=False),
    help="Private key file (overrides SFTP_KEY)",
)
@click.option("--port", "-p", type=int, default=None, help="SSH port (default: 22)")
@click.option(
    "--host-key-policy",
    type=click.Choice([p.value for p in HostKeyPolicy]),
    default=None,
    help="Host key verification (default: known-hosts)",
)
@click.option(
    "--dry-run", is_flag=True, help="Show what would be copied without copying"
)
@click.option("--no-progress", is_flag=True, help="Disable progress bars")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format")
@click.option("--verbose", is_flag=True, help="Enable verbose/debug logging output")
@click.version_option(
    __version__,
    "--version",
    "-v",
    prog_name=APP_NAME,
    message="%(prog)s %(version)s",
)
@click.pass_context
def main(
    ctx: Any,
    host: Optional[str],
    user: Optional[str],
    remote_paths: Optional[str],
    local_paths: Optional[str],
    key: Optional[str],
    port: Optional[int],
    host_key_policy: Optional[str],
    dry_run: bool,
    no_progress: bool,
    quiet: bool,
    json_output: bool,
    verbose: bool,
) -> None:
    """Mirror remote SFTP directories to local storage.

    Settings are read from the environment (SFTP_HOST, SFTP_USER,
    REMOTE_PATHS, LOCAL_PATHS, SFTP_KEY, ...), optionally seeded from
    ./.env and ~/backup.env. Only files that are missing locally or
    differ in size are copied.

    Examples:
        sftpmirror                                   # Use environment settings
        sftpmirror -H backup.example.com -u george -r /data,/logs
        sftpmirror -r /data -l ./mirror --dry-run    # Preview copies
    """
    _configure_logging(verbose)
    out = OutputFormatter(json_output=json_output, quiet=quiet or json_output)
    out.info(f"{APP_NAME} {__version__}")

    overrides = {
        "SFTP_HOST": host,
        "SFTP_USER": user,
        "REMOTE_PATHS": remote_paths,
        "LOCAL_PATHS": local_paths,
        "SFTP_KEY": key,
        "SFTP_PORT": str(port) if port is not None else None,
        "SFTP_HOST_KEY_POLICY": host_key_policy,
    }

    try:
        config = load_config(overrides)
    except MirrorConfigError as e:
        out.error(f"Configuration error: {e}")
        ctx.exit(1)

    engine: Optional[SyncEngine] = None
    try:
        with SftpSession(config) as session:
            out.info(f"Connected to {format_target(config)}")
            engine = SyncEngine(session, out)

            if no_progress or out.quiet or dry_run:
                summary = engine.run(config.folders, dry_run=dry_run)
            else:
                with TransferProgressDisplay(out.console) as display:
                    summary = engine.run(
                        config.folders,
                        dry_run=dry_run,
                        progress_callback=display.update,
                    )
    except MirrorConnectionError as e:
        out.error(str(e))
        ctx.exit(1)
    except KeyboardInterrupt:
        out.warning("\nSync cancelled by user")
        ctx.exit(130)

    engine.display_summary(summary, dry_run=dry_run)


if __name__ == "__main__":
    main()
