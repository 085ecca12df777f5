"""SSH/SFTP session used to read remote directory trees."""

import logging
import posixpath
from typing import Any, Iterator, Optional

import paramiko

from .config import AuthMethod, HostKeyPolicy, MirrorConfig
from .exceptions import MirrorConnectionError
from .sync.scanner import REMOTE_ERRORS, RemoteEntry, WalkStep

logger = logging.getLogger(__name__)


class SftpSession:
    """Authenticated SFTP session over paramiko.

    Examples:
        >>> with SftpSession(config) as session:
        ...     for step in session.walk("/data"):
        ...         print(step.path)
    """

    def __init__(self, config: MirrorConfig):
        """Initialize the session without connecting.

        Args:
            config: Run configuration (host, credentials, host key policy)
        """
        self.config = config
        self._ssh: Optional[paramiko.SSHClient] = None
        self._sftp: Optional[paramiko.SFTPClient] = None

    # =========================
    # Connection
    # =========================

    def _apply_host_key_policy(self, client: paramiko.SSHClient) -> None:
        policy = self.config.host_key_policy
        known_hosts = self.config.known_hosts

        if policy == HostKeyPolicy.ACCEPT_ANY:
            logger.warning(
                "Host key verification is disabled; any server key is accepted"
            )
            client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
            return

        client.load_system_host_keys()
        if known_hosts is not None and known_hosts.is_file():
            client.load_host_keys(str(known_hosts))

        if policy == HostKeyPolicy.STRICT:
            client.set_missing_host_key_policy(paramiko.RejectPolicy())
        else:
            client.set_missing_host_key_policy(paramiko.AutoAddPolicy())

    def _auth_kwargs(self) -> dict:
        if self.config.auth_method == AuthMethod.PASSWORD:
            return {
                "password": self.config.password,
                "look_for_keys": False,
                "allow_agent": False,
            }
        return {
            "key_filename": str(self.config.key_path),
            "look_for_keys": False,
            "allow_agent": False,
        }

    def _save_known_host(self, client: paramiko.SSHClient) -> None:
        known_hosts = self.config.known_hosts
        if self.config.host_key_policy != HostKeyPolicy.KNOWN_HOSTS:
            return
        if known_hosts is None:
            return
        try:
            known_hosts.parent.mkdir(parents=True, exist_ok=True)
            client.save_host_keys(str(known_hosts))
        except OSError as e:
            logger.warning(f"Failed to save host keys to {known_hosts}: {e}")

    def connect(self) -> None:
        """Open the SSH connection and the SFTP channel.

        Raises:
            MirrorConnectionError: If the host cannot be reached, the host key
                is rejected, authentication fails or SFTP is unavailable
        """
        if self._sftp is not None:
            return

        cfg = self.config
        logger.debug(f"Connecting to {cfg.username}@{cfg.host}:{cfg.port}")

        client = paramiko.SSHClient()
        try:
            self._apply_host_key_policy(client)
            client.connect(
                hostname=cfg.host,
                port=cfg.port,
                username=cfg.username,
                timeout=cfg.timeout,
                **self._auth_kwargs(),
            )
            self._save_known_host(client)
            sftp = client.open_sftp()
        except (paramiko.SSHException, OSError) as e:
            client.close()
            raise MirrorConnectionError(
                f"Cannot connect to {cfg.host}:{cfg.port}: {e}"
            ) from e

        self._ssh = client
        self._sftp = sftp
        logger.debug("SFTP session established")

    def close(self) -> None:
        """Close the SFTP channel and the SSH connection."""
        if self._sftp is not None:
            self._sftp.close()
            self._sftp = None
        if self._ssh is not None:
            self._ssh.close()
            self._ssh = None

    def __enter__(self) -> "SftpSession":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def sftp(self) -> paramiko.SFTPClient:
        if self._sftp is None:
            raise MirrorConnectionError("SFTP session is not connected")
        return self._sftp

    # =========================
    # Remote operations
    # =========================

    def walk(self, root: str) -> Iterator[WalkStep]:
        """Walk the remote tree under ``root`` in pre-order.

        The root is yielded first (a symlinked root is followed), then the
        children of each directory sorted by name. Symlinks below the root
        are not followed. A failing stat or listing yields a step carrying
        the error instead of stopping the walk; a directory whose listing
        fails is yielded a second time with the error.

        Args:
            root: Remote directory to walk

        Yields:
            WalkStep objects
        """
        try:
            root_step = WalkStep(
                path=root,
                entry=RemoteEntry.from_attributes(root, self.sftp.stat(root)),
            )
        except REMOTE_ERRORS as e:
            yield WalkStep(path=root, error=e)
            return

        stack = [root_step]
        while stack:
            step = stack.pop()
            yield step

            if not step.ok or not step.entry.is_directory:
                continue

            try:
                children = sorted(
                    self.sftp.listdir_attr(step.path), key=lambda a: a.filename
                )
            except REMOTE_ERRORS as e:
                stack.append(WalkStep(path=step.path, error=e))
                continue

            for attrs in reversed(children):
                child_path = posixpath.join(step.path, attrs.filename)
                stack.append(
                    WalkStep(
                        path=child_path,
                        entry=RemoteEntry.from_attributes(child_path, attrs),
                    )
                )

    def open(self, path: str) -> Any:
        """Open a remote file for binary reading.

        Args:
            path: Remote file path

        Returns:
            ``paramiko.SFTPFile`` usable as a context manager; ``stat()``
            returns its size
        """
        return self.sftp.open(path, "rb")


def format_target(config: MirrorConfig) -> str:
    """Format ``user@host:port`` for display."""
    return f"{config.username}@{config.host}:{config.port}"

