"""Configuration loading for sftpmirror.

Settings come from the process environment, optionally seeded from
``./.env`` and ``~/backup.env``. The result is a single immutable
:class:`MirrorConfig` that is handed to the session and the sync engine.
"""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from .exceptions import MirrorConfigError
from .utils import DEFAULT_PORT, DEFAULT_TIMEOUT, split_path_list

logger = logging.getLogger(__name__)

DEFAULT_LOCAL_ROOT = "./"


class AuthMethod(str, Enum):
    """How the SSH session authenticates."""

    PASSWORD = "password"
    """Authenticate with a password"""

    PUBLIC_KEY = "publickey"
    """Authenticate with a private key file"""


class HostKeyPolicy(str, Enum):
    """How the remote host key is verified."""

    STRICT = "strict"
    """Only hosts already present in known_hosts are accepted"""

    KNOWN_HOSTS = "known-hosts"
    """Trust on first use; changed keys of known hosts are rejected"""

    ACCEPT_ANY = "accept-any"
    """Accept any host key without verification"""


@dataclass(frozen=True)
class SyncFolder:
    """A remote directory tree mirrored into a local directory."""

    remote_root: str
    """Remote directory to mirror"""

    local_root: Path
    """Local directory receiving the mirror"""

    def __post_init__(self) -> None:
        if isinstance(self.local_root, str):
            object.__setattr__(self, "local_root", Path(self.local_root))

    def __str__(self) -> str:
        return f"{self.remote_root} -> {self.local_root}"


@dataclass(frozen=True)
class MirrorConfig:
    """Settings for one sync run."""

    host: str
    username: str
    folders: tuple[SyncFolder, ...]
    port: int = DEFAULT_PORT
    auth_method: AuthMethod = AuthMethod.PUBLIC_KEY
    key_path: Optional[Path] = None
    password: Optional[str] = field(default=None, repr=False)
    timeout: float = DEFAULT_TIMEOUT
    host_key_policy: HostKeyPolicy = HostKeyPolicy.KNOWN_HOSTS
    known_hosts: Optional[Path] = None


def default_env_files() -> list[Path]:
    """Return the dotenv files read before the environment."""
    return [Path(".env"), Path.home() / "backup.env"]


def default_key_path() -> Path:
    """Return the conventional per-user private key location."""
    return Path.home() / ".ssh" / "id_rsa"


def default_known_hosts() -> Path:
    """Return the per-user known_hosts location."""
    return Path.home() / ".ssh" / "known_hosts"


def load_env_files(env_files: Optional[list[Path]] = None) -> None:
    """Load dotenv files into the process environment.

    Values already present in the environment are never overridden and
    missing files are ignored.

    Args:
        env_files: Files to load (defaults to ``default_env_files()``)
    """
    for env_file in env_files if env_files is not None else default_env_files():
        if env_file.is_file():
            logger.debug(f"Loading environment from {env_file}")
            load_dotenv(env_file, override=False)


def parse_folders(
    remote_paths: str, local_paths: Optional[str]
) -> tuple[SyncFolder, ...]:
    """Build the ordered list of sync folders.

    Args:
        remote_paths: Comma-separated remote roots
        local_paths: Comma-separated local roots, parallel to ``remote_paths``.
            Missing or empty slots default to the current directory.

    Returns:
        Tuple of SyncFolder objects in configuration order

    Raises:
        MirrorConfigError: If a remote root is empty or there are more
            local roots than remote roots
    """
    remotes = split_path_list(remote_paths)
    if any(not remote for remote in remotes):
        raise MirrorConfigError(f"Empty remote path in REMOTE_PATHS: {remote_paths!r}")

    locals_ = split_path_list(local_paths) if local_paths is not None else []
    if len(locals_) > len(remotes):
        raise MirrorConfigError(
            f"LOCAL_PATHS has {len(locals_)} entries but REMOTE_PATHS only "
            f"{len(remotes)}"
        )

    folders = []
    for i, remote in enumerate(remotes):
        local = locals_[i] if i < len(locals_) and locals_[i] else DEFAULT_LOCAL_ROOT
        folders.append(SyncFolder(remote_root=remote, local_root=Path(local)))
    return tuple(folders)


def _require(env: Mapping[str, str], name: str) -> str:
    value = env.get(name)
    if not value:
        raise MirrorConfigError(f"Not found {name}")
    return value


def load_config(
    overrides: Optional[Mapping[str, Optional[str]]] = None,
    env: Optional[Mapping[str, str]] = None,
    env_files: Optional[list[Path]] = None,
) -> MirrorConfig:
    """Load the run configuration.

    Args:
        overrides: Values taking precedence over the environment, keyed by
            environment variable name (``None`` values are ignored)
        env: Environment mapping to read. When omitted, dotenv files are
            loaded and ``os.environ`` is used.
        env_files: Dotenv files to load when ``env`` is omitted

    Returns:
        MirrorConfig instance

    Raises:
        MirrorConfigError: If a required value is missing or invalid, or the
            private key file does not exist
    """
    if env is None:
        load_env_files(env_files)
        env = os.environ

    values = dict(env)
    if overrides:
        values.update({k: v for k, v in overrides.items() if v is not None})

    host = _require(values, "SFTP_HOST")
    username = _require(values, "SFTP_USER")
    folders = parse_folders(_require(values, "REMOTE_PATHS"), values.get("LOCAL_PATHS"))

    try:
        port = int(values.get("SFTP_PORT") or DEFAULT_PORT)
        timeout = float(values.get("SFTP_TIMEOUT") or DEFAULT_TIMEOUT)
    except ValueError as e:
        raise MirrorConfigError(f"Invalid numeric setting: {e}") from e
    if not 0 < port < 65536:
        raise MirrorConfigError(f"Invalid SFTP_PORT: {port}")

    try:
        host_key_policy = HostKeyPolicy(
            values.get("SFTP_HOST_KEY_POLICY") or HostKeyPolicy.KNOWN_HOSTS.value
        )
    except ValueError as e:
        choices = ", ".join(p.value for p in HostKeyPolicy)
        raise MirrorConfigError(
            f"Invalid SFTP_HOST_KEY_POLICY (expected one of: {choices})"
        ) from e

    known_hosts_value = values.get("SFTP_KNOWN_HOSTS")
    known_hosts = (
        Path(known_hosts_value).expanduser()
        if known_hosts_value
        else default_known_hosts()
    )

    key_value = values.get("SFTP_KEY")
    password = values.get("SFTP_PASSWORD")
    if password and not key_value:
        auth_method = AuthMethod.PASSWORD
        key_path = None
    else:
        auth_method = AuthMethod.PUBLIC_KEY
        key_path = Path(key_value).expanduser() if key_value else default_key_path()
        if not key_path.is_file():
            raise MirrorConfigError(f"SFTP key does not exist: {key_path}")
        password = None

    config = MirrorConfig(
        host=host,
        username=username,
        folders=folders,
        port=port,
        auth_method=auth_method,
        key_path=key_path,
        password=password,
        timeout=timeout,
        host_key_policy=host_key_policy,
        known_hosts=known_hosts,
    )
    logger.debug(
        f"Loaded config for {username}@{host}:{port} "
        f"({len(folders)} folder(s), auth={auth_method.value})"
    )
    return config
