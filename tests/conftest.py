"""Shared fixtures: an in-memory remote tree implementing the session contract."""

import io
import posixpath
import tempfile
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import Mock

import pytest

from sftpmirror.output import OutputFormatter
from sftpmirror.sync.scanner import RemoteEntry, WalkStep


class FakeRemoteFile(io.BytesIO):
    """Readable remote file with an SFTP-like ``stat()``."""

    def __init__(self, data: bytes, fail_after: int = -1):
        super().__init__(data)
        self._size = len(data)
        self._fail_after = fail_after

    def stat(self):
        return SimpleNamespace(st_size=self._size)

    def read(self, size=-1):
        if self._fail_after >= 0 and self.tell() >= self._fail_after:
            raise OSError("connection lost")
        return super().read(size)


class FakeSession:
    """In-memory remote tree.

    ``files`` maps absolute remote paths to bytes; parent directories are
    implied. Extra empty directories go in ``dirs``.
    """

    def __init__(self, files=None, dirs=None):
        self.files = dict(files or {})
        self.dirs = set(dirs or ())
        self.unlistable: set[str] = set()
        self.unopenable: set[str] = set()
        self.broken_reads: dict[str, int] = {}
        self.opened: list[str] = []

    def _all_dirs(self) -> set:
        dirs = set(self.dirs)
        for path in self.files:
            parent = posixpath.dirname(path)
            while parent not in ("", "/"):
                dirs.add(parent)
                parent = posixpath.dirname(parent)
        return dirs

    def _children(self, path: str) -> list:
        dirs = self._all_dirs()
        names = {
            p for p in list(self.files) + list(dirs) if posixpath.dirname(p) == path
        }
        return sorted(names)

    def walk(self, root: str):
        dirs = self._all_dirs()
        if root not in dirs and root not in self.files:
            yield WalkStep(path=root, error=FileNotFoundError(root))
            return

        stack = [root]
        while stack:
            path = stack.pop()
            is_dir = path in dirs
            size = 0 if is_dir else len(self.files[path])
            yield WalkStep(
                path=path,
                entry=RemoteEntry(path=path, is_directory=is_dir, size=size),
            )
            if not is_dir:
                continue
            if path in self.unlistable:
                yield WalkStep(path=path, error=PermissionError(path))
                continue
            stack.extend(reversed(self._children(path)))

    def open(self, path: str):
        self.opened.append(path)
        if path in self.unopenable:
            raise PermissionError(f"Permission denied: {path}")
        return FakeRemoteFile(self.files[path], self.broken_reads.get(path, -1))


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_output():
    """Create a mock output formatter."""
    output = Mock(spec=OutputFormatter)
    output.quiet = True
    output.json_output = False
    return output


@pytest.fixture
def make_session():
    """Factory for in-memory remote sessions."""
    return FakeSession


@pytest.fixture
def remote_tree():
    """Remote tree from the end-to-end scenario."""
    return FakeSession(
        files={
            "/data/a.txt": b"0123456789",
            "/data/sub/b.txt": b"x" * 20,
        }
    )
