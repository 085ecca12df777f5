"""Tests for the tree walker."""

from unittest.mock import patch

import pytest

from sftpmirror.config import SyncFolder
from sftpmirror.exceptions import MirrorDirectoryError, MirrorTransferError
from sftpmirror.sync import copier
from sftpmirror.sync.walker import FolderResult, TreeWalker


class TestTreeWalker:
    """Test TreeWalker functionality."""

    @pytest.fixture
    def folder(self, temp_dir):
        return SyncFolder(remote_root="/data", local_root=temp_dir / "mirror")

    def test_copies_new_tree(self, remote_tree, mock_output, folder):
        """Test an empty local root receives every remote file."""
        result = TreeWalker(remote_tree, mock_output).walk(folder)

        assert (folder.local_root / "a.txt").read_bytes() == b"0123456789"
        assert (folder.local_root / "sub" / "b.txt").stat().st_size == 20
        assert result.files_copied == 2
        assert result.files_skipped == 0
        assert result.bytes_copied == 30
        # local root and sub/
        assert result.directories_created == 2
        assert result.ok

    def test_second_walk_copies_nothing(self, remote_tree, mock_output, folder):
        """Test re-running without remote changes skips every file."""
        walker = TreeWalker(remote_tree, mock_output)
        walker.walk(folder)

        result = walker.walk(folder)

        assert result.files_copied == 0
        assert result.files_skipped == 2
        assert result.directories_created == 0

    def test_only_resized_file_is_copied(self, remote_tree, mock_output, folder):
        """Test a size change triggers a copy of that file only."""
        walker = TreeWalker(remote_tree, mock_output)
        walker.walk(folder)
        remote_tree.files["/data/a.txt"] = b"y" * 15

        with patch(
            "sftpmirror.sync.walker.copy_stream", wraps=copier.copy_stream
        ) as spy:
            result = walker.walk(folder)

        assert result.files_copied == 1
        assert spy.call_count == 1
        assert spy.call_args.kwargs["remote_path"] == "/data/a.txt"
        assert (folder.local_root / "a.txt").read_bytes() == b"y" * 15

    def test_same_size_change_is_not_detected(
        self, remote_tree, mock_output, folder
    ):
        """Test size is the only change signal."""
        walker = TreeWalker(remote_tree, mock_output)
        walker.walk(folder)
        remote_tree.files["/data/a.txt"] = b"9876543210"

        result = walker.walk(folder)

        assert result.files_copied == 0
        assert (folder.local_root / "a.txt").read_bytes() == b"0123456789"

    def test_directory_created_before_contents(
        self, make_session, mock_output, folder
    ):
        """Test every file's parent directory exists when it is written."""
        session = make_session(
            files={
                "/data/x/y/z/deep.txt": b"deep",
                "/data/x/one.txt": b"1",
                "/data/w.txt": b"w",
            }
        )
        seen_parents = []

        def checking_copy(remote_file, local_path, **kwargs):
            seen_parents.append(local_path.parent.is_dir())
            return copier.copy_stream(remote_file, local_path, **kwargs)

        with patch("sftpmirror.sync.walker.copy_stream", side_effect=checking_copy):
            TreeWalker(session, mock_output).walk(folder)

        assert seen_parents == [True, True, True]

    def test_empty_remote_directories_are_mirrored(
        self, make_session, mock_output, folder
    ):
        """Test that empty remote directories are created locally."""
        session = make_session(dirs={"/data", "/data/empty", "/data/empty/nested"})

        result = TreeWalker(session, mock_output).walk(folder)

        assert (folder.local_root / "empty" / "nested").is_dir()
        assert result.files_copied == 0

    def test_root_is_not_recreated_below_itself(
        self, remote_tree, mock_output, folder
    ):
        """Test the root entry maps onto the local root itself."""
        TreeWalker(remote_tree, mock_output).walk(folder)

        assert sorted(p.name for p in folder.local_root.iterdir()) == ["a.txt", "sub"]

    def test_listing_error_skips_subtree(
        self, make_session, mock_output, folder
    ):
        """Test an unlistable directory is skipped and the walk continues."""
        session = make_session(
            files={
                "/data/locked/secret.txt": b"s",
                "/data/open/ok.txt": b"ok",
            }
        )
        session.unlistable.add("/data/locked")

        result = TreeWalker(session, mock_output).walk(folder)

        assert result.listing_errors == 1
        assert result.files_copied == 1
        assert (folder.local_root / "open" / "ok.txt").exists()
        assert not (folder.local_root / "locked" / "secret.txt").exists()
        # The directory itself was listed by its parent, so it exists locally
        assert (folder.local_root / "locked").is_dir()
        mock_output.warning.assert_called_once()

    def test_missing_remote_root_is_a_listing_error(
        self, make_session, mock_output, folder
    ):
        """Test that a missing remote root is counted as a listing error."""
        session = make_session(files={"/other/a.txt": b"a"})

        result = TreeWalker(session, mock_output).walk(folder)

        assert result.listing_errors == 1
        assert result.files_copied == 0
        assert folder.local_root.is_dir()

    def test_open_failure_aborts_walk(
        self, make_session, mock_output, folder
    ):
        """Test a file error stops the folder before later entries."""
        session = make_session(
            files={
                "/data/a.txt": b"a",
                "/data/b.txt": b"b",
                "/data/c.txt": b"c",
            }
        )
        session.unopenable.add("/data/b.txt")
        result = FolderResult(folder=folder)

        with pytest.raises(MirrorTransferError) as exc_info:
            TreeWalker(session, mock_output).walk(folder, result)

        assert exc_info.value.path == "/data/b.txt"
        assert session.opened == ["/data/a.txt", "/data/b.txt"]
        assert result.files_copied == 1
        assert not (folder.local_root / "c.txt").exists()

    def test_read_failure_aborts_walk(
        self, make_session, mock_output, folder
    ):
        """Test that a read failure stops the folder's walk."""
        session = make_session(
            files={"/data/a.txt": b"abcdef", "/data/b.txt": b"b"}
        )
        session.broken_reads["/data/a.txt"] = 0

        with pytest.raises(MirrorTransferError, match="/data/a.txt"):
            TreeWalker(session, mock_output).walk(folder)

        assert session.opened == ["/data/a.txt"]

    def test_local_stat_failure_aborts_walk(self, remote_tree, mock_output, folder):
        """Test that a local stat failure stops the folder's walk."""
        with patch(
            "sftpmirror.sync.walker.stat_local", side_effect=PermissionError("denied")
        ):
            with pytest.raises(MirrorTransferError):
                TreeWalker(remote_tree, mock_output).walk(folder)

    def test_directory_creation_failure_aborts_walk(
        self, remote_tree, mock_output, folder
    ):
        """Test that a directory creation failure stops the walk."""
        folder.local_root.mkdir()
        # A local file where the remote has a directory
        (folder.local_root / "sub").write_text("not a directory")

        with pytest.raises(MirrorDirectoryError):
            TreeWalker(remote_tree, mock_output).walk(folder)

    def test_dry_run_writes_nothing(self, remote_tree, mock_output, folder):
        """Test that a dry run writes nothing locally."""
        result = TreeWalker(remote_tree, mock_output, dry_run=True).walk(folder)

        assert not folder.local_root.exists()
        assert result.files_copied == 2
        assert result.bytes_copied == 30
        assert result.directories_created == 2

    def test_dry_run_file_in_place_of_directory_aborts_walk(
        self, remote_tree, mock_output, folder
    ):
        """Test that a dry run fails where a local file blocks a directory."""
        folder.local_root.mkdir()
        (folder.local_root / "sub").write_text("not a directory")

        with pytest.raises(MirrorDirectoryError, match="not a directory"):
            TreeWalker(remote_tree, mock_output, dry_run=True).walk(folder)

        mock_output.info.assert_any_call("Would copy /data/a.txt (10 B)")

    def test_progress_callback_receives_updates(
        self, remote_tree, mock_output, folder
    ):
        """Test that copies report progress to the callback."""
        updates = []

        TreeWalker(
            remote_tree,
            mock_output,
            progress_callback=lambda *args: updates.append(args),
        ).walk(folder)

        assert ("/data/a.txt", 10, 10) in updates
        assert ("/data/sub/b.txt", 20, 20) in updates

    def test_reports_copies(self, remote_tree, mock_output, folder):
        """Test the messages printed for a copied file."""
        TreeWalker(remote_tree, mock_output).walk(folder)

        messages = [c.args[0] for c in mock_output.success.call_args_list]
        assert messages == [
            "/data/a.txt copied (10 B)",
            "/data/sub/b.txt copied (20 B)",
        ]
