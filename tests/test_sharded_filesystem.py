"""Tests for the ShardedFilesystem facade."""

import io
from unittest import mock

from pydantic import ValidationError
import pytest

from shardfs import (
    AlreadyExistsError,
    InvalidPathError,
    NotFoundError,
    RootViolationError,
    ShardConfig,
    ShardedFilesystem,
    StorageError,
)
from shardfs.services.storage import StorageBackend


class TestForwarding:
    """Physical paths and options handed to the backend."""

    @pytest.fixture
    def backend(self):
        return mock.Mock()

    def test_write_uses_leaf_role(self, backend):
        fs = ShardedFilesystem(backend)
        fs.write("c.txt", b"data", {"visibility": "private"})
        backend.write.assert_called_once_with("bb/80/4c/_c.txt", b"data", {"visibility": "private"})

    def test_directory_operations_use_directory_role(self, backend):
        fs = ShardedFilesystem(backend)
        fs.create_dir("a")
        fs.delete_dir("a")
        backend.create_dir.assert_called_once_with("7e4/_a", None)
        backend.delete_dir.assert_called_once_with("7e4/_a")

    def test_rename_maps_both_paths(self, backend):
        fs = ShardedFilesystem(backend)
        fs.rename("a/c.txt", "missing.txt")
        backend.rename.assert_called_once_with("7e4/_a/bb/80/4c/_c.txt", "f4/89/4d/_missing.txt")

    @pytest.mark.parametrize(
        "method,value",
        [
            ("get_size", 42),
            ("get_mimetype", "text/plain"),
            ("get_timestamp", 1700000000),
            ("get_visibility", "public"),
            ("has", True),
            ("read", b"payload"),
        ],
    )
    def test_results_pass_through(self, backend, method, value):
        getattr(backend, method).return_value = value
        fs = ShardedFilesystem(backend)
        assert getattr(fs, method)("c.txt") == value
        getattr(backend, method).assert_called_once_with("bb/80/4c/_c.txt")

    def test_get_metadata_none_passes_through(self, backend):
        backend.get_metadata.return_value = None
        assert ShardedFilesystem(backend).get_metadata("c.txt") is None

    def test_locate(self, backend):
        fs = ShardedFilesystem(backend)
        assert fs.locate("a/b/c.txt") == "7e4/_a/71f/_b/bb/80/4c/_c.txt"
        assert fs.locate("a", is_directory=True) == "7e4/_a"

    def test_options_mapping_configures_sharding(self, backend):
        fs = ShardedFilesystem(backend, {"hash_parts_for_files": 0, "hash_parts_for_directories": 0})
        assert fs.locate("a/c.txt") == "_a/_c.txt"

    def test_marker_paths_rejected_before_backend(self, backend):
        fs = ShardedFilesystem(backend)
        with pytest.raises(InvalidPathError):
            fs.write("_c.txt", b"")
        backend.write.assert_not_called()

    def test_satisfies_backend_protocol(self, memory_backend):
        assert isinstance(ShardedFilesystem(memory_backend), StorageBackend)


class TestOperations:
    """End to end over the in-memory backend."""

    def test_write_read(self, fs):
        fs.write("a/b/c.txt", b"hello")
        assert fs.read("a/b/c.txt") == b"hello"
        assert fs.has("a/b/c.txt")
        assert fs.backend.has("7e4/_a/71f/_b/bb/80/4c/_c.txt")

    def test_has_directory(self, fs):
        fs.create_dir("a/b")
        assert fs.has("a/b", is_directory=True)
        assert not fs.has("a/b")

    def test_update_and_put(self, fs):
        fs.write("f.txt", b"one")
        fs.update("f.txt", b"two")
        assert fs.read("f.txt") == b"two"
        fs.put("f.txt", b"three")
        fs.put("g.txt", b"new")
        assert fs.read("f.txt") == b"three"
        assert fs.read("g.txt") == b"new"

    def test_streams(self, fs):
        fs.write_stream("s.bin", io.BytesIO(b"abc"))
        fs.update_stream("s.bin", io.BytesIO(b"abcd"))
        fs.put_stream("t.bin", io.BytesIO(b"xyz"))
        assert fs.read_stream("s.bin").read() == b"abcd"
        assert fs.read_stream("t.bin").read() == b"xyz"

    def test_read_and_delete(self, fs):
        fs.write("once.txt", b"gone")
        assert fs.read_and_delete("once.txt") == b"gone"
        assert not fs.has("once.txt")

    def test_rename_across_directories(self, fs):
        fs.write("src/a.txt", b"data")
        fs.rename("src/a.txt", "dst/deeper/b.txt")
        assert not fs.has("src/a.txt")
        assert fs.read("dst/deeper/b.txt") == b"data"

    def test_copy(self, fs):
        fs.write("a.txt", b"data")
        fs.copy("a.txt", "b/a.txt")
        assert fs.read("a.txt") == fs.read("b/a.txt") == b"data"

    def test_delete_dir_removes_subtree(self, fs):
        fs.write("d/x.txt", b"")
        fs.write("d/e/y.txt", b"")
        assert fs.delete_dir("d")
        assert fs.list_contents("", recursive=True) == []

    def test_visibility(self, fs):
        fs.write("v.txt", b"", {"visibility": "private"})
        assert fs.get_visibility("v.txt") == "private"
        fs.set_visibility("v.txt", "public")
        assert fs.get_visibility("v.txt") == "public"

    def test_size_and_mimetype(self, fs):
        fs.write("page.html", b"<html></html>")
        assert fs.get_size("page.html") == 13
        assert fs.get_mimetype("page.html") == "text/html"
        assert isinstance(fs.get_timestamp("page.html"), int)

    def test_get_metadata_is_logical(self, fs):
        fs.write("a/b/c.txt", b"12345")
        metadata = fs.get_metadata("a/b/c.txt")
        assert metadata.path == "a/b/c.txt"
        assert metadata.basename == "c.txt"
        assert metadata.filename == "c"
        assert metadata.dirname == "a/b"
        assert metadata.size == 5
        assert metadata.inner.path == "7e4/_a/71f/_b/bb/80/4c/_c.txt"

    def test_get_metadata_directory(self, fs):
        fs.create_dir("a/b")
        metadata = fs.get_metadata("a/b", is_directory=True)
        assert metadata.is_dir
        assert metadata.path == "a/b"
        assert metadata.dirname == "a"

    def test_config_is_immutable(self, fs):
        with pytest.raises(ValidationError):
            fs.config.dir_fanout = 5


class TestErrorRemapping:
    """Errors mention logical paths only."""

    def test_read_missing(self, fs):
        with pytest.raises(NotFoundError) as excinfo:
            fs.read("missing.txt")

        message = str(excinfo.value)
        assert "missing.txt" in message
        assert "f4/89/4d" not in message
        assert excinfo.value.path == "missing.txt"

    def test_original_error_kept_as_cause(self, fs):
        with pytest.raises(NotFoundError) as excinfo:
            fs.read("missing.txt")

        cause = excinfo.value.__cause__
        assert isinstance(cause, NotFoundError)
        assert "f4/89/4d/_missing.txt" in str(cause)

    def test_write_existing(self, fs):
        fs.write("a/b/c.txt", b"")
        with pytest.raises(AlreadyExistsError) as excinfo:
            fs.write("a/b/c.txt", b"")
        assert str(excinfo.value) == "File already exists at path: a/b/c.txt"

    def test_rename_missing_source(self, fs):
        with pytest.raises(NotFoundError, match="src.txt") as excinfo:
            fs.rename("src.txt", "dst.txt")
        assert "dst.txt" not in str(excinfo.value)

    def test_rename_existing_destination(self, fs):
        fs.write("src.txt", b"")
        fs.write("dst.txt", b"")
        with pytest.raises(AlreadyExistsError) as excinfo:
            fs.rename("src.txt", "dst.txt")
        assert str(excinfo.value) == "File already exists at path: dst.txt"

    def test_copy_existing_destination(self, fs):
        fs.write("src.txt", b"")
        fs.write("dst.txt", b"")
        with pytest.raises(AlreadyExistsError, match="dst.txt"):
            fs.copy("src.txt", "dst.txt")

    @pytest.mark.parametrize(
        "operation",
        [
            lambda fs: fs.update("m/x.txt", b""),
            lambda fs: fs.delete("m/x.txt"),
            lambda fs: fs.get_metadata("m/x.txt"),
            lambda fs: fs.get_size("m/x.txt"),
            lambda fs: fs.get_mimetype("m/x.txt"),
            lambda fs: fs.get_timestamp("m/x.txt"),
            lambda fs: fs.get_visibility("m/x.txt"),
            lambda fs: fs.set_visibility("m/x.txt", "private"),
            lambda fs: fs.read_and_delete("m/x.txt"),
            lambda fs: fs.read_stream("m/x.txt"),
        ],
    )
    def test_not_found_everywhere(self, fs, operation):
        with pytest.raises(NotFoundError) as excinfo:
            operation(fs)
        assert str(excinfo.value) == "File not found at path: m/x.txt"

    def test_root_violation(self, fs):
        with pytest.raises(RootViolationError) as excinfo:
            fs.delete_dir("")
        assert isinstance(excinfo.value.__cause__, RootViolationError)

    def test_directory_role_form_is_rewritten(self):
        backend = mock.Mock()
        backend.delete_dir.side_effect = NotFoundError("7e4/_a")
        fs = ShardedFilesystem(backend)
        with pytest.raises(NotFoundError) as excinfo:
            fs.delete_dir("a")
        assert str(excinfo.value) == "File not found at path: a"

    def test_other_failures_pass_through(self):
        backend = mock.Mock()
        original = StorageError("disk on fire at 7e4/_a")
        backend.read.side_effect = original
        fs = ShardedFilesystem(backend, ShardConfig())
        with pytest.raises(StorageError) as excinfo:
            fs.read("a")
        assert excinfo.value is original


class TestLocalDisk:
    """Physical layout on a real filesystem."""

    def test_layout_on_disk(self, local_fs, local_backend):
        local_fs.write("a/b/c.txt", b"on disk")
        physical = local_backend.root / "7e4" / "_a" / "71f" / "_b" / "bb" / "80" / "4c" / "_c.txt"
        assert physical.read_bytes() == b"on disk"

    def test_round_trip(self, local_fs):
        local_fs.write("docs/readme.txt", b"hello")
        local_fs.create_dir("docs/empty")

        paths = [e.path for e in local_fs.list_contents("", recursive=True)]

        assert paths == ["docs", "docs/empty", "docs/readme.txt"]
        assert local_fs.read_stream("docs/readme.txt").read() == b"hello"

    def test_missing_file_reports_logical_path(self, local_fs):
        with pytest.raises(NotFoundError, match="^File not found at path: missing.txt$"):
            local_fs.read("missing.txt")

    def test_private_visibility(self, local_fs):
        local_fs.write("secret.txt", b"", {"visibility": "private"})
        assert local_fs.get_visibility("secret.txt") == "private"


class TestStacking:
    """A facade used as the backend of another facade."""

    @pytest.fixture
    def stacked(self, memory_backend):
        inner = ShardedFilesystem(memory_backend, allow_marker=True)
        return ShardedFilesystem(inner)

    def test_inner_rejects_outer_paths_by_default(self, memory_backend):
        outer = ShardedFilesystem(ShardedFilesystem(memory_backend))
        with pytest.raises(InvalidPathError, match="reserved marker"):
            outer.write("a/b.txt", b"x")

    def test_write_and_read(self, stacked):
        stacked.write("a/b.txt", b"x")
        assert stacked.read("a/b.txt") == b"x"
        assert stacked.has("a/b.txt")
        assert stacked.backend.has(stacked.locate("a/b.txt"))

    def test_list_recursive(self, stacked):
        stacked.write("a/b.txt", b"x")
        stacked.write("top.txt", b"y")
        stacked.create_dir("a/empty")

        paths = [e.path for e in stacked.list_contents("", recursive=True)]

        assert paths == ["a", "a/empty", "a/b.txt", "top.txt"]

    @pytest.mark.parametrize("fanout", [0, 1])
    def test_list_with_flat_configs(self, memory_backend, fanout):
        flat = {"hash_parts_for_directories": fanout, "hash_parts_for_files": fanout}
        inner = ShardedFilesystem(memory_backend, flat, allow_marker=True)
        outer = ShardedFilesystem(inner, flat)
        outer.write("d/e/f.txt", b"")

        paths = [e.path for e in outer.list_contents("", recursive=True)]

        assert paths == ["d", "d/e", "d/e/f.txt"]

    def test_directory_role_reaches_inner(self, stacked):
        stacked.create_dir("a/b")
        assert stacked.has("a/b", is_directory=True)
        assert not stacked.has("a/b")
        assert stacked.get_metadata("a/b", is_directory=True).path == "a/b"

    def test_metadata_is_outer_logical(self, stacked):
        stacked.write("a/c.txt", b"12")
        metadata = stacked.get_metadata("a/c.txt")
        assert metadata.path == "a/c.txt"
        assert metadata.basename == "c.txt"
        assert metadata.filename == "c"
        assert metadata.size == 2

    def test_errors_report_outer_logical_path(self, stacked):
        with pytest.raises(NotFoundError) as excinfo:
            stacked.read("missing.txt")
        assert str(excinfo.value) == "File not found at path: missing.txt"

    def test_delete_dir(self, stacked):
        stacked.write("a/b.txt", b"x")
        assert stacked.delete_dir("a")
        assert not stacked.has("a/b.txt")


class TestBackslashPaths:
    """Backslashes never reach the backend."""

    def test_write_rejected(self, fs):
        with pytest.raises(InvalidPathError, match="backslash"):
            fs.write("a\\b.txt", b"x")
        assert fs.backend.list_contents("", recursive=True) == []
