"""
Tests for filesystem probes and breadth-first ordering.
"""

import os
import sys

import pytest

from folderwatch.watcher import FolderRegistry
from folderwatch.watcher.models import folder_name
from folderwatch.watcher.probe import (
    DiskFileSystem,
    FakeFileSystem,
    FileSystemProbe,
    breadth_first,
    depth_below,
    is_descendant,
)


class TestPathHelpers:

    @pytest.mark.parametrize("path,root,expected", [
        ("/root", "/root", True),
        ("/root/sub", "/root", True),
        ("/root/sub/deeper", "/root", True),
        ("/root/sub", "/root/", True),
        ("/rootless", "/root", False),
        ("/other", "/root", False),
        ("/root/", "/root", False),
        ("/anything", "/", True),
        ("C:\\work\\src", "C:\\work", True),
    ])
    def test_is_descendant(self, path, root, expected):
        assert is_descendant(path, root) is expected

    def test_depth_below(self):
        assert depth_below("/root", "/root") == 0
        assert depth_below("/root/a", "/root") == 1
        assert depth_below("/root/a/b/c", "/root/") == 3

    def test_breadth_first_keeps_sibling_order(self):
        listing = ["/r/b", "/r/b/x", "/r/a", "/r/a/y", "/r/c"]

        assert breadth_first(listing, "/r") == ["/r", "/r/b", "/r/a", "/r/c", "/r/b/x", "/r/a/y"]

    def test_breadth_first_always_starts_with_root(self):
        assert breadth_first([], "/r") == ["/r"]
        assert breadth_first(["/r/a", "/r"], "/r") == ["/r", "/r/a"]

    @pytest.mark.parametrize("path,expected", [
        ("/root", "root"),
        ("/root/sub/subsub", "subsub"),
        ("/root/sub/", "sub"),
        ("C:\\work\\src", "src"),
        ("/", "/"),
        ("relative", "relative"),
    ])
    def test_folder_name(self, path, expected):
        assert folder_name(path) == expected


class TestFakeFileSystem:

    def test_satisfies_probe_contract(self):
        assert isinstance(FakeFileSystem(), FileSystemProbe)

    def test_exists_only_for_directories(self):
        fs = FakeFileSystem()
        fs.create("/dir")
        fs.create("/file.txt", size=3, is_dir=False)

        assert fs.exists("/dir")
        assert not fs.exists("/file.txt")
        assert not fs.exists("/missing")

    def test_delete_removes_subtree(self):
        fs = FakeFileSystem()
        fs.create("/root")
        fs.create("/root/sub")
        fs.create("/root/sub/deep")
        fs.create("/root/keep")

        fs.delete("/root/sub")
        fs.delete("/never/there")

        assert fs.enumerate_recursive("/root") == ["/root", "/root/keep"]

    def test_get_returns_recorded_metadata(self):
        fs = FakeFileSystem()
        fs.create("/a.go", size=42, is_dir=False)

        entry = fs.get("/a.go")
        assert entry.size == 42
        assert entry.is_dir is False
        assert fs.get("/missing") is None


class TestDiskFileSystem:

    def test_satisfies_probe_contract(self):
        assert isinstance(DiskFileSystem(), FileSystemProbe)

    def test_exists(self, tmp_path):
        (tmp_path / "file.txt").write_text("x")
        probe = DiskFileSystem()

        assert probe.exists(str(tmp_path))
        assert not probe.exists(str(tmp_path / "file.txt"))
        assert not probe.exists(str(tmp_path / "missing"))

    def test_enumerate_is_breadth_first_with_sorted_siblings(self, tmp_path):
        (tmp_path / "b" / "deep").mkdir(parents=True)
        (tmp_path / "a").mkdir()
        (tmp_path / "a" / "notes.txt").write_text("x")

        found = DiskFileSystem().enumerate_recursive(str(tmp_path))

        assert found == [
            str(tmp_path),
            str(tmp_path / "a"),
            str(tmp_path / "b"),
            str(tmp_path / "b" / "deep"),
        ]

    def test_hidden_folders_skipped_when_configured(self, tmp_path):
        (tmp_path / ".git" / "objects").mkdir(parents=True)
        (tmp_path / "src").mkdir()

        assert DiskFileSystem(skip_hidden=True).enumerate_recursive(str(tmp_path)) == [
            str(tmp_path),
            str(tmp_path / "src"),
        ]
        assert str(tmp_path / ".git" / "objects") in DiskFileSystem().enumerate_recursive(
            str(tmp_path)
        )

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
    def test_symlinked_folders_not_followed_by_default(self, tmp_path):
        target = tmp_path / "target"
        (target / "inner").mkdir(parents=True)
        root = tmp_path / "root"
        root.mkdir()
        os.symlink(target, root / "link")

        assert DiskFileSystem().enumerate_recursive(str(root)) == [str(root)]

        followed = DiskFileSystem(follow_symlinks=True).enumerate_recursive(str(root))
        assert followed == [str(root), str(root / "link"), str(root / "link" / "inner")]

    def test_unnormalized_root_keeps_its_descendants(self, tmp_path):
        (tmp_path / "proj" / "sub" / "deep").mkdir(parents=True)
        root = str(tmp_path) + "//proj"

        found = DiskFileSystem().enumerate_recursive(root)

        assert found == [
            root,
            os.path.join(root, "sub"),
            os.path.join(root, "sub", "deep"),
        ]

    def test_relative_root_keeps_its_descendants(self, tmp_path, monkeypatch):
        (tmp_path / "proj" / "sub").mkdir(parents=True)
        monkeypatch.chdir(tmp_path)

        registry = FolderRegistry(DiskFileSystem())
        registry.adjust("./proj")

        assert [e.path for e in registry.watched_folders()] == [
            "./proj",
            os.path.join("./proj", "sub"),
        ]

    def test_double_slash_root_rescan_watches_every_folder(self, tmp_path):
        (tmp_path / "proj" / "sub").mkdir(parents=True)
        (tmp_path / "proj" / "sub2").mkdir()
        root = str(tmp_path) + "//proj"

        registry = FolderRegistry(DiskFileSystem())
        registry.adjust(root)

        assert [e.name for e in registry.watched_folders()] == ["proj", "sub", "sub2"]

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
    def test_symlink_cycles_terminate(self, tmp_path):
        (tmp_path / "sub").mkdir()
        os.symlink(tmp_path, tmp_path / "sub" / "loop")

        found = DiskFileSystem(follow_symlinks=True).enumerate_recursive(str(tmp_path))

        assert found[:2] == [str(tmp_path), str(tmp_path / "sub")]
        assert len(found) == 3
