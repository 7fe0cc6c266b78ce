from os.path import dirname, exists, isdir, join

import pytest

from spaify.disk.vfs import LocalDiskVFS, MemoryVFS

STUB = join(dirname(__file__), "..", "fixtures", "Kernel.php")


def test_memory_vfs():
    vfs = MemoryVFS()

    assert not vfs.exists("test.txt")
    with pytest.raises(ValueError):
        vfs.read("test.txt")

    vfs.save("test.txt", "hello world")
    assert vfs.read("test.txt") == "hello world"
    assert vfs.exists("test.txt")

    vfs.save("test.txt", "updated")
    assert vfs.read("test.txt") == "updated"


def test_memory_vfs_copy_and_directories():
    vfs = MemoryVFS()

    vfs.copy(STUB, "app/Http/Kernel.php")
    vfs.ensure_directory("resources/js/Pages/")

    assert "$middlewareGroups = [" in vfs.read("app/Http/Kernel.php")
    assert vfs.directories == {"resources/js/Pages"}


def test_local_disk_vfs(tmp_path):
    vfs = LocalDiskVFS(tmp_path)

    assert not vfs.exists("test.txt")
    with pytest.raises(ValueError):
        vfs.read("test.txt")

    vfs.save("subdir/test.txt", "hello world")
    assert vfs.read("subdir/test.txt") == "hello world"
    assert vfs.exists("subdir/test.txt")
    assert (tmp_path / "subdir" / "test.txt").read_text() == "hello world"
    assert not vfs.exists("subdir")


def test_local_disk_vfs_keeps_line_endings(tmp_path):
    vfs = LocalDiskVFS(tmp_path)

    vfs.save("Kernel.php", "<?php\r\n$a = 1;\r\n")

    assert (tmp_path / "Kernel.php").read_bytes() == b"<?php\r\n$a = 1;\r\n"
    assert vfs.read("Kernel.php") == "<?php\r\n$a = 1;\r\n"


def test_local_disk_vfs_read_invalid_utf8(tmp_path):
    vfs = LocalDiskVFS(tmp_path)
    (tmp_path / "Kernel.php").write_bytes(b"<?php // Caf\xe9\n")

    with pytest.raises(ValueError):
        vfs.read("Kernel.php")


def test_local_disk_vfs_copy_and_directories(tmp_path):
    vfs = LocalDiskVFS(tmp_path)

    vfs.copy(STUB, "app/Http/Kernel.php")
    vfs.ensure_directory("resources/js/Components")
    vfs.ensure_directory("resources/js/Components")

    assert exists(join(tmp_path, "app", "Http", "Kernel.php"))
    assert isdir(join(tmp_path, "resources", "js", "Components"))
    assert vfs.exists("app/Http/Kernel.php")


def test_local_disk_vfs_root(tmp_path):
    root = join(tmp_path, "project")

    with pytest.raises(ValueError):
        LocalDiskVFS(root, create=False)

    LocalDiskVFS(root)
    assert isdir(root)

    with pytest.raises(FileExistsError):
        LocalDiskVFS(root, allow_existing=False)
