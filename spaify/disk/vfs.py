import os
import os.path
import shutil

from spaify.log import get_logger

log = get_logger(__name__)


class VirtualFileSystem:
    def save(self, path: str, content: str):
        """
        Save content to a file. Use for both new and updated files.

        :param path: Path to the file, relative to project root.
        :param content: Content to save.
        """
        raise NotImplementedError()

    def read(self, path: str) -> str:
        """
        Read file contents.

        :param path: Path to the file, relative to project root.
        :return: File contents.
        """
        raise NotImplementedError()

    def exists(self, path: str) -> bool:
        """
        Check whether a file exists.

        :param path: Path to the file, relative to project root.
        """
        raise NotImplementedError()

    def copy(self, source: str, path: str):
        """
        Copy a file from the local disk into the project.

        Missing parent directories are created, an existing file is overwritten.

        :param source: Full path of the file to copy.
        :param path: Destination path, relative to project root.
        """
        raise NotImplementedError()

    def ensure_directory(self, path: str):
        """
        Make sure a directory (and its parents) exists.

        :param path: Path to the directory, relative to project root.
        """
        raise NotImplementedError()


class MemoryVFS(VirtualFileSystem):
    files: dict[str, str]
    directories: set[str]

    def __init__(self):
        self.files = {}
        self.directories = set()

    def save(self, path: str, content: str):
        self.files[path] = content

    def read(self, path: str) -> str:
        try:
            return self.files[path]
        except KeyError:
            raise ValueError(f"File not found: {path}")

    def exists(self, path: str) -> bool:
        return path in self.files

    def copy(self, source: str, path: str):
        with open(source, "r", encoding="utf-8") as f:
            self.files[path] = f.read()

    def ensure_directory(self, path: str):
        self.directories.add(path.rstrip("/"))


class LocalDiskVFS(VirtualFileSystem):
    def __init__(
        self,
        root: str,
        create: bool = True,
        allow_existing: bool = True,
    ):
        if not os.path.isdir(root):
            if create:
                os.makedirs(root)
            else:
                raise ValueError(f"Root directory does not exist: {root}")
        else:
            if not allow_existing:
                raise FileExistsError(f"Root directory already exists: {root}")

        self.root = root

    def get_full_path(self, path: str) -> str:
        return os.path.abspath(os.path.normpath(os.path.join(self.root, path)))

    def save(self, path: str, content: str):
        full_path = self.get_full_path(path)
        os.makedirs(os.path.dirname(full_path), exist_ok=True)
        # newline="" keeps the line endings of the content (eg. CRLF kernel files)
        with open(full_path, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        log.debug(f"Saved file {path} ({len(content)} bytes) to {full_path}")

    def read(self, path: str) -> str:
        full_path = self.get_full_path(path)
        if not os.path.isfile(full_path):
            raise ValueError(f"File not found: {path}")

        with open(full_path, "r", encoding="utf-8", newline="") as f:
            return f.read()

    def exists(self, path: str) -> bool:
        return os.path.isfile(self.get_full_path(path))

    def copy(self, source: str, path: str):
        full_path = self.get_full_path(path)
        os.makedirs(os.path.dirname(full_path), exist_ok=True)
        shutil.copyfile(source, full_path)
        log.debug(f"Copied {source} to {full_path}")

    def ensure_directory(self, path: str):
        full_path = self.get_full_path(path)
        os.makedirs(full_path, exist_ok=True)


__all__ = ["VirtualFileSystem", "MemoryVFS", "LocalDiskVFS"]
