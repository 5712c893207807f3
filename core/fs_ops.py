"""
fs_ops.py - Filesystem Access

The only place that touches the filesystem on behalf of the planner and
executor. Tests and front-ends can pass another implementation.
"""

from pathlib import Path
import os
import shutil


class FileSystem:
    """Filesystem interface used by the reconciler, planner and executor"""

    def exists(self, path: Path) -> bool:
        raise NotImplementedError

    def is_dir(self, path: Path) -> bool:
        raise NotImplementedError

    def make_dirs(self, path: Path) -> None:
        raise NotImplementedError

    def move(self, src: Path, dst: Path, overwrite: bool = False) -> None:
        raise NotImplementedError

    def copy(self, src: Path, dst: Path, overwrite: bool = False) -> None:
        raise NotImplementedError

    def remove(self, path: Path) -> None:
        raise NotImplementedError


class LocalFileSystem(FileSystem):
    """Local filesystem via os/shutil"""

    def exists(self, path: Path) -> bool:
        # Dangling symlinks count as existing
        return os.path.lexists(path)

    def is_dir(self, path: Path) -> bool:
        return Path(path).is_dir() and not Path(path).is_symlink()

    def make_dirs(self, path: Path) -> None:
        os.makedirs(path, exist_ok=True)

    def _clear_destination(self, dst: Path, overwrite: bool) -> None:
        if not self.exists(dst):
            return
        if not overwrite:
            raise FileExistsError(f"Destination exists: {dst}")
        self.remove(dst)

    def move(self, src: Path, dst: Path, overwrite: bool = False) -> None:
        """
        Move src to dst (rename, or copy + delete across devices)

        Args:
            src: Source path
            dst: Destination path (full new path, never a parent directory)
            overwrite: Replace an existing destination
        """
        if not self.exists(src):
            raise FileNotFoundError(f"Source does not exist: {src}")
        self._clear_destination(dst, overwrite)
        shutil.move(str(src), str(dst))

    def copy(self, src: Path, dst: Path, overwrite: bool = False) -> None:
        """
        Copy src to dst (directories recursively, symlinks as links)

        Args:
            src: Source path
            dst: Destination path
            overwrite: Replace an existing destination
        """
        if not self.exists(src):
            raise FileNotFoundError(f"Source does not exist: {src}")
        self._clear_destination(dst, overwrite)
        if self.is_dir(src):
            shutil.copytree(str(src), str(dst), symlinks=True)
        else:
            shutil.copy2(str(src), str(dst), follow_symlinks=False)

    def remove(self, path: Path) -> None:
        if self.is_dir(path):
            shutil.rmtree(path)
        else:
            os.unlink(path)
