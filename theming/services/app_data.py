"""App data: a per-app tree of named folders holding named files.

Layout on disk is ``<root>/<app>/<folder>/<file>``. Folders and files are
addressed by plain names only (no separators), so callers never build paths
themselves.
"""
from __future__ import annotations

import os
import tempfile
from pathlib import Path

from theming.errors import NotFoundError, StorageError


def _check_name(name: str) -> str:
    if not name or name in (".", "..") or "/" in name or "\\" in name:
        raise ValueError(f"Invalid app data name: {name!r}")
    return name


class StoredFile:
    """A single file inside an app data folder."""

    def __init__(self, path: Path):
        self.path = path

    @property
    def name(self) -> str:
        return self.path.name

    def exists(self) -> bool:
        return self.path.is_file()

    def get_content(self) -> bytes:
        try:
            return self.path.read_bytes()
        except FileNotFoundError as e:
            raise NotFoundError(self.name) from e
        except OSError as e:
            raise StorageError(f"Could not read {self.path}") from e

    def put_content(self, data: bytes) -> None:
        """Replace the file content. Readers see either the old or the new bytes."""
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.name}.")
            try:
                with os.fdopen(fd, "wb") as fh:
                    fh.write(data)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Could not write {self.path}") from e


class Folder:
    """A named folder of an app's data tree."""

    def __init__(self, path: Path):
        self.path = path

    @property
    def name(self) -> str:
        return self.path.name

    def file_exists(self, name: str) -> bool:
        return (self.path / _check_name(name)).is_file()

    def get_file(self, name: str) -> StoredFile:
        stored = StoredFile(self.path / _check_name(name))
        if not stored.exists():
            raise NotFoundError(f"{self.name}/{name}")
        return stored

    def new_file(self, name: str) -> StoredFile:
        """Return a handle for ``name``; the file is created on first ``put_content``."""
        return StoredFile(self.path / _check_name(name))


class AppData:
    """Folder tree owned by a single app."""

    def __init__(self, root: Path, app: str):
        self.root = Path(root) / _check_name(app)
        self.app = app

    def get_folder(self, name: str) -> Folder:
        path = self.root / _check_name(name)
        if not path.is_dir():
            raise NotFoundError(f"{self.app}/{name}")
        return Folder(path)

    def new_folder(self, name: str) -> Folder:
        path = self.root / _check_name(name)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Could not create {path}") from e
        return Folder(path)

    def get_or_create_folder(self, name: str) -> Folder:
        try:
            return self.get_folder(name)
        except NotFoundError:
            return self.new_folder(name)

