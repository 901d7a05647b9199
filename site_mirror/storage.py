# site_mirror/storage.py
"""
Disk storage adapter: byte-level persist/read of mirrored pages.
"""
from __future__ import annotations

import errno
from pathlib import Path
from typing import Union

from site_mirror.errors import StorageError
from site_mirror.logger import logger

__all__ = ("DiskStorage",)

PathT = Union[str, Path]


class DiskStorage:
    """Stores files under *root*; paths handed in are already absolute."""

    def __init__(self, root: PathT) -> None:
        self.root = Path(root)

    def resolve(self, relative: str) -> Path:
        """Map a mirror-relative POSIX path to a file under :attr:`root`."""
        target = (self.root / relative.lstrip("/")).resolve()
        root = self.root.resolve()
        if target != root and root not in target.parents:
            raise StorageError(relative, "path escapes the mirror directory")
        return target

    def store(self, path: PathT, data: bytes) -> None:
        """Write *data* to *path*, creating parent directories as needed."""
        target = Path(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(str(target), f"error creating directory: {exc}") from exc
        try:
            target.write_bytes(data)
        except OSError as exc:
            raise StorageError(str(target), f"error writing file: {exc}") from exc
        logger.debug("Stored %d bytes to %s", len(data), target)

    def retrieve(self, path: PathT) -> bytes:
        """Return the bytes at *path*, or ``b""`` if nothing is stored there."""
        target = Path(path)
        try:
            return target.read_bytes()
        except FileNotFoundError:
            return b""
        except NotADirectoryError:
            # a parent component is a regular file: nothing stored at this path
            return b""
        except OSError as exc:
            if exc.errno == errno.ENOENT:
                return b""
            raise StorageError(str(target), f"error reading file: {exc}") from exc
