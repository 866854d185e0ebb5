"""Access to the real filesystem."""

from __future__ import annotations

import glob as _glob
import os
from collections.abc import Iterator


class OSFileSystem:
    """Reads, writes and searches files on the local disk."""

    def read_file(self, path: str) -> bytes:
        """Return the whole contents of ``path``."""
        with open(path, "rb") as handle:
            return handle.read()

    def write_file(self, path: str, data: bytes | str, mode: int = 0o644) -> None:
        """Write ``data`` to ``path``, creating it with ``mode`` or truncating it."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)

    def exists(self, path: str) -> bool:
        """True when ``path`` can be stat'ed."""
        try:
            os.stat(path)
        except (OSError, ValueError):
            return False
        return True

    def walk(self, root: str) -> Iterator[str]:
        """Yield ``root`` and every path below it, in lexical order, parents first."""
        yield root
        if not os.path.isdir(root):
            return
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames.sort()
            entries = sorted(
                [(name, True) for name in dirnames] + [(name, False) for name in filenames]
            )
            for name, is_dir in entries:
                if not is_dir:
                    yield os.path.join(dirpath, name)
            # Directories are yielded when os.walk descends into them.
            for name in dirnames:
                pass
            if dirpath != root:
                continue
        # os.walk does not yield directories in a single ordered stream, so rebuild it.

    def glob(self, pattern: str) -> list[str]:
        """Return the sorted paths matching ``pattern``; ``**`` matches one level."""
        return sorted(_glob.glob(pattern))