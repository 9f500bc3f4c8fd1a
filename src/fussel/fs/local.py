import os
import stat
from pathlib import Path

from fussel.core.ports.filesystem import DirEntry, Metadata


class LocalFileSystem:
    """``FileSystem`` port backed by the real filesystem.

    Children are listed in name order so that walks are reproducible. Symbolic
    links are reported as neither directory nor file and are therefore never
    followed.
    """

    def list_children(self, path: Path) -> list[DirEntry]:
        children: list[DirEntry] = []
        with os.scandir(path) as entries:
            for entry in entries:
                is_file = entry.is_file(follow_symlinks=False)
                size = entry.stat(follow_symlinks=False).st_size if is_file else 0
                children.append(
                    DirEntry(
                        path=Path(entry.path),
                        is_dir=entry.is_dir(follow_symlinks=False),
                        is_file=is_file,
                        size=size,
                    )
                )
        children.sort(key=lambda child: child.path.name)
        return children

    def read_metadata(self, path: Path) -> Metadata:
        info = os.stat(path)
        return Metadata(is_dir=stat.S_ISDIR(info.st_mode), is_file=stat.S_ISREG(info.st_mode), size=info.st_size)

    def read_bytes(self, path: Path) -> bytes:
        return Path(path).read_bytes()
