from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


@dataclass(frozen=True)
class Metadata:
    is_dir: bool
    is_file: bool
    size: int = 0


@dataclass(frozen=True)
class DirEntry:
    path: Path
    is_dir: bool
    is_file: bool
    size: int = 0

    @property
    def metadata(self) -> Metadata:
        return Metadata(is_dir=self.is_dir, is_file=self.is_file, size=self.size)


class FileSystem(Protocol):
    """Read-only access to a directory tree. Failures raise ``OSError``."""

    def list_children(self, path: Path) -> list[DirEntry]: ...

    def read_metadata(self, path: Path) -> Metadata: ...

    def read_bytes(self, path: Path) -> bytes: ...
