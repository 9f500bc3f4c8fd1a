"""Shared fixtures and helpers for tests."""

import errno
import subprocess
from collections import Counter
from collections.abc import Callable, Iterable
from pathlib import Path

import pytest

from fussel.core.ports.filesystem import DirEntry, Metadata

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# MemoryFileSystem: FileSystem port over a dict, counting every access
# ---------------------------------------------------------------------------


class MemoryFileSystem:
    def __init__(self, files: dict[str, str | bytes], root: str = "/project", broken: Iterable[str] = ()) -> None:
        self.root = Path(root)
        self.files = {
            self.root / name: data.encode("utf-8") if isinstance(data, str) else data for name, data in files.items()
        }
        self.directories = {self.root}
        for path in self.files:
            self.directories.update(parent for parent in path.parents if parent.is_relative_to(self.root))
        self.broken = {self.root / name for name in broken}
        self.list_calls: Counter[Path] = Counter()
        self.read_calls: Counter[Path] = Counter()

    def add_directory(self, name: str) -> None:
        self.directories.add(self.root / name)

    def _check(self, path: Path) -> None:
        if path in self.broken:
            raise PermissionError(errno.EACCES, "Permission denied", str(path))

    def list_children(self, path: Path) -> list[DirEntry]:
        path = Path(path)
        self.list_calls[path] += 1
        self._check(path)
        if path not in self.directories:
            raise NotADirectoryError(errno.ENOTDIR, "Not a directory", str(path))
        children = [DirEntry(d, is_dir=True, is_file=False) for d in self.directories if d.parent == path and d != path]
        children += [
            DirEntry(f, is_dir=False, is_file=True, size=len(data)) for f, data in self.files.items() if f.parent == path
        ]
        return sorted(children, key=lambda child: child.path.name)

    def read_metadata(self, path: Path) -> Metadata:
        path = Path(path)
        if path in self.directories:
            return Metadata(is_dir=True, is_file=False)
        if path in self.files:
            return Metadata(is_dir=False, is_file=True, size=len(self.files[path]))
        raise FileNotFoundError(errno.ENOENT, "No such file or directory", str(path))

    def read_bytes(self, path: Path) -> bytes:
        path = Path(path)
        self.read_calls[path] += 1
        self._check(path)
        if path not in self.files:
            raise FileNotFoundError(errno.ENOENT, "No such file or directory", str(path))
        return self.files[path]

    @property
    def total_reads(self) -> int:
        return sum(self.list_calls.values()) + sum(self.read_calls.values())


class RecordingSink:
    """Binary sink remembering every write and flush in order."""

    def __init__(self) -> None:
        self.events: list[bytes | None] = []

    def write(self, data: bytes, /) -> int:
        self.events.append(data)
        return len(data)

    def flush(self) -> None:
        self.events.append(None)

    @property
    def flushes(self) -> int:
        return self.events.count(None)

    @property
    def text(self) -> str:
        return b"".join(event for event in self.events if event is not None).decode("utf-8")


def run_git(args: list[str], cwd: Path) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout.strip()


# ---------------------------------------------------------------------------
# Shared fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def memory_fs() -> Callable[..., MemoryFileSystem]:
    """Return a factory building an in-memory filesystem rooted at ``/project``."""
    return MemoryFileSystem


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Return the resolved work tree of a fresh git repository."""
    repo = tmp_path.resolve() / "repo"
    repo.mkdir()
    run_git(["init"], repo)
    run_git(["config", "user.name", "Test Author"], repo)
    run_git(["config", "user.email", "author@example.com"], repo)
    return repo
