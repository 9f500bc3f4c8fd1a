"""Lazily expanded project tree.

The tree is an arena: a :class:`Project` owns every directory and file slot and
hands out integer ids. Parents refer to children by id only, so the structure
can never form a cycle. A slot starts unexpanded (``entries``/``content`` is
``None``) and is populated by :meth:`Project.expand`; :meth:`Project.collapse`
returns it to that state.

Every slot has its own lock. ``expand`` and ``collapse`` hold the lock of the
one slot they change and publish the result with a single attribute
assignment, so a concurrent reader sees either the old or the new snapshot.
"""

from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from fussel.core.ports.filesystem import FileSystem, Metadata

logger = logging.getLogger(__name__)

NodeId = int


@dataclass(frozen=True)
class Binary:
    data: bytes


@dataclass(frozen=True)
class Text:
    text: str


Content = Binary | Text


def decode_content(raw: bytes) -> Content:
    """Decode *raw* as UTF-8, keeping the original bytes when that fails."""
    try:
        return Text(raw.decode("utf-8"))
    except UnicodeDecodeError:
        return Binary(raw)


@dataclass(frozen=True)
class Entries:
    directories: tuple[NodeId, ...] = ()
    files: tuple[NodeId, ...] = ()

    def __iter__(self) -> Iterator[NodeId]:
        yield from self.directories
        yield from self.files


@dataclass(eq=False)
class Directory:
    id: NodeId
    path: Path
    metadata: Metadata
    entries: Entries | None = None

    @property
    def expanded(self) -> bool:
        return self.entries is not None


@dataclass(eq=False)
class File:
    id: NodeId
    path: Path
    metadata: Metadata
    content: Content | None = None

    @property
    def expanded(self) -> bool:
        return self.content is not None


class _Truncated:
    """Marks a subtree that exists but has not been loaded yet."""

    _instance: _Truncated | None = None

    def __new__(cls) -> _Truncated:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "TRUNCATED"


TRUNCATED = _Truncated()


class Project:
    def __init__(self, root: Path, metadata: Metadata, fs: FileSystem) -> None:
        self.fs = fs
        self._slots: dict[NodeId, Directory | File] = {}
        self._locks: dict[NodeId, threading.Lock] = {}
        self._ids = itertools.count()
        self._arena_lock = threading.Lock()
        self.root = self._allocate(Directory, root, metadata)

    @classmethod
    def open(cls, path: str | Path, fs: FileSystem | None = None) -> Project:
        """Create an unexpanded project rooted at the canonical form of *path*."""
        if fs is None:
            from fussel.fs.local import LocalFileSystem

            fs = LocalFileSystem()
        root = Path(path).resolve()
        metadata = fs.read_metadata(root)
        if not metadata.is_dir:
            raise NotADirectoryError(f"Project root is not a directory: {root}")
        return cls(root, metadata, fs)

    @classmethod
    def load(cls, path: str | Path, fs: FileSystem | None = None) -> Project:
        """Open the project at *path* and expand its whole tree."""
        from fussel.core.traverse import Loader, traverse

        project = cls.open(path, fs)
        traverse(project, Loader(project))
        return project

    @property
    def root_directory(self) -> Directory:
        node = self._slots[self.root]
        if not isinstance(node, Directory):
            raise TypeError(f"Project root {node.path} is not a directory")
        return node

    def __len__(self) -> int:
        return len(self._slots)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._slots

    def node(self, node_id: NodeId) -> Directory | File:
        return self._slots[node_id]

    def get(self, node_id: NodeId) -> Directory | File | None:
        return self._slots.get(node_id)

    def expand(self, node_id: NodeId) -> None:
        """Populate a slot from the filesystem unless it is populated already.

        ``OSError`` from the filesystem propagates and leaves the slot
        unexpanded.
        """
        node = self._slots[node_id]
        with self._locks[node_id]:
            if isinstance(node, Directory):
                if node.entries is None:
                    node.entries = self._list(node)
            elif node.content is None:
                node.content = decode_content(self.fs.read_bytes(node.path))
                if isinstance(node.content, Binary):
                    logger.debug("Loaded %s as binary content", node.path)

    def collapse(self, node_id: NodeId) -> None:
        node = self._slots[node_id]
        with self._locks[node_id]:
            if isinstance(node, Directory):
                entries, node.entries = node.entries, None
            else:
                entries, node.content = None, None
        if entries is not None:
            for child_id in entries:
                self._release(child_id)

    def _list(self, directory: Directory) -> Entries:
        directories: list[NodeId] = []
        files: list[NodeId] = []
        for entry in self.fs.list_children(directory.path):
            if entry.is_dir:
                directories.append(self._allocate(Directory, entry.path, entry.metadata))
            elif entry.is_file:
                files.append(self._allocate(File, entry.path, entry.metadata))
        return Entries(directories=tuple(directories), files=tuple(files))

    def _allocate(self, kind: type[Directory] | type[File], path: Path, metadata: Metadata) -> NodeId:
        with self._arena_lock:
            node_id = next(self._ids)
            self._locks[node_id] = threading.Lock()
            self._slots[node_id] = kind(node_id, path, metadata)
        return node_id

    def _release(self, node_id: NodeId) -> None:
        with self._arena_lock:
            node = self._slots.pop(node_id, None)
            self._locks.pop(node_id, None)
        if isinstance(node, Directory) and node.entries is not None:
            for child_id in node.entries:
                self._release(child_id)
