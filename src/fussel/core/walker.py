"""Flat, filter-driven walk over a directory tree.

Two ordered predicate chains decide what the walk produces:

* *subtree filters* see every entry; rejecting a directory prunes it without
  listing its content,
* *node filters* decide which of the remaining entries are yielded.

Listing failures do not stop the walk. They are yielded as ``OSError`` items
so the consumer decides whether they are fatal.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from fussel.core.ports.filesystem import DirEntry, FileSystem
from fussel.core.ports.ignore import IgnoreResolver

logger = logging.getLogger(__name__)

EntryFilter = Callable[[DirEntry], bool]
WalkItem = Path | OSError


def is_file(entry: DirEntry) -> bool:
    return entry.is_file


def extension_not_in(blacklist: Collection[str]) -> EntryFilter:
    """Reject entries whose extension (without the dot) is in *blacklist*."""
    extensions = frozenset(ext.lstrip(".") for ext in blacklist)

    def _filter(entry: DirEntry) -> bool:
        suffix = entry.path.suffix
        return not suffix or suffix[1:] not in extensions

    return _filter


def not_ignored(resolver: IgnoreResolver) -> EntryFilter:
    """Reject entries the resolver ignores. Resolver failures count as ignored."""

    def _filter(entry: DirEntry) -> bool:
        try:
            return not resolver.is_ignored(entry.path)
        except Exception as exc:
            logger.warning("Could not resolve ignore rules for %s: %s", entry.path, exc)
            return False

    return _filter


class Walker:
    """One-shot iterator over the paths below *root* that pass every filter."""

    def __init__(
        self,
        root: Path,
        fs: FileSystem,
        subtree_filters: list[EntryFilter] | None = None,
        node_filters: list[EntryFilter] | None = None,
    ) -> None:
        self.root = Path(root)
        self.fs = fs
        self.subtree_filters = list(subtree_filters or [])
        self.node_filters = list(node_filters or [])
        self._items = self._walk()

    def __iter__(self) -> Iterator[WalkItem]:
        return self

    def __next__(self) -> WalkItem:
        return next(self._items)

    def _walk(self) -> Iterator[WalkItem]:
        try:
            metadata = self.fs.read_metadata(self.root)
        except OSError as exc:
            yield exc
            return
        root = DirEntry(self.root, metadata.is_dir, metadata.is_file, metadata.size)
        stack = [root]
        while stack:
            entry = stack.pop()
            if not all(keep(entry) for keep in self.subtree_filters):
                continue
            if all(keep(entry) for keep in self.node_filters):
                yield entry.path
            if entry.is_dir:
                try:
                    children = self.fs.list_children(entry.path)
                except OSError as exc:
                    yield exc
                    continue
                stack.extend(reversed(children))


@dataclass
class WalkerBuilder:
    root: Path
    fs: FileSystem
    respect_gitignore: bool = True
    ignore_resolver: IgnoreResolver | None = None
    extension_blacklist: set[str] = field(default_factory=set)

    def build(self) -> Walker:
        subtree_filters: list[EntryFilter] = []
        if self.respect_gitignore and self.ignore_resolver is not None:
            subtree_filters.append(not_ignored(self.ignore_resolver))
        node_filters: list[EntryFilter] = [is_file]
        if self.extension_blacklist:
            node_filters.append(extension_not_in(self.extension_blacklist))
        return Walker(self.root, self.fs, subtree_filters, node_filters)
