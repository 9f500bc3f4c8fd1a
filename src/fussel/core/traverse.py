"""Visitor-driven walks over a :class:`~fussel.core.tree.Project`.

The walk itself never touches the filesystem. When it reaches a directory or
file that has not been expanded it reports a single ``TRUNCATED`` node instead,
and it is up to the visitor (for example :class:`Loader`) to expand nodes on
``enter`` if it wants to see their children.
"""

from __future__ import annotations

import sys
from collections.abc import Generator
from enum import Enum
from typing import Protocol, TextIO

from fussel.core.tree import TRUNCATED, Binary, Content, Directory, File, Project, Text, _Truncated

Node = _Truncated | Project | Directory | File | Content


class Enter(Enum):
    DESCEND = "descend"
    SKIP = "skip"


class Leave(Enum):
    CONTINUE = "continue"
    ABORT = "abort"


class Visitor(Protocol):
    def enter(self, node: Node) -> Enter: ...

    def leave(self, node: Node) -> Leave: ...


def walk(project: Project, visitor: Visitor) -> Generator[Node, None, Leave]:
    """Walk *project* depth first, sub-directories before files.

    Yields every node right after the visitor has left it, which lets a caller
    interleave its own work between nodes. The generator returns the result of
    leaving the project.
    """
    if visitor.enter(project) is Enter.DESCEND:
        yield from _walk_directory(project, project.root_directory, visitor)
    result = visitor.leave(project)
    yield project
    return result


def traverse(project: Project, visitor: Visitor) -> Leave:
    steps = walk(project, visitor)
    while True:
        try:
            next(steps)
        except StopIteration as stop:
            return stop.value


def _walk_directory(project: Project, directory: Directory, visitor: Visitor) -> Generator[Node, None, Leave]:
    if visitor.enter(directory) is Enter.DESCEND:
        entries = directory.entries
        if entries is None:
            yield from _walk_truncated(visitor)
        else:
            for child_id in entries:
                child = project.get(child_id)
                if child is None:
                    continue
                if isinstance(child, Directory):
                    result = yield from _walk_directory(project, child, visitor)
                else:
                    result = yield from _walk_file(child, visitor)
                if result is Leave.ABORT:
                    break
    result = visitor.leave(directory)
    yield directory
    return result


def _walk_file(file: File, visitor: Visitor) -> Generator[Node, None, Leave]:
    if visitor.enter(file) is Enter.DESCEND:
        content = file.content
        if content is None:
            yield from _walk_truncated(visitor)
        else:
            visitor.enter(content)
            visitor.leave(content)
            yield content
    result = visitor.leave(file)
    yield file
    return result


def _walk_truncated(visitor: Visitor) -> Generator[Node, None, None]:
    visitor.enter(TRUNCATED)
    visitor.leave(TRUNCATED)
    yield TRUNCATED


class Loader:
    """Expand every directory and file, without descending into content."""

    def __init__(self, project: Project) -> None:
        self._project = project

    def enter(self, node: Node) -> Enter:
        if isinstance(node, Directory):
            self._project.expand(node.id)
            return Enter.DESCEND
        if isinstance(node, File):
            self._project.expand(node.id)
            return Enter.SKIP
        if isinstance(node, Project):
            return Enter.DESCEND
        return Enter.SKIP

    def leave(self, node: Node) -> Leave:
        return Leave.CONTINUE


class Printer:
    """Write an indented outline of every node the walk reaches."""

    def __init__(self, out: TextIO | None = None, indent: str = "    ") -> None:
        self._out = out if out is not None else sys.stdout
        self._indent = indent
        self._level = 0

    def enter(self, node: Node) -> Enter:
        self._out.write(f"{self._indent * self._level}{describe(node)}\n")
        self._level += 1
        return Enter.DESCEND

    def leave(self, node: Node) -> Leave:
        self._level -= 1
        return Leave.CONTINUE


def describe(node: Node) -> str:
    if isinstance(node, Project):
        return f"Project: {node.root_directory.path}"
    if isinstance(node, Directory):
        return f"Directory: {node.path}"
    if isinstance(node, File):
        return f"File: {node.path}"
    if isinstance(node, Text):
        return f"Content: text ({len(node.text)} chars)"
    if isinstance(node, Binary):
        return f"Content: binary ({len(node.data)} bytes)"
    return "Truncated"
