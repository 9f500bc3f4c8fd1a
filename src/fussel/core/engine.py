"""Run lints over a file source and stream their faults to a sink.

A source enumerates candidate files, either with the flat :class:`Walker` or by
walking a lazily expanded :class:`Project`. One producer reviews file after
file and pushes the faults into the pipeline; a :class:`Reporter` task renders
them in arrival order.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from fussel.core.fault import Fault
from fussel.core.pipeline import DEFAULT_CAPACITY, ReportSummary, Reporter, Sender, Sink, channel
from fussel.core.ports.filesystem import DirEntry, FileSystem, Metadata
from fussel.core.ports.ignore import IgnoreResolver
from fussel.core.ports.lint import Lint
from fussel.core.traverse import Enter, Leave, Node, walk
from fussel.core.tree import Binary, Content, Directory, File, Project, Text, decode_content
from fussel.core.walker import EntryFilter, Walker, not_ignored
from fussel.errors import LintRunError

logger = logging.getLogger(__name__)


def display_path(path: Path, root: Path) -> Path:
    try:
        return path.relative_to(root)
    except ValueError:
        return path


def interested(lints: Sequence[Lint], path: Path, metadata: Metadata) -> list[Lint]:
    return [lint for lint in lints if not lint.ignore(path, metadata)]


def review(lints: Sequence[Lint], path: Path, content: Content) -> list[Fault]:
    """Collect the faults every lint reports for one file; binary content is skipped."""
    if isinstance(content, Binary):
        logger.debug("Skipping binary file %s", path)
        return []
    faults: list[Fault] = []
    for lint in lints:
        lint.review(path, content.text, faults.append)
    return faults


class FileSource(Protocol):
    async def produce(self, lints: Sequence[Lint], sender: Sender[Fault]) -> int:
        """Review every candidate file and send the faults; return the file count."""
        ...


class WalkerSource:
    def __init__(self, walker: Walker, fs: FileSystem) -> None:
        self.walker = walker
        self.fs = fs

    async def produce(self, lints: Sequence[Lint], sender: Sender[Fault]) -> int:
        reviewed = 0
        root = self.walker.root
        for item in self.walker:
            if isinstance(item, OSError):
                raise item
            shown = display_path(item, root)
            active = interested(lints, shown, self.fs.read_metadata(item))
            if not active:
                continue
            content = decode_content(self.fs.read_bytes(item))
            if isinstance(content, Text):
                reviewed += 1
            for fault in review(active, shown, content):
                await sender.send(fault)
        return reviewed


class Reviewer:
    """Visitor that expands the tree on the way down and reviews each file.

    Ignored directories are skipped without being listed. File content is
    collapsed again once reviewed, so at most one file is held in memory.
    Faults queue up in ``pending`` until the caller sends them.
    """

    def __init__(self, project: Project, lints: Sequence[Lint], ignore: IgnoreResolver | None = None) -> None:
        self.project = project
        self.lints = list(lints)
        self.pending: deque[Fault] = deque()
        self.reviewed = 0
        self._keep: EntryFilter | None = not_ignored(ignore) if ignore is not None else None

    def _ignored(self, node: Directory | File) -> bool:
        if self._keep is None or node.id == self.project.root:
            return False
        entry = DirEntry(node.path, node.metadata.is_dir, node.metadata.is_file, node.metadata.size)
        return not self._keep(entry)

    def enter(self, node: Node) -> Enter:
        if isinstance(node, Project):
            return Enter.DESCEND
        if isinstance(node, Directory):
            if self._ignored(node):
                return Enter.SKIP
            self.project.expand(node.id)
            return Enter.DESCEND
        if isinstance(node, File):
            self._review(node)
        return Enter.SKIP

    def leave(self, node: Node) -> Leave:
        return Leave.CONTINUE

    def _review(self, file: File) -> None:
        shown = display_path(file.path, self.project.root_directory.path)
        active = interested(self.lints, shown, file.metadata)
        if not active or self._ignored(file):
            return
        self.project.expand(file.id)
        try:
            content = file.content
            if content is None:
                raise RuntimeError(f"Content of {file.path} was not loaded")
            if isinstance(content, Text):
                self.reviewed += 1
            self.pending.extend(review(active, shown, content))
        finally:
            self.project.collapse(file.id)


class TreeSource:
    def __init__(self, project: Project, ignore: IgnoreResolver | None = None) -> None:
        self.project = project
        self.ignore = ignore

    async def produce(self, lints: Sequence[Lint], sender: Sender[Fault]) -> int:
        reviewer = Reviewer(self.project, lints, self.ignore)
        for _node in walk(self.project, reviewer):
            while reviewer.pending:
                await sender.send(reviewer.pending.popleft())
        return reviewer.reviewed


async def _finish(reporter: asyncio.Task[ReportSummary]) -> ReportSummary:
    try:
        return await reporter
    except OSError as exc:
        raise LintRunError("Cannot write report") from exc


async def run_lints(
    lints: Sequence[Lint],
    source: FileSource,
    sink: Sink,
    capacity: int | None = DEFAULT_CAPACITY,
) -> ReportSummary:
    """Lint every file of *source* and write the rendered faults to *sink*.

    The reporter is always awaited, so the sink is flushed once after the last
    fault, also when the run fails. Raises ``LintRunError`` when a file or
    directory cannot be read or the sink cannot be written.
    """
    sender, receiver = channel(capacity)
    reporter = Reporter(receiver, sink).spawn()
    try:
        async with sender:
            reviewed = await source.produce(lints, sender)
    except OSError as exc:
        target = exc.filename if exc.filename is not None else "project files"
        raise LintRunError(f"Cannot read {target}") from exc
    finally:
        # a failed reporter closes the receiver early, which surfaces as SendError
        summary = await _finish(reporter)
    logger.info("Reviewed %d file(s), reported %d fault(s)", reviewed, summary.total)
    return summary
