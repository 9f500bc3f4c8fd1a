from fussel.core.ports.filesystem import DirEntry, FileSystem, Metadata
from fussel.core.ports.ignore import IgnoreResolver
from fussel.core.ports.lint import Lint, Report

__all__ = [
    "DirEntry",
    "FileSystem",
    "IgnoreResolver",
    "Lint",
    "Metadata",
    "Report",
]
