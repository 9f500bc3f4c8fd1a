from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from fussel.core.fault import Fault
from fussel.core.ports.filesystem import Metadata

Report = Callable[[Fault], None]


class Lint(Protocol):
    """A check that reviews the text of one file at a time.

    Implementations must not keep ``path`` or ``content`` past ``review`` and
    must not share mutable state between calls, so that files can be reviewed
    concurrently.
    """

    name: str

    def ignore(self, path: Path, metadata: Metadata) -> bool:
        """Return ``True`` to skip *path* before its content is read."""
        return metadata.is_dir

    def review(self, path: Path, content: str, report: Report) -> None: ...
