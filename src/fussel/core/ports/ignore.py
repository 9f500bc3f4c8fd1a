from pathlib import Path
from typing import Protocol


class IgnoreResolver(Protocol):
    def is_ignored(self, path: Path) -> bool: ...
