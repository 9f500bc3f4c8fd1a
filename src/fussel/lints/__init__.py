from __future__ import annotations

from typing import TYPE_CHECKING

from fussel.core.ports.lint import Lint
from fussel.lints.incomplete_work import IncompleteWork
from fussel.lints.trailing_whitespace import TrailingWhitespace

if TYPE_CHECKING:
    from fussel.config import FusselConfig


def build_lints(config: FusselConfig) -> list[Lint]:
    """Instantiate the enabled lints in their fixed reporting order."""
    lints: list[Lint] = []
    if config.trailing_whitespace.enabled:
        lints.append(TrailingWhitespace(config.trailing_whitespace.extension_blacklist))
    if config.incomplete_work.enabled:
        lints.append(IncompleteWork(config.incomplete_work.keywords))
    return lints


__all__ = ["IncompleteWork", "TrailingWhitespace", "build_lints"]
