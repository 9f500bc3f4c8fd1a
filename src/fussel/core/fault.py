"""Diagnostic value types and their rustc-style text rendering.

A :class:`Fault` is a complete diagnostic: a headline :class:`Message`, an
optional quote of the offending source and any number of hint messages.
Rendering is pure and deterministic::

    warning: tabs should be avoided
      --> src/main.rs:42:0
       |
    42 |     let n = 4711;
       | ^^^^ tab found here
       |
       = help: use spaces instead of tabs

Rows are 1-based, columns are 0-based ``str`` indices (code points). The same
unit is used by the lints to compute spans and by the renderer to place the
carets, so underlines stay aligned on non-ASCII lines.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class MultiLineExcerptError(ValueError):
    """Raised when an excerpt would have to span more than one line."""


@dataclass(frozen=True, order=True)
class Position:
    row: int
    col: int

    def __post_init__(self) -> None:
        if self.row < 0 or self.col < 0:
            raise ValueError(f"Position must not be negative, got {self.row}:{self.col}")

    def __str__(self) -> str:
        return f"{self.row}:{self.col}"


@dataclass(frozen=True)
class Range:
    """Closed range between two positions, normalized so that ``lb <= ub``."""

    lb: Position
    ub: Position

    def __post_init__(self) -> None:
        if self.ub < self.lb:
            lb, ub = self.ub, self.lb
            object.__setattr__(self, "lb", lb)
            object.__setattr__(self, "ub", ub)

    @classmethod
    def on_row(cls, row: int, col_from: int, col_to: int) -> Range:
        return cls(Position(row, col_from), Position(row, col_to))

    def bounds(self) -> tuple[Position, Position]:
        return self.lb, self.ub

    def contains(self, other: Range) -> bool:
        return self.lb <= other.lb and other.ub <= self.ub

    def overlaps(self, other: Range) -> bool:
        return self.lb <= other.ub and other.lb <= self.ub

    def __str__(self) -> str:
        lb, ub = self.bounds()
        if lb.row != ub.row:
            return f"{lb}...{ub}"
        if lb.col != ub.col:
            return f"{lb.row}:{lb.col}...{ub.col}"
        return str(lb)


@dataclass(frozen=True, order=True)
class Spot:
    path: Path
    pos: Position

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", Path(self.path))

    def __str__(self) -> str:
        return f"{self.path}:{self.pos}"


@dataclass(frozen=True)
class Scope:
    path: Path
    range: Range

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", Path(self.path))

    def bounds(self) -> tuple[Spot, Spot]:
        return Spot(self.path, self.range.lb), Spot(self.path, self.range.ub)

    def contains(self, other: Scope) -> bool:
        return self.path == other.path and self.range.contains(other.range)

    def overlaps(self, other: Scope) -> bool:
        return self.path == other.path and self.range.overlaps(other.range)

    def __str__(self) -> str:
        return f"{self.path}:{self.range}"


class Level(Enum):
    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"
    HELP = "help"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Message:
    text: str
    level: Level | None = None

    @classmethod
    def bare(cls, text: str) -> Message:
        return cls(text)

    @classmethod
    def error(cls, text: str) -> Message:
        return cls(text, Level.ERROR)

    @classmethod
    def warning(cls, text: str) -> Message:
        return cls(text, Level.WARNING)

    @classmethod
    def note(cls, text: str) -> Message:
        return cls(text, Level.NOTE)

    @classmethod
    def help(cls, text: str) -> Message:
        return cls(text, Level.HELP)

    @property
    def is_bare(self) -> bool:
        return self.level is None

    def __str__(self) -> str:
        if self.level is None:
            return self.text
        return f"{self.level}: {self.text}"


@dataclass(frozen=True)
class FileRef:
    """Quote that only names the file a fault refers to."""

    path: Path

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", Path(self.path))

    def render_lines(self, prefix: str) -> list[str]:
        return [f"{prefix}--> {self.path}"]


@dataclass(frozen=True)
class Excerpt:
    """One physical source line with an inclusive, underlined column span."""

    path: Path
    row: int
    col_from: int
    col_to: int
    text: str
    msg: Message = field(default_factory=lambda: Message.bare(""))

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", Path(self.path))
        if "\n" in self.text:
            raise MultiLineExcerptError(f"Excerpt text of {self.path}:{self.row} spans several lines")
        if self.row < 0 or self.col_from < 0:
            raise ValueError(f"Excerpt position must not be negative, got {self.row}:{self.col_from}")
        if self.col_to < self.col_from:
            raise ValueError(f"Excerpt span is reversed: {self.col_from}...{self.col_to}")

    @classmethod
    def from_scope(cls, mark: Scope, text: str, msg: Message) -> Excerpt:
        lb, ub = mark.range.bounds()
        if lb.row != ub.row:
            raise MultiLineExcerptError(f"Cannot quote {mark} on a single line")
        return cls(path=mark.path, row=lb.row, col_from=lb.col, col_to=ub.col, text=text, msg=msg)

    @property
    def mark(self) -> Scope:
        return Scope(self.path, Range.on_row(self.row, self.col_from, self.col_to))

    @property
    def ctx(self) -> Scope:
        return Scope(self.path, Range.on_row(self.row, 0, len(self.text)))

    @property
    def width(self) -> int:
        return self.col_to - self.col_from + 1

    def render_lines(self, prefix: str) -> list[str]:
        underline = f"{prefix} | {' ' * self.col_from}{'^' * self.width}"
        inline = str(self.msg)
        if inline:
            underline = f"{underline} {inline}"
        return [
            f"{prefix}--> {self.path}:{self.row}:{self.col_from}",
            f"{prefix} |",
            f"{self.row} | {self.text}",
            underline,
            f"{prefix} |",
        ]


Quote = FileRef | Excerpt | None


def canvas_prefix(quote: Quote) -> str:
    """Return the gutter padding that aligns every line of a quote block."""
    if isinstance(quote, Excerpt):
        return " " * len(str(quote.row))
    return " "


@dataclass(frozen=True)
class Fault:
    msg: Message
    quote: Quote = None
    hints: tuple[Message, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "hints", tuple(self.hints))

    @classmethod
    def simple(cls, msg: Message) -> Fault:
        return cls(msg)

    @property
    def level(self) -> Level | None:
        return self.msg.level

    def render(self) -> str:
        prefix = canvas_prefix(self.quote)
        lines = [str(self.msg)]
        if self.quote is not None:
            lines.extend(self.quote.render_lines(prefix))
        lines.extend(f"{prefix} = {hint}" for hint in self.hints)
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return self.render()
