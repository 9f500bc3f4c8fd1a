from collections.abc import Iterable, Iterator
from pathlib import Path

from fussel.core.fault import Excerpt, Fault, Message
from fussel.core.ports.lint import Lint, Report
from fussel.core.text import iter_lines

DEFAULT_KEYWORDS = ("TODO", "FIXME", "DEBUG")


def _find_all(line: str, keyword: str) -> Iterator[int]:
    """Yield the start of every non-overlapping occurrence of *keyword*."""
    start = line.find(keyword)
    while start != -1:
        yield start
        start = line.find(keyword, start + len(keyword))


class IncompleteWork(Lint):
    """Report keywords such as ``TODO`` that mark unfinished work."""

    name = "incomplete-work"

    def __init__(self, keywords: Iterable[str] = DEFAULT_KEYWORDS) -> None:
        self.keywords = tuple(keywords)
        if any(not keyword for keyword in self.keywords):
            raise ValueError("Keywords must not be empty")

    def review(self, path: Path, content: str, report: Report) -> None:
        for row, line in iter_lines(content):
            for keyword in self.keywords:
                for col_from in _find_all(line, keyword):
                    report(
                        Fault(
                            msg=Message.warning("there should be no incomplete work"),
                            quote=Excerpt(
                                path=path,
                                row=row,
                                col_from=col_from,
                                col_to=col_from + len(keyword) - 1,
                                text=line,
                                msg=Message.bare("keyword suggests incomplete work"),
                            ),
                            hints=(Message.help("remove keyword after completing work"),),
                        )
                    )
