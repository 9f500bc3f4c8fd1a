from collections.abc import Iterable
from pathlib import Path

from fussel.core.fault import Excerpt, Fault, Message
from fussel.core.ports.filesystem import Metadata
from fussel.core.ports.lint import Lint, Report
from fussel.core.text import iter_lines, list_or


class TrailingWhitespace(Lint):
    """Report lines that end with whitespace."""

    name = "trailing-whitespace"

    def __init__(self, extension_blacklist: Iterable[str] = ()) -> None:
        self.extension_blacklist = frozenset(ext.lstrip(".") for ext in extension_blacklist)
        self._hints = self._build_hints()

    def _build_hints(self) -> tuple[Message, ...]:
        if not self.extension_blacklist:
            return ()
        extensions = sorted(f"'.{ext}'" for ext in self.extension_blacklist)
        return (Message.note(f"filenames ending with {list_or(extensions)} are ignored"),)

    def ignore(self, path: Path, metadata: Metadata) -> bool:
        if metadata.is_dir:
            return True
        suffix = path.suffix
        return bool(suffix) and suffix[1:] in self.extension_blacklist

    def review(self, path: Path, content: str, report: Report) -> None:
        for row, line in iter_lines(content):
            # rstrip() drops exactly the characters str.isspace() accepts
            col_from = len(line.rstrip())
            if col_from == len(line):
                continue
            report(
                Fault(
                    msg=Message.warning(
                        "lines should not end with trailing whitespace, unless the file format requires"
                    ),
                    quote=Excerpt(
                        path=path,
                        row=row,
                        col_from=col_from,
                        col_to=len(line) - 1,
                        text=line,
                        msg=Message.bare("whitespace found here"),
                    ),
                    hints=self._hints,
                )
            )
