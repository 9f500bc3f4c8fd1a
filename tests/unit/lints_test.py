"""Tests for the built-in lints."""

from pathlib import Path

import pytest

from fussel.config import FusselConfig, IncompleteWorkConfig, TrailingWhitespaceConfig
from fussel.core.fault import Excerpt, Fault, Level, Message
from fussel.core.ports.filesystem import Metadata
from fussel.lints import IncompleteWork, TrailingWhitespace, build_lints

_FILE = Metadata(is_dir=False, is_file=True, size=1)
_DIR = Metadata(is_dir=True, is_file=False)


def _review(lint: IncompleteWork | TrailingWhitespace, content: str, path: str = "README.md") -> list[Fault]:
    faults: list[Fault] = []
    lint.review(Path(path), content, faults.append)
    return faults


def _excerpt(fault: Fault) -> Excerpt:
    assert isinstance(fault.quote, Excerpt)
    return fault.quote


class TestIncompleteWork:
    def test_reports_todo_in_comment(self) -> None:
        faults = _review(IncompleteWork(["TODO", "FIXME", "DEBUG"]), "fn main() {\n    // TODO\n}\n")

        assert len(faults) == 1
        excerpt = _excerpt(faults[0])
        assert (excerpt.row, excerpt.col_from, excerpt.col_to) == (2, 7, 10)
        assert excerpt.width == 4

    def test_render(self) -> None:
        faults = _review(IncompleteWork(), "fn main() {\n    // TODO\n}\n")

        assert faults[0].render() == (
            "warning: there should be no incomplete work\n"
            " --> README.md:2:7\n"
            "  |\n"
            "2 |     // TODO\n"
            "  |        ^^^^ keyword suggests incomplete work\n"
            "  |\n"
            "  = help: remove keyword after completing work\n"
        )

    def test_every_occurrence_is_reported(self) -> None:
        faults = _review(IncompleteWork(), "TODO FIXME TODO\nclean\nDEBUG\n")

        spans = [(_excerpt(f).row, _excerpt(f).col_from) for f in faults]
        assert spans == [(1, 0), (1, 11), (1, 5), (3, 0)]

    def test_custom_keywords(self) -> None:
        assert _review(IncompleteWork(["XXX"]), "TODO\nXXX\n")[0].quote == Excerpt(
            path=Path("README.md"),
            row=2,
            col_from=0,
            col_to=2,
            text="XXX",
            msg=Message.bare("keyword suggests incomplete work"),
        )

    def test_empty_keyword_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            IncompleteWork(["TODO", ""])

    def test_ignores_only_directories(self) -> None:
        lint = IncompleteWork()
        assert lint.ignore(Path("src"), _DIR)
        assert not lint.ignore(Path("notes.md"), _FILE)

    def test_carriage_return_inside_line_is_quoted_as_is(self) -> None:
        faults = _review(IncompleteWork(), "old\rmac TODO\n", path="a.txt")

        assert len(faults) == 1
        excerpt = _excerpt(faults[0])
        assert (excerpt.row, excerpt.col_from, excerpt.col_to) == (1, 8, 11)
        assert excerpt.text == "old\rmac TODO"


class TestTrailingWhitespace:
    def test_one_fault_per_offending_line(self) -> None:
        content = "clean\nspace \nclean again\ntabs\t\t\nmixed \t \nlast"
        faults = _review(TrailingWhitespace(), content)

        assert len(faults) == 3
        assert [f.level for f in faults] == [Level.WARNING] * 3
        spans = [(_excerpt(f).row, _excerpt(f).col_from, _excerpt(f).col_to) for f in faults]
        assert spans == [(2, 5, 5), (4, 4, 5), (5, 5, 7)]

    def test_line_endings_are_not_whitespace(self) -> None:
        assert _review(TrailingWhitespace(), "a\r\nb\r\n") == []

    def test_span_stops_before_carriage_return(self) -> None:
        faults = _review(TrailingWhitespace(), "a  \r\n")
        assert (_excerpt(faults[0]).col_from, _excerpt(faults[0]).col_to) == (1, 2)

    def test_whitespace_only_line(self) -> None:
        faults = _review(TrailingWhitespace(), "x\n   \n")
        assert (_excerpt(faults[0]).row, _excerpt(faults[0]).col_from, _excerpt(faults[0]).col_to) == (2, 0, 2)

    def test_blacklist_ignores_extensions(self) -> None:
        lint = TrailingWhitespace([".md", "diff"])
        assert lint.ignore(Path("README.md"), _FILE)
        assert lint.ignore(Path("a/b.diff"), _FILE)
        assert not lint.ignore(Path("main.rs"), _FILE)
        assert not lint.ignore(Path("Makefile"), _FILE)
        assert lint.ignore(Path("src"), _DIR)

    def test_blacklist_note(self) -> None:
        faults = _review(TrailingWhitespace(["md", "diff"]), "x \n", path="main.rs")
        assert faults[0].hints == (Message.note("filenames ending with '.diff' or '.md' are ignored"),)

    def test_no_note_without_blacklist(self) -> None:
        assert _review(TrailingWhitespace(), "x \n")[0].hints == ()

    def test_carriage_return_inside_line_is_quoted_as_is(self) -> None:
        faults = _review(TrailingWhitespace(), "x\ry \n", path="a.txt")

        assert len(faults) == 1
        excerpt = _excerpt(faults[0])
        assert (excerpt.col_from, excerpt.col_to) == (3, 3)
        assert excerpt.text == "x\ry "

    def test_interior_whitespace_run_is_not_reported(self) -> None:
        line = " " * 50_000 + "x"

        assert _review(TrailingWhitespace(), f"{line}\n{line}\t\n") == [
            Fault(
                msg=Message.warning("lines should not end with trailing whitespace, unless the file format requires"),
                quote=Excerpt(
                    path=Path("README.md"),
                    row=2,
                    col_from=50_001,
                    col_to=50_001,
                    text=f"{line}\t",
                    msg=Message.bare("whitespace found here"),
                ),
            )
        ]

    def test_unicode_whitespace_counts(self) -> None:
        faults = _review(TrailingWhitespace(), "x 　\n")
        assert (_excerpt(faults[0]).col_from, _excerpt(faults[0]).col_to) == (1, 2)


class TestBuildLints:
    def test_default_order(self) -> None:
        assert [lint.name for lint in build_lints(FusselConfig())] == ["trailing-whitespace", "incomplete-work"]

    def test_disabled_lints_are_left_out(self) -> None:
        config = FusselConfig(
            trailing_whitespace=TrailingWhitespaceConfig(enabled=False),
            incomplete_work=IncompleteWorkConfig(keywords=["HACK"]),
        )
        lints = build_lints(config)

        assert len(lints) == 1
        assert isinstance(lints[0], IncompleteWork)
        assert lints[0].keywords == ("HACK",)
