from collections.abc import Iterable, Iterator


def natural_list(items: Iterable[str], delim: str, delim_last: str) -> str:
    """Join *items* the way a sentence would: ``a, b and c``."""
    values = list(items)
    if len(values) < 2:
        return "".join(values)
    return delim.join(values[:-1]) + delim_last + values[-1]


def list_and(items: Iterable[str]) -> str:
    return natural_list(items, ", ", " and ")


def list_or(items: Iterable[str]) -> str:
    return natural_list(items, ", ", " or ")


def iter_lines(content: str) -> Iterator[tuple[int, str]]:
    """Yield ``(row, line)`` pairs with 1-based rows and line endings removed.

    Lines are split on ``\\n`` only; a single ``\\r`` before it is dropped. A
    terminating newline does not open another line.
    """
    if not content:
        return
    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()
    for index, line in enumerate(lines):
        if line.endswith("\r"):
            line = line[:-1]
        yield index + 1, line
