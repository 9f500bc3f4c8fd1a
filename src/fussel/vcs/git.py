import logging
import os
import subprocess
import threading
from pathlib import Path
from typing import IO

from fussel.errors import BareRepositoryError, RepositoryNotFoundError

logger = logging.getLogger(__name__)

_CHECK_IGNORE_ARGS = ["check-ignore", "--stdin", "-z", "--verbose", "--non-matching", "--no-index"]


class GitError(RuntimeError):
    pass


def _git(args: list[str], cwd: Path) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        ["git", "-C", str(cwd), *args],
        check=False,
        capture_output=True,
        text=True,
    )


def discover_work_tree(start_dir: Path) -> Path:
    """Return the work tree of the repository containing *start_dir*."""
    bare = _git(["rev-parse", "--is-bare-repository"], start_dir)
    if bare.returncode != 0:
        raise RepositoryNotFoundError(f"No git repository found at or above {start_dir}")
    if bare.stdout.strip() == "true":
        raise BareRepositoryError(f"The git repository at {start_dir} is bare and has no work tree")
    result = _git(["rev-parse", "--show-toplevel"], start_dir)
    root = result.stdout.strip()
    if result.returncode != 0 or not root:
        raise BareRepositoryError(f"The git repository at {start_dir} has no work tree")
    logger.debug("Discovered git work tree %s", root)
    return Path(root)


class GitIgnoreResolver:
    """``IgnoreResolver`` port answering with the repository's ignore rules.

    One ``git check-ignore --stdin`` process answers every query, so a walk
    starts a single process however many entries it visits. Call
    :meth:`close` (or use the resolver as a context manager) when done.
    """

    def __init__(self, work_tree: Path) -> None:
        self.work_tree = Path(work_tree)
        self._process: subprocess.Popen[bytes] | None = None
        self._lock = threading.Lock()

    @classmethod
    def discover(cls, start_dir: Path) -> "GitIgnoreResolver":
        return cls(discover_work_tree(start_dir))

    def is_ignored(self, path: Path) -> bool:
        """Return whether git ignores *path*; the ``.git`` directory always is.

        Raises ``GitError`` when git cannot answer, e.g. for paths outside the
        work tree.
        """
        if path.name == ".git":
            return True
        if path == self.work_tree:
            return False
        with self._lock:
            _source, _line, pattern, _path = self._query(path)
        # a matching "!pattern" re-includes the path
        return bool(pattern) and not pattern.startswith(b"!")

    def _query(self, path: Path) -> list[bytes]:
        process = self._start()
        if process.stdin is None or process.stdout is None:
            raise GitError("git check-ignore was started without pipes")
        try:
            process.stdin.write(os.fsencode(path) + b"\0")
            process.stdin.flush()
            return [_read_field(process.stdout) for _ in range(4)]
        except (BrokenPipeError, EOFError):
            raise GitError(self._stop() or f"git check-ignore failed for {path}") from None

    def _start(self) -> subprocess.Popen[bytes]:
        if self._process is None:
            self._process = subprocess.Popen(
                ["git", "-C", str(self.work_tree), *_CHECK_IGNORE_ARGS],
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                env={**os.environ, "GIT_FLUSH": "1"},
            )
            logger.debug("Started git check-ignore in %s", self.work_tree)
        return self._process

    def _stop(self) -> str:
        """Shut the process down and return what it wrote to stderr."""
        process, self._process = self._process, None
        if process is None:
            return ""
        try:
            _out, err = process.communicate(timeout=5)
        except subprocess.TimeoutExpired:
            process.kill()
            _out, err = process.communicate()
        return err.decode("utf-8", "replace").strip()

    def close(self) -> None:
        with self._lock:
            self._stop()

    def __enter__(self) -> "GitIgnoreResolver":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()


def _read_field(stream: IO[bytes]) -> bytes:
    field = bytearray()
    while (char := stream.read(1)) != b"\0":
        if not char:
            raise EOFError("git check-ignore closed its output")
        field += char
    return bytes(field)
