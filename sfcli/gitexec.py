"""Running git commands and relaying their output to the terminal."""

from __future__ import annotations

import subprocess
import sys
from functools import partial
from typing import BinaryIO, Iterable, Protocol

_READ_SIZE = 4096


class GitError(Exception):
    """Raised when a git command cannot be run or exits with a failure."""

    def __init__(self, message: str, output: str = "", returncode: int | None = None):
        super().__init__(message)
        self.output = output
        self.returncode = returncode


class _ByteSink(Protocol):
    def write(self, data: bytes) -> object: ...


class _TextStream:
    """Adapts a text stream so that it accepts bytes."""

    def __init__(self, stream):
        self._stream = stream

    def write(self, data: bytes) -> None:
        self._stream.write(data.decode("utf-8", errors="replace"))

    def flush(self) -> None:
        self._stream.flush()


class GitOutputWriter:
    """Indents every non-empty line of git output by two spaces.

    Lines end with either a carriage return or a newline, so progress
    updates keep working. Incomplete lines are held back until their end
    arrives.
    """

    def __init__(self, output: _ByteSink):
        self.output = output
        self._pending = bytearray()

    def write(self, data: bytes) -> int:
        self._pending.extend(data)
        for line in self._complete_lines():
            if len(line) > 1:
                self.output.write(b"  ")
            self.output.write(line)
        flush = getattr(self.output, "flush", None)
        if flush is not None:
            flush()
        return len(data)

    def _complete_lines(self) -> Iterable[bytes]:
        while self._pending:
            ends = [p for p in (self._pending.find(b"\r"), self._pending.find(b"\n")) if p != -1]
            if not ends:
                return
            cut = min(ends) + 1
            line = bytes(self._pending[:cut])
            del self._pending[:cut]
            yield line


def _terminal_output() -> _ByteSink:
    stream = sys.stdout
    stream.flush()
    buffer: BinaryIO | None = getattr(stream, "buffer", None)
    if buffer is not None:
        return buffer
    return _TextStream(stream)


def _run_streamed(command: list[str], workdir: str | None) -> int:
    writer = GitOutputWriter(_terminal_output())
    proc = subprocess.Popen(command, cwd=workdir, stdout=subprocess.PIPE)
    with proc.stdout:
        for chunk in iter(partial(proc.stdout.read1, _READ_SIZE), b""):
            writer.write(chunk)
    return proc.wait()


def exec_git(cwd, args, quiet) -> str:
    """Run git with *args* in *cwd*.

    In quiet mode stdout and stderr are captured together and returned.
    Otherwise the command talks to the terminal, its stdout indented, and
    an empty string is returned.
    """
    command = ["git", *args]
    workdir = str(cwd) if cwd else None
    try:
        if quiet:
            completed = subprocess.run(
                command,
                cwd=workdir,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                check=False,
            )
            raw = completed.stdout or b""
            returncode = completed.returncode
        else:
            raw = b""
            returncode = _run_streamed(command, workdir)
    except OSError as exc:
        raise GitError(f"cannot run git: {exc}") from exc

    output = raw.decode("utf-8", errors="replace")
    if returncode == 1:
        raise GitError("Command failed", output=output, returncode=returncode)
    if returncode != 0:
        raise GitError(f"git exited with status {returncode}", output=output, returncode=returncode)
    return output


def run_git_quiet(cwd, *args) -> str:
    """Run git silently and return everything it printed."""
    return exec_git(cwd, args, True)


def run_git(cwd, *args) -> None:
    """Run git attached to the terminal."""
    exec_git(cwd, args, False)