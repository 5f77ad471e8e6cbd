"""Turning raw log lines into short, colour-tagged lines for the console."""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass
from datetime import datetime

from .logline import LogLine, parse_json_line
from .phplog import parse_fpm_log, parse_php_log
from .symfonylog import parse_symfony_log

# [12-Aug-2020 16:31:33] WARNING: [pool web] child 312 said into stdout: "..."
PHP_FPM_LOG_LINE_REGEXP = re.compile(
    r'^\[\d+-[^-]+-\d+ \d+:\d+:[\d.]+\] WARNING: \[pool [^\]]+\] child \d+ said into std(?:err|out): "(.*)"\s*\Z',
    re.ASCII,
)

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

_LEVEL_TAGS = {
    "notice": "warning",
    "warn": "warning",
    "warning": "warning",
    "error": "error",
    "fatal": "error",
    "panic": "error",
    "critical": "error",
    "emergency": "error",
}

_ERROR_KEYS = frozenset({"err", "error", "exception"})


@dataclass
class Options:
    """How lines are rendered."""

    skip_unchanged: bool = False
    light_bg: bool = False
    with_source: bool = False


def tweak_http_log(line: LogLine) -> None:
    """Rewrite an HTTP access line so method, status and URL lead the message."""
    status = line.fields.get("status")
    method = line.fields.get("method")
    if status is None or method is None:
        return
    method = method[1:-1]

    url = line.message
    scheme = line.fields.get("scheme")
    host = line.fields.get("host")
    if method == "GET" and scheme is not None and host is not None:
        url = f"<href={scheme[1:-1]}://{host[1:-1]}{line.message}>{line.message}</>"
        del line.fields["scheme"]
        del line.fields["host"]

    del line.fields["status"]
    del line.fields["method"]
    line.message = f"{method:<4} ({status}) <fg=cyan>{url}</>"


def _stamp(moment: datetime) -> str:
    return f"{_MONTHS[moment.month - 1]} {moment.day:>2} {moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"


def _parse(text: str) -> LogLine | None:
    for parser in (parse_php_log, parse_fpm_log):
        try:
            line = parser(text)
        except ValueError:
            line = None
        if line is not None:
            return line
    try:
        line = parse_symfony_log(text)
    except ValueError:
        return None
    if line is not None:
        return line
    if '"time":' not in text and '"ts":' not in text:
        return None
    try:
        return parse_json_line(text)
    except ValueError:
        return None


class Handler:
    """Recognises log formats and renders them; remembers the previous line."""

    def __init__(self, opts: Options | None = None):
        self.opts = opts if opts is not None else Options()
        self._lock = threading.Lock()
        self._last_line: LogLine | None = None

    def simplify(self, text) -> str:
        """Render *text* as the message followed by its fields."""
        return self._render(text, self._simple)

    def prettify(self, text) -> str:
        """Render *text* with time, level, optional source, message and fields."""
        return self._render(text, self._pretty)

    def _render(self, text, body) -> str:
        if isinstance(text, (bytes, bytearray)):
            text = bytes(text).decode("utf-8", errors="replace")
        with self._lock:
            text = text.rstrip("\n")
            text = PHP_FPM_LOG_LINE_REGEXP.sub(lambda m: m.group(1), text, count=1)
            line = _parse(text)
            try:
                if line is None:
                    return text
                tweak_http_log(line)
                return body(line)
            finally:
                self._last_line = line

    def _simple(self, line: LogLine) -> str:
        return f"{line.message} {' '.join(self._join_kvs(line))}"

    def _pretty(self, line: LogLine) -> str:
        parts = [_stamp(line.time), " |"]
        tag = _LEVEL_TAGS.get(line.level)
        level = line.level.upper()[:7].ljust(7)
        if tag:
            parts.append(f"<{tag}>{level}</>")
        else:
            parts.append(level)
        parts.append("| ")

        if self.opts.with_source:
            source = (line.source or "       ").upper()[:6].ljust(6)
            parts.append(f"<comment>{source}</> ")

        parts.append(line.message)
        parts.append(" ")
        parts.append(" ".join(self._join_kvs(line)))
        return "".join(parts)

    def _join_kvs(self, line: LogLine) -> list[str]:
        last = self._last_line if self.opts.skip_unchanged else None
        pairs = []
        for key, value in line.fields.items():
            if last is not None and key in last.fields and last.fields[key] == value:
                continue
            colour = "<error>" if key in _ERROR_KEYS else "<fg=cyan>"
            pairs.append(f"{colour}{key}</>={value}")
        return sorted(pairs)


class HumanWriter:
    """A byte sink that prettifies each chunk written to it onto *output*."""

    def __init__(self, output, opts: Options | None = None):
        self._output = output
        self.handler = Handler(opts)

    def write(self, data) -> int:
        text = data.decode("utf-8", errors="replace") if isinstance(data, (bytes, bytearray)) else data
        self._output.write(self.handler.prettify(text).encode("utf-8"))
        self._output.write(b"\n")
        return len(data)

    def write_string(self, text: str) -> int:
        return self.write(text.encode("utf-8"))