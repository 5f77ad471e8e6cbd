"""Parsers for PHP error log and PHP-FPM log lines."""

from __future__ import annotations

import re
from datetime import datetime, timezone

from .logline import LogLine

# Wed Aug 12 16:39:56 2020 (310): [Debug] ...
_PHP_LINE = re.compile(r"^(.+?) \((?:\d+)\): \[(.+?)\] (.+)\s*\Z", re.ASCII)

# [12-Aug-2020 16:34:44] NOTICE: Terminating ...
_FPM_LINE = re.compile(
    r"^\[(.+?)\] (DEBUG|NOTICE|WARNING|ERROR|ALERT):((?: *?PHP (?:.+?):)*) (.+)\s*\Z",
    re.ASCII,
)

_FPM_LEVELS = frozenset({"notice", "warning", "error", "fatal", "panic", "critical", "emergency"})
_FPM_ALIASES = {"warn": "warning", "fatal error": "fatal"}


def _parse_utc(text: str, layout: str) -> datetime:
    try:
        return datetime.strptime(text, layout).replace(tzinfo=timezone.utc)
    except ValueError as exc:
        raise ValueError(f"cannot parse log date {text!r}") from exc


def parse_php_log(text) -> LogLine | None:
    """Parse a PHP error log line; None if it is not one, ValueError on a bad date."""
    match = _PHP_LINE.match(text)
    if match is None:
        return None
    return LogLine(
        source="PHP",
        level=match.group(2).lower(),
        message=match.group(3),
        time=_parse_utc(match.group(1), "%a %b %d %H:%M:%S %Y"),
    )


def parse_fpm_log(text) -> LogLine | None:
    """Parse a PHP-FPM log line; None if it is not one, ValueError on a bad date.

    FPM reports PHP notices, warnings and fatal errors under its own level;
    the PHP level found in the prefixes wins.
    """
    match = _FPM_LINE.match(text)
    if match is None:
        return None

    level = match.group(2).lower()
    for sub in match.group(3).split(":"):
        sub = sub.strip().lower().removeprefix("php ")
        if sub in _FPM_LEVELS:
            level = sub
        elif sub in _FPM_ALIASES:
            level = _FPM_ALIASES[sub]

    return LogLine(
        source="FPM",
        level=level,
        message=match.group(4),
        time=_parse_utc(match.group(1), "%d-%b-%Y %H:%M:%S"),
    )