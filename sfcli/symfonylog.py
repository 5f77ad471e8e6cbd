"""Parser for Monolog lines as written by Symfony applications."""

from __future__ import annotations

import json
import re
from datetime import datetime, timezone

from .logline import LogLine, convert_any_val, try_parse_time

# [2018-11-19 12:52:00] console.DEBUG: www {"xxx":"yyy","code":1} []
# [2019-11-13T07:16:50.260544+01:00] console.DEBUG: www {"xxx":"yyy","code":1} []
_SYMFONY_LINE = re.compile(
    r"^\[(\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}|\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d+\+\d{2}:\d{2})\] "
    r"([^.]+)\.([^:]+): (.+) (\[.*?\]|\{.*?\}) (\[.*?\]|\{.*?\})\s*\Z",
    re.ASCII,
)

_EXCEPTION_MARKER = ' {"exception":'


def _parse_time(text: str) -> datetime:
    try:
        return datetime.strptime(text, "%Y-%m-%d %H:%M:%S").replace(tzinfo=timezone.utc)
    except ValueError:
        parsed = try_parse_time(text)
        if parsed is None:
            raise ValueError(f"cannot parse log date {text!r}") from None
        return parsed


def _decode_args(text: str) -> dict:
    try:
        decoded = json.loads(text)
    except ValueError:
        return {}
    if isinstance(decoded, list):
        return {str(index): value for index, value in enumerate(decoded)}
    if isinstance(decoded, dict):
        return decoded
    return {}


def parse_symfony_log(text) -> LogLine | None:
    """Parse a Symfony log line; None if it is not one, ValueError on a bad date."""
    match = _SYMFONY_LINE.match(text)
    if match is None:
        return None

    message = match.group(4)
    # Exception traces cannot be matched reliably and are not wanted anyway.
    cut = message.find(_EXCEPTION_MARKER)
    if cut != -1:
        message = message[:cut]

    fields: dict[str, str] = {}
    for group in (match.group(5), match.group(6)):
        for key, value in _decode_args(group).items():
            if key != "exception":
                fields[key] = convert_any_val(value)

    return LogLine(
        time=_parse_time(match.group(1)),
        source=match.group(2),
        level=match.group(3).lower(),
        message=message,
        fields=fields,
    )