"""Structured log lines and the helpers shared by the log parsers."""

from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal

ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


@dataclass
class LogLine:
    """One log entry, whatever format it came from."""

    level: str = ""
    time: datetime = ZERO_TIME
    source: str = ""
    message: str = ""
    fields: dict[str, str] = field(default_factory=dict)


_FRACTION = re.compile(r"(?<=:\d\d)[.,](\d+)", re.ASCII)
_ZONE_NAME = re.compile(r"\s*\b[A-Z]{3,5}\b", re.ASCII)

# Zone abbreviations and fractional seconds are removed before these are tried.
_LAYOUTS = (
    "%Y-%m-%d %H:%M:%S %z",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d %H:%M %z",
    "%Y-%m-%dT%H:%M:%S%z",
    "%d %b %y %H:%M",
    "%d %b %y %H:%M %z",
    "%A, %d-%b-%y %H:%M:%S",
    "%a, %d %b %Y %H:%M:%S",
    "%a, %d %b %Y %H:%M:%S %z",
    "%a %b %d %H:%M:%S %Y",
    "%a %b %d %H:%M:%S %z %Y",
    "%I:%M%p",
    "%b %d %H:%M:%S",
)


def try_parse_time(value) -> datetime | None:
    """Parse *value* with a list of common timestamp layouts.

    Returns an aware datetime (UTC when the text carries no offset), or
    None when no layout fits.
    """
    text = value
    micro = 0
    fraction = _FRACTION.search(text)
    if fraction:
        micro = int((fraction.group(1) + "000000")[:6])
        text = text[: fraction.start()] + text[fraction.end():]
    text = " ".join(_ZONE_NAME.sub("", text).split())
    for layout in _LAYOUTS:
        try:
            parsed = datetime.strptime(text, layout)
        except ValueError:
            continue
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.replace(microsecond=micro)
    return None


_QUOTE_ESCAPES = {
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
    "\\": "\\\\",
    '"': '\\"',
}


def _quote(text: str) -> str:
    out = ['"']
    for ch in text:
        code = ord(ch)
        if ch in _QUOTE_ESCAPES:
            out.append(_QUOTE_ESCAPES[ch])
        elif ch.isprintable():
            out.append(ch)
        elif code < 0x20 or code == 0x7F:
            out.append(f"\\x{code:02x}")
        elif code < 0x10000:
            out.append(f"\\u{code:04x}")
        else:
            out.append(f"\\U{code:08x}")
    out.append('"')
    return "".join(out)


def _format_g(value: float) -> str:
    """Shortest representation, switching to exponent form like %g does."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"
    sign, digit_tuple, exponent = Decimal(repr(value)).as_tuple()
    digits = list(digit_tuple)
    while len(digits) > 1 and digits[-1] == 0:
        digits.pop()
        exponent += 1
    text = "".join(map(str, digits))
    point = len(text) + exponent
    power = point - 1
    prefix = "-" if sign else ""
    if power < -4 or power >= 6:
        mantissa = text[0] + ("." + text[1:] if len(text) > 1 else "")
        exp_sign = "-" if power < 0 else "+"
        return f"{prefix}{mantissa}e{exp_sign}{abs(power):02d}"
    if point <= 0:
        return f"{prefix}0.{'0' * -point}{text}"
    if point >= len(text):
        return f"{prefix}{text}{'0' * (point - len(text))}"
    return f"{prefix}{text[:point]}.{text[point:]}"


def _marshal(value) -> str:
    try:
        encoded = json.dumps(value, separators=(",", ":"), sort_keys=True, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(value)
    for raw, escaped in (("<", "\\u003c"), (">", "\\u003e"), ("&", "\\u0026"),
                         ("\u2028", "\\u2028"), ("\u2029", "\\u2029")):
        encoded = encoded.replace(raw, escaped)
    return encoded


def convert_any_val(val) -> str:
    """Render a decoded JSON value the way it is shown next to its key."""
    if isinstance(val, bool) or val is None:
        return _marshal(val)
    if isinstance(val, (int, float)):
        try:
            number = float(val)
        except OverflowError:
            return str(val)
        if math.isfinite(number) and number - math.floor(number) < 0.000001 and number < 1e9:
            return str(int(number))
        return _format_g(number)
    if isinstance(val, str):
        return _quote(val)
    return _marshal(val)


def parse_json_line(data) -> LogLine:
    """Build a LogLine from a JSON object; raises ValueError if it is not one."""
    if isinstance(data, (bytes, bytearray)):
        data = bytes(data).decode("utf-8", errors="replace")
    raw = json.loads(data)
    if not isinstance(raw, dict):
        raise ValueError("log line is not a JSON object")

    line = LogLine()
    time_text = None
    for key in ("time", "ts"):
        if isinstance(raw.get(key), str):
            time_text = raw.pop(key)
            break

    if time_text is not None:
        parsed = try_parse_time(time_text)
        if parsed is None:
            raise ValueError(f"field time is not a known timestamp: {time_text}")
        line.time = parsed
    else:
        stamp = raw.get("ts")
        if isinstance(stamp, (int, float)) and not isinstance(stamp, bool):
            try:
                line.time = datetime.fromtimestamp(stamp, tz=timezone.utc).astimezone()
            except (OverflowError, OSError, ValueError) as exc:
                raise ValueError(f"field ts is out of range: {stamp}") from exc
            del raw["ts"]

    if isinstance(raw.get("source"), str):
        line.source = raw.pop("source")

    if isinstance(raw.get("msg"), str):
        line.message = raw.pop("msg")
    elif isinstance(raw.get("message"), str):
        line.message = raw.pop("message")

    if isinstance(raw.get("level"), str):
        line.level = raw.pop("level")
    else:
        lvl = raw.pop("lvl", None)
        line.level = lvl if isinstance(lvl, str) else "????"

    line.fields = {key: convert_any_val(value) for key, value in raw.items()}
    return line