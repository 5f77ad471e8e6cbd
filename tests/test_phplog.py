from datetime import datetime, timezone

import pytest

from sfcli.logline import LogLine
from sfcli.phplog import parse_fpm_log, parse_php_log


def _utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


FPM_CASES = [
    (
        "[17-Sep-2020 12:20:03] NOTICE: fpm is running, pid 83827",
        LogLine(time=_utc(2020, 9, 17, 12, 20, 3), level="notice", source="FPM",
                message="fpm is running, pid 83827", fields={}),
    ),
    (
        "[17-Sep-2020 12:20:03] NOTICE: ready to handle connections",
        LogLine(time=_utc(2020, 9, 17, 12, 20, 3), level="notice", source="FPM",
                message="ready to handle connections", fields={}),
    ),
    (
        "[17-Sep-2020 12:20:26] NOTICE: Terminating ...",
        LogLine(time=_utc(2020, 9, 17, 12, 20, 26), level="notice", source="FPM",
                message="Terminating ...", fields={}),
    ),
    (
        "[17-Sep-2020 12:20:26] NOTICE: exiting, bye-bye!",
        LogLine(time=_utc(2020, 9, 17, 12, 20, 26), level="notice", source="FPM",
                message="exiting, bye-bye!", fields={}),
    ),
    (
        "[17-Sep-2020 12:25:28] NOTICE: PHP message: PHP Warning:  PHP Startup: Unable to load dynamic library "
        "'/app/blackfire-20190902-zts.so' (tried: /app/blackfire-20190902-zts.so (dlopen(/app/blackfire-20190902-zts.so, 9): "
        "image not found), /usr/local/lib/php/pecl/20190902//app/blackfire-20190902-zts.so.so "
        "(dlopen(/usr/local/lib/php/pecl/20190902//app/blackfire-20190902-zts.so.so, 9): image not found)) in Unknown on line 0",
        LogLine(
            time=_utc(2020, 9, 17, 12, 25, 28),
            level="warning",
            source="FPM",
            message="Unable to load dynamic library '/app/blackfire-20190902-zts.so' (tried: /app/blackfire-20190902-zts.so "
            "(dlopen(/app/blackfire-20190902-zts.so, 9): image not found), "
            "/usr/local/lib/php/pecl/20190902//app/blackfire-20190902-zts.so.so "
            "(dlopen(/usr/local/lib/php/pecl/20190902//app/blackfire-20190902-zts.so.so, 9): image not found)) in Unknown on line 0",
            fields={},
        ),
    ),
    (
        "[17-Sep-2020 12:25:48] NOTICE: PHP message: PHP Warning:  PHP Startup: failed to open stream: "
        "No such file or directory in Unknown on line 0",
        LogLine(time=_utc(2020, 9, 17, 12, 25, 48), level="warning", source="FPM",
                message="failed to open stream: No such file or directory in Unknown on line 0", fields={}),
    ),
    (
        "[17-Sep-2020 12:25:48] NOTICE: PHP message: PHP Fatal error:  PHP Startup: Failed opening required 'foo.php' "
        "(include_path='.:/usr/local/Cellar/php/7.4.10/share/php/pear') in Unknown on line 0",
        LogLine(
            time=_utc(2020, 9, 17, 12, 25, 48),
            level="fatal",
            source="FPM",
            message="Failed opening required 'foo.php' (include_path='.:/usr/local/Cellar/php/7.4.10/share/php/pear') "
            "in Unknown on line 0",
            fields={},
        ),
    ),
]


@pytest.mark.parametrize("text, expected", FPM_CASES)
def test_fpm_log_converter(text, expected):
    assert parse_fpm_log(text) == expected


def test_fpm_non_matching_line_is_none():
    assert parse_fpm_log("just some text") is None


def test_fpm_bad_date_raises():
    with pytest.raises(ValueError):
        parse_fpm_log("[99-Foo-2020 12:00:00] NOTICE: hello")


def test_php_log_line():
    line = parse_php_log("Wed Aug 12 16:39:56 2020 (310): [Debug] hello world")
    assert line == LogLine(
        time=_utc(2020, 8, 12, 16, 39, 56),
        level="debug",
        source="PHP",
        message="hello world",
        fields={},
    )


def test_php_non_matching_line_is_none():
    assert parse_php_log("[17-Sep-2020 12:20:03] NOTICE: ready to handle connections") is None


def test_php_bad_date_raises():
    with pytest.raises(ValueError):
        parse_php_log("Foo Bar 99 16:39:56 2020 (310): [Debug] hello")