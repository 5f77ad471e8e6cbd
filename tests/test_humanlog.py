import io

from sfcli.humanlog import Handler, HumanWriter, Options, tweak_http_log
from sfcli.logline import LogLine

SYMFONY_LINE = '[2018-11-19 12:52:00] console.DEBUG: www {"xxx":"yyy","code":1} []'
FPM_LINE = "[17-Sep-2020 12:20:03] NOTICE: ready to handle connections"


def test_unknown_text_is_returned_without_newline():
    assert Handler().simplify("plain text\n") == "plain text"
    assert Handler().prettify("plain text\n") == "plain text"


def test_simplify_symfony_line():
    out = Handler().simplify(SYMFONY_LINE)
    assert out.startswith("www ")
    pairs = out[len("www "):].split(" ")
    assert pairs == sorted(pairs)
    assert "<fg=cyan>code</>=1" in pairs
    assert '<fg=cyan>xxx</>="yyy"' in pairs


def test_prettify_fpm_line():
    out = Handler().prettify(FPM_LINE)
    assert out == "Sep 17 12:20:03 |<warning>NOTICE </>| ready to handle connections "


def test_prettify_with_source():
    out = Handler(Options(with_source=True)).prettify(FPM_LINE)
    assert "<comment>FPM   </> ready to handle connections" in out


def test_prettify_error_level_is_tagged():
    out = Handler().prettify("Wed Aug 12 16:39:56 2020 (310): [Error] broken")
    assert "<error>ERROR  </>|" in out
    assert out.endswith("broken ")


def test_php_line_with_bad_date_is_returned_as_is():
    text = "Foo Bar 99 16:39:56 2020 (310): [Debug] hello"
    assert Handler().simplify(text) == text


def test_fpm_wrapper_is_stripped():
    text = (
        '[12-Aug-2020 16:31:33] WARNING: [pool web] child 312 said into stdout: '
        '"[2020-08-12T18:31:33.470956+02:00] console.DEBUG: www {"xxx":"yyy","code":1} []"'
    )
    out = Handler().prettify(text)
    assert out.startswith("Aug 12 18:31:33 |DEBUG  | www ")
    assert '<fg=cyan>xxx</>="yyy"' in out


def test_json_line_error_field():
    out = Handler().prettify('{"time":"2020-08-12 16:34:44","level":"error","msg":"boom","error":"bad"}')
    assert out.startswith("Aug 12 16:34:44 |<error>ERROR  </>| boom ")
    assert '<error>error</>="bad"' in out


def test_json_without_time_is_left_alone():
    text = '{"msg":"boom"}'
    assert Handler().simplify(text) == text


def test_skip_unchanged_fields():
    handler = Handler(Options(skip_unchanged=True))
    first = handler.simplify(SYMFONY_LINE)
    second = handler.simplify(SYMFONY_LINE)
    assert "xxx" in first
    assert second == "www "
    handler.simplify("garbage")
    assert handler.simplify(SYMFONY_LINE) == first


def test_fields_repeat_without_skip_unchanged():
    handler = Handler()
    first = handler.simplify(SYMFONY_LINE)
    second = handler.simplify(SYMFONY_LINE)
    assert '<fg=cyan>xxx</>="yyy"' in second
    assert "<fg=cyan>code</>=1" in second
    assert second == first


def test_tweak_http_get_line():
    line = LogLine(
        message="/path",
        fields={"status": "200", "method": '"GET"', "scheme": '"https"', "host": '"example.com"', "ip": '"::1"'},
    )
    tweak_http_log(line)
    assert line.message == "GET  (200) <fg=cyan><href=https://example.com/path>/path</></>"
    assert line.fields == {"ip": '"::1"'}


def test_tweak_http_post_keeps_scheme_and_host():
    line = LogLine(
        message="/path",
        fields={"status": "201", "method": '"POST"', "scheme": '"https"', "host": '"example.com"'},
    )
    tweak_http_log(line)
    assert line.message.startswith("POST (201) ")
    assert line.fields == {"scheme": '"https"', "host": '"example.com"'}


def test_tweak_ignores_non_http_lines():
    line = LogLine(message="hello", fields={"status": "200"})
    tweak_http_log(line)
    assert line.message == "hello"
    assert line.fields == {"status": "200"}


def test_human_writer_writes_line_and_newline():
    sink = io.BytesIO()
    writer = HumanWriter(sink, Options())
    assert writer.write(b"plain\n") == 6
    assert sink.getvalue() == b"plain\n"


def test_human_writer_write_string_prettifies():
    sink = io.BytesIO()
    writer = HumanWriter(sink, Options())
    count = writer.write_string(FPM_LINE)
    assert count == len(FPM_LINE.encode("utf-8"))
    assert sink.getvalue() == (Handler().prettify(FPM_LINE) + "\n").encode("utf-8")