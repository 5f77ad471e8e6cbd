# sfcli

Small building blocks for local PHP/Symfony development tooling:

- **Git helpers** (`sfcli.gitrepo`, `sfcli.gitexec`): run `git` quietly or
  attached to the terminal, read the current and upstream branch, init,
  commit, fetch, clone, push and hard-reset.
- **Human-readable logs** (`sfcli.humanlog`): turn PHP, PHP-FPM, Symfony
  (Monolog) and JSON log lines into compact, tag-annotated lines.
- **File watching** (`sfcli.watch`): watch a path for create, remove, write
  and rename events and receive them on a queue.

## Installation

```
pip install sfcli
```

For running the tests:

```
pip install "sfcli[test]"
pytest
```

## Git

The helpers call the `git` executable, which must be on `PATH`.

```python
from sfcli import gitrepo
from sfcli.gitexec import GitError

branch = gitrepo.get_current_branch(".")              # "" when unknown
upstream = gitrepo.get_upstream_branch(".", "origin")  # "" unless tracked on "origin"

try:
    gitrepo.push(".", "origin", "HEAD", "main")
except GitError as exc:
    print("push failed:", exc, exc.returncode)
```

- `gitrepo.init(directory, debug)`, `gitrepo.add_and_commit(directory, message, debug)`:
  output is captured unless `debug` is true, in which case git talks to the
  terminal.
- `gitrepo.fetch(cwd, remote, branch)` and `gitrepo.reset_hard(cwd, reference)`
  run quietly; `gitrepo.clone(url, directory)` and `gitrepo.push(...)` run
  attached to the terminal.
- `push` raises `ValueError` when no ref is given.
- A git command that cannot be started, or exits with a non-zero status,
  raises `GitError`; its `output` holds what was captured and `returncode`
  the exit status.

Lower level, `sfcli.gitexec` offers `exec_git(cwd, args, quiet)`,
`run_git_quiet(cwd, *args)` (returns the combined stdout and stderr) and
`run_git(cwd, *args)`. When attached to the terminal, standard output goes
through `GitOutputWriter`, which indents every non-empty line by two spaces,
treats both `\r` and `\n` as line ends so progress updates still work, and
holds back incomplete lines until they end. It can be used on any byte sink:

```python
import io
from sfcli.gitexec import GitOutputWriter

sink = io.BytesIO()
writer = GitOutputWriter(sink)
writer.write(b"Counting objects: 57%\r")
writer.write(b"Total 4\n")
# sink.getvalue() == b"  Counting objects: 57%\r  Total 4\n"
```

## Logs

```python
import sys
from sfcli.humanlog import Handler, HumanWriter, Options

handler = Handler(Options(skip_unchanged=True, with_source=True))
print(handler.prettify("[17-Sep-2020 12:20:03] NOTICE: ready to handle connections"))

writer = HumanWriter(sys.stdout.buffer, Options())
writer.write_string('{"time": "2020-08-12T16:39:56Z", "level": "info", "msg": "hello"}')
```

`Handler.prettify` renders the time, the level (padded to seven characters),
the source when `with_source` is set, the message and the sorted `key=value`
fields. `Handler.simplify` renders only the message and fields. With
`skip_unchanged`, fields whose value equals the one on the previous line are
left out. The `light_bg` option is accepted but does not change the output.
Lines wrapped by PHP-FPM as `child N said into stdout: "..."` are unwrapped
first; HTTP access lines with `status` and `method` fields are rewritten so
that method, status and URL lead the message (`tweak_http_log`).

Lines that are not recognised are returned unchanged. `HumanWriter` writes
each prettified chunk, followed by a newline, as UTF-8 bytes to its output.

The lower-level parsers live in `sfcli.phplog` (`parse_php_log`,
`parse_fpm_log`), `sfcli.symfonylog` (`parse_symfony_log`) and
`sfcli.logline` (`parse_json_line`, `try_parse_time`, `convert_any_val`).
Each returns a `LogLine` with `level`, `time`, `source`, `message` and
`fields`; the PHP, FPM and Symfony parsers return `None` for text of another
format and raise `ValueError` for a date they cannot read.

## Watching files

```python
import queue
from sfcli.watch import Event, watch, stop

events = queue.Queue()
watch("src/...", events, Event.CREATE | Event.WRITE)   # trailing "..." watches recursively
info = events.get()        # EventInfo(event=Event.WRITE, path="/abs/path/to/file")
stop(events)
```

A directory is watched for changes to its entries; a single file is watched
through its parent directory and only its own changes are reported. `watch`
raises `FileNotFoundError` for a missing path and `ValueError` when no event
kind is selected. `stop` ends every watch feeding the given queue.

## What this package does not do

- It has no command-line program; it is a library to build tools on.
- The log lines it produces carry markup tags such as `<error>`,
  `<fg=cyan>` and `<href=...>`; turning them into terminal colours or links
  is left to the caller.