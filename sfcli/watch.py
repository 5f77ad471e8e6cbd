"""Watching files and directories for changes, reported onto a queue."""

from __future__ import annotations

import enum
import os
import threading
from dataclasses import dataclass

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

_RECURSIVE_MARKER = "..."


class Event(enum.Flag):
    """Kinds of change that are reported on every platform."""

    CREATE = enum.auto()
    REMOVE = enum.auto()
    WRITE = enum.auto()
    RENAME = enum.auto()
    ALL = CREATE | REMOVE | WRITE | RENAME


@dataclass(frozen=True)
class EventInfo:
    """One change: what happened, and to which path."""

    event: Event
    path: str


class _Relay(FileSystemEventHandler):
    """Translates filesystem events and puts the wanted ones on a queue."""

    def __init__(self, queue, events: Event, only: str | None = None):
        super().__init__()
        self._queue = queue
        self._events = events
        self._only = only

    def dispatch(self, event: FileSystemEvent) -> None:
        for kind, path in self._translate(event):
            if not kind & self._events:
                continue
            if self._only is not None and path != self._only:
                continue
            self._queue.put(EventInfo(kind, path))

    @staticmethod
    def _translate(event: FileSystemEvent):
        src = os.path.abspath(os.fsdecode(event.src_path))
        kind = event.event_type
        if kind == "created":
            yield Event.CREATE, src
        elif kind == "deleted":
            yield Event.REMOVE, src
        elif kind == "modified":
            if not event.is_directory:
                yield Event.WRITE, src
        elif kind == "moved":
            yield Event.RENAME, src
            dest = getattr(event, "dest_path", "")
            if dest:
                yield Event.CREATE, os.path.abspath(os.fsdecode(dest))


_lock = threading.Lock()
_observers: dict[int, tuple[object, list]] = {}


def _start(directory: str, handler: _Relay, recursive: bool, queue) -> None:
    observer = Observer()
    observer.daemon = True
    observer.schedule(handler, directory, recursive=recursive)
    observer.start()
    with _lock:
        _, running = _observers.setdefault(id(queue), (queue, []))
        running.append(observer)


def watch(path, queue, events=Event.ALL) -> None:
    """Report changes to *path* onto *queue* as EventInfo items.

    A path ending in ``...`` watches the directory before it recursively.
    A directory is watched for changes to its entries; a file is watched
    through its parent directory, and only its own changes are reported.
    """
    if not events:
        raise ValueError("at least one event must be watched")
    path = os.fspath(path)

    if os.path.basename(path) == _RECURSIVE_MARKER:
        directory = os.path.abspath(os.path.dirname(path) or ".")
        if not os.path.isdir(directory):
            raise FileNotFoundError(f"no such directory: {directory}")
        _start(directory, _Relay(queue, events), True, queue)
        return

    if not os.path.exists(path):
        raise FileNotFoundError(f"no such file or directory: {path}")

    target = os.path.abspath(path)
    if os.path.isdir(target):
        _start(target, _Relay(queue, events), False, queue)
        return

    _start(os.path.dirname(target), _Relay(queue, events, only=target), False, queue)


def stop(queue) -> None:
    """Stop every watch that reports onto *queue*; unknown queues are ignored."""
    with _lock:
        _, running = _observers.pop(id(queue), (None, []))
    for observer in running:
        observer.stop()
    for observer in running:
        observer.join()