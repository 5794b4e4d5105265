"""Collection of system and process statistics, logged as JSON."""

from __future__ import annotations

import json
import logging
import sys
import time
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Optional, TypeVar

import psutil

STATS_LOGGER_NAME = "curator.stats"
DEFAULT_INTERVAL = 10.0
DEFAULT_COUNT = 0

_T = TypeVar("_T")


def do_collection(count: int, interval: float, op: Callable[[], Any]) -> None:
    """Call ``op`` ``count`` times, sleeping ``interval`` seconds between calls.

    A ``count`` of zero or less repeats forever. Exceptions from ``op`` stop
    the collection and propagate.
    """
    while True:
        op()
        count -= 1
        if count == 0:
            break
        time.sleep(interval)


def _attempt(errors: list[str], fn: Callable[[], _T], default: _T) -> _T:
    try:
        return fn()
    except (psutil.Error, OSError, RuntimeError) as err:
        errors.append(str(err))
        return default


def _as_dict(value: Any) -> dict[str, Any]:
    if value is None:
        return {}
    return dict(value._asdict())


def collect_system_info() -> dict[str, Any]:
    """Return a snapshot of system-wide statistics."""
    errors: list[str] = []
    info: dict[str, Any] = {
        "cpu": _attempt(errors, lambda: _as_dict(psutil.cpu_times()), {}),
        "num_cpu": psutil.cpu_count(),
        "vmstat": _attempt(errors, lambda: _as_dict(psutil.virtual_memory()), {}),
        "swap": _attempt(errors, lambda: _as_dict(psutil.swap_memory()), {}),
        "netstat": _attempt(errors, lambda: _as_dict(psutil.net_io_counters()), {}),
    }

    partitions = _attempt(errors, lambda: psutil.disk_partitions(all=False), [])
    info["partitions"] = [_as_dict(part) for part in partitions]

    usage = []
    for part in partitions:
        found = _attempt(errors, lambda: psutil.disk_usage(part.mountpoint), None)
        if found is not None:
            usage.append({"path": part.mountpoint, **_as_dict(found)})
    info["usage"] = usage

    counters = _attempt(errors, lambda: psutil.disk_io_counters(perdisk=True), {})
    info["iostat"] = {
        name: _as_dict(value) for name, value in (counters or {}).items()
    }
    info["errors"] = errors
    return info


def _describe(proc: psutil.Process) -> dict[str, Any]:
    errors: list[str] = []
    with proc.oneshot():
        info: dict[str, Any] = {
            "pid": proc.pid,
            "parent": _attempt(errors, proc.ppid, 0),
            "threads": _attempt(errors, proc.num_threads, 0),
            "command": _attempt(errors, lambda: " ".join(proc.cmdline()), ""),
            "cpu": _attempt(errors, lambda: _as_dict(proc.cpu_times()), {}),
            "memory": _attempt(errors, lambda: _as_dict(proc.memory_info()), {}),
        }
        if hasattr(proc, "io_counters"):
            info["io"] = _attempt(errors, lambda: _as_dict(proc.io_counters()), {})
        else:
            info["io"] = {}
    info["errors"] = errors
    return info


def _require_pid(pid: int) -> None:
    if not pid:
        raise ValueError("must specify a pid")


def collect_process_info(pid: int) -> dict[str, Any]:
    """Return statistics for one process.

    A process that cannot be inspected yields a record whose ``errors``
    explain why. Raises ``ValueError`` when no pid is given.
    """
    _require_pid(pid)
    try:
        proc = psutil.Process(pid)
    except psutil.Error as err:
        return {"pid": pid, "errors": [str(err)]}
    return _describe(proc)


def collect_process_tree(pid: int) -> list[dict[str, Any]]:
    """Return statistics for a process followed by all of its descendants."""
    _require_pid(pid)
    try:
        proc = psutil.Process(pid)
    except psutil.Error as err:
        return [{"pid": pid, "errors": [str(err)]}]

    errors: list[str] = []
    children = _attempt(errors, lambda: proc.children(recursive=True), [])
    parent = _describe(proc)
    parent["errors"].extend(errors)
    return [parent, *(_describe(child) for child in children)]


def collect_all_processes() -> list[dict[str, Any]]:
    """Return statistics for every process on the system."""
    return [collect_process_info(proc.pid) for proc in psutil.process_iter()]


class _JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        if isinstance(record.msg, Mapping):
            payload: dict[str, Any] = dict(record.msg)
        elif isinstance(record.msg, list):
            payload = {"message": record.msg}
        else:
            payload = {"message": record.getMessage()}
        document = {
            "level": record.levelname.lower(),
            "logger": record.name,
            "time": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            **payload,
        }
        return json.dumps(document, default=str)


@contextmanager
def open_stats_logger(file_name: Optional[str] = None) -> Iterator[logging.Logger]:
    """Yield a logger that writes JSON lines to ``file_name`` or to stdout.

    The file is appended to. The handler is removed and closed on exit.
    """
    logger = logging.getLogger(STATS_LOGGER_NAME)
    if file_name:
        handler: logging.Handler = logging.FileHandler(file_name, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_JSONFormatter())
    handler.setLevel(logging.DEBUG)

    previous_level, previous_propagate = logger.level, logger.propagate
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    try:
        yield logger
    finally:
        logger.removeHandler(handler)
        handler.close()
        logger.setLevel(previous_level)
        logger.propagate = previous_propagate