"""Command-line interface."""

from __future__ import annotations

import argparse
import re
import sys
from typing import Optional, Sequence

from curator.operations.hello import hello_world
from curator.operations.sysinfo import (
    collect_all_processes,
    collect_process_info,
    collect_process_tree,
    collect_system_info,
    do_collection,
    open_stats_logger,
)
from curator.operations.tarball import create_archive
from curator.operations.version import current_version_info

_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


def _parse_duration(text: str) -> float:
    """Parse a duration such as ``10s`` or ``1m30s`` into seconds."""
    if text == "0":
        return 0.0
    position = 0
    total = 0.0
    for match in _DURATION_PART.finditer(text):
        if match.start() != position:
            break
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        position = match.end()
    if position == 0 or position != len(text):
        raise argparse.ArgumentTypeError(f"invalid duration '{text}'")
    return total


def _run_hello(args: argparse.Namespace) -> None:
    print(hello_world())


def _run_version(args: argparse.Namespace) -> None:
    info = current_version_info()
    print(info.to_json() if args.json else str(info))


def _run_archive_create(args: argparse.Namespace) -> None:
    create_archive(args.name, args.prefix, args.item or [], args.exclude or [])


def _collect(args: argparse.Namespace, gather) -> None:
    with open_stats_logger(args.file) as logger:
        do_collection(args.count, args.interval, lambda: logger.info(gather()))


def _run_stat_system(args: argparse.Namespace) -> None:
    _collect(args, collect_system_info)


def _run_stat_process_all(args: argparse.Namespace) -> None:
    _collect(args, collect_all_processes)


def _run_stat_process(args: argparse.Namespace) -> None:
    if not args.pid:
        raise ValueError("must specify a pid")
    _collect(args, lambda: collect_process_info(args.pid))


def _run_stat_process_tree(args: argparse.Namespace) -> None:
    if not args.pid:
        raise ValueError("must specify a pid")
    _collect(args, lambda: collect_process_tree(args.pid))


def _add_sysinfo_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--interval", "-i",
        type=_parse_duration,
        default=10.0,
        help="interval for stats collection (default 10s)",
    )
    parser.add_argument(
        "--count",
        type=int,
        default=0,
        help="maximum number of times to collect stats; 0 means forever",
    )
    parser.add_argument(
        "--file",
        default="",
        help="write output to this file instead of standard output",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for every command."""
    parser = argparse.ArgumentParser(prog="curator")
    commands = parser.add_subparsers(dest="command", metavar="COMMAND")
    commands.required = True

    hello = commands.add_parser(
        "hello",
        aliases=["hello-world", "hi"],
        help="a simple hello world example",
    )
    hello.set_defaults(func=_run_hello, command_name="hello")

    version = commands.add_parser("version", help="print version information")
    version.add_argument(
        "--json", action="store_true", help="output the information as JSON"
    )
    version.set_defaults(func=_run_version, command_name="version")

    archive = commands.add_parser("archive", help="work with tarball archives")
    archive_commands = archive.add_subparsers(dest="archive_command", metavar="COMMAND")
    archive_commands.required = True
    create = archive_commands.add_parser("create", help="create a tarball")
    create.add_argument(
        "--item", action="append", help="item to add to the archive; repeatable"
    )
    create.add_argument(
        "--exclude", action="append", help="regular expression of files to exclude"
    )
    create.add_argument("--prefix", default="", help="prefix of paths within the archive")
    create.add_argument(
        "--name", default="archive.tar.gz", help="name of the archive to create"
    )
    create.set_defaults(func=_run_archive_create, command_name="archive create")

    stat = commands.add_parser(
        "stat",
        aliases=["stats"],
        help="collectors for system and process information",
    )
    stat_commands = stat.add_subparsers(dest="stat_command", metavar="COMMAND")
    stat_commands.required = True

    system = stat_commands.add_parser("system", help="collect system level statistics")
    _add_sysinfo_flags(system)
    system.set_defaults(func=_run_stat_system, command_name="stat system")

    process = stat_commands.add_parser(
        "process", help="collect information about a single process"
    )
    _add_sysinfo_flags(process)
    process.add_argument("--pid", type=int, default=0, help="pid to collect data for")
    process.set_defaults(func=_run_stat_process, command_name="stat process")

    tree = stat_commands.add_parser(
        "process-tree", help="collect information about a process and its children"
    )
    _add_sysinfo_flags(tree)
    tree.add_argument("--pid", type=int, default=0, help="pid of the parent process")
    tree.set_defaults(func=_run_stat_process_tree, command_name="stat process-tree")

    every = stat_commands.add_parser(
        "process-all", help="collect information about every process"
    )
    _add_sysinfo_flags(every)
    every.set_defaults(func=_run_stat_process_all, command_name="stat process-all")

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command line; return the exit status."""
    args = build_parser().parse_args(argv)
    try:
        args.func(args)
    except KeyboardInterrupt:
        return 130
    except (ValueError, OSError, re.error) as err:
        print(f"curator: {err}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())