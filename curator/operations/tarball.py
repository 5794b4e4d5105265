"""Create gzip-compressed tar archives from files and directory trees."""

from __future__ import annotations

import logging
import os
import posixpath
import re
import stat
import tarfile
from collections.abc import Iterable, Iterator

_log = logging.getLogger(__name__)


def _walk(path: str) -> Iterator[str]:
    """Yield every non-directory below ``path`` in lexical order.

    Symbolic links are not followed while walking.
    """
    info = os.lstat(path)
    if not stat.S_ISDIR(info.st_mode):
        yield path
        return
    for name in sorted(os.listdir(path)):
        yield from _walk(os.path.join(path, name))


def iter_contents(paths: Iterable[str], exclusions: Iterable[str]) -> Iterator[str]:
    """Yield the files below each path, skipping those an exclusion matches.

    Exclusions are regular expressions searched for anywhere in the file's
    path. Invalid expressions raise ``re.error`` immediately; paths that
    cannot be walked raise ``OSError`` while iterating.
    """
    matchers = [re.compile(pattern) for pattern in exclusions]
    roots = list(paths)

    def generate() -> Iterator[str]:
        for root in roots:
            for path in _walk(root):
                if any(matcher.search(path) for matcher in matchers):
                    continue
                yield path

    return generate()


def _archive_name(prefix: str, path: str) -> str:
    parts = [part.replace(os.sep, "/") for part in (prefix, path) if part]
    return posixpath.normpath("/".join(parts))


def add_file(tar: tarfile.TarFile, prefix: str, path: str) -> tarfile.TarInfo:
    """Add the file at ``path`` to ``tar`` under ``prefix``.

    Symbolic links are resolved and the target's content is stored.
    Returns the header written for the entry.
    """
    resolved = os.path.realpath(path)
    info_stat = os.stat(resolved)

    header = tarfile.TarInfo(_archive_name(prefix, path))
    header.size = info_stat.st_size
    header.mode = stat.S_IMODE(info_stat.st_mode)
    header.mtime = int(info_stat.st_mtime)

    with open(resolved, "rb") as stream:
        tar.addfile(header, stream)

    _log.debug("added file to archive: %s", header.name)
    return header


def create_archive(
    file_name: str,
    prefix: str,
    paths: Iterable[str],
    exclude: Iterable[str],
) -> list[str]:
    """Write a ``.tar.gz`` archive of the given paths to ``file_name``.

    Returns the names of the entries written, in order.
    """
    contents = iter_contents(paths, exclude)
    _log.info("creating archive: %s", file_name)

    added: list[str] = []
    with tarfile.open(file_name, "w:gz") as tar:
        for path in contents:
            try:
                header = add_file(tar, prefix, path)
            except OSError as err:
                raise OSError(f"adding path: {path}: {err}") from err
            added.append(header.name)
    return added