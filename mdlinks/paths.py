"""Filesystem helpers: resolving local links and walking markdown trees."""

from __future__ import annotations

import os
import stat
from typing import Iterator, List

MARKDOWN_SUFFIX = ".md"


def resolve_local(containing_file: str, url_path: str) -> str:
    """Join a ``/``-separated link path onto the directory of ``containing_file``.

    A leading ``/`` does not make the result absolute: the link is always
    taken relative to the containing document.
    """
    base = os.path.dirname(containing_file)
    return os.path.normpath(os.path.join(base, *url_path.split("/")))


def is_regular_file(path: str) -> bool:
    try:
        return stat.S_ISREG(os.stat(path).st_mode)
    except (OSError, ValueError):
        return False


def relative_link(from_file: str, target: str) -> str:
    """Path of ``target`` relative to the directory of ``from_file``, ``/``-separated."""
    start = os.path.dirname(from_file) or os.curdir
    rel = os.path.relpath(target, start)
    return rel.replace(os.sep, "/")


def _raise(error: OSError) -> None:
    raise error


def iter_markdown_files(root: str) -> Iterator[str]:
    """Yield ``.md`` files below ``root`` in lexical order.

    Directories whose name starts with a dot are skipped, except ``root``
    itself. Walk errors propagate as ``OSError``.
    """
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        kept: List[str] = sorted(d for d in dirnames if not d.startswith("."))
        dirnames[:] = kept
        for name in sorted(filenames):
            if not name.endswith(MARKDOWN_SUFFIX):
                continue
            path = os.path.join(dirpath, name)
            if os.path.isdir(path):
                continue
            yield os.path.normpath(path)
