"""Directory traversal driven by a PathFilter"""

import os
from typing import Iterator
from .filter import PathFilter, PathLike
from .types import WalkEntry


def walk(path_filter: PathFilter, directory: PathLike) -> Iterator[WalkEntry]:
    """Walk a directory tree the way a harvester does.

    Every subdirectory is checked before descending into it and every file is
    checked once. Excluded directories are reported but never entered, so
    nothing below them is visited.

    Yields:
        WalkEntry for each visited directory and file, subdirectories of a
        directory before its files, each group in name order
    """
    root = os.path.abspath(os.fspath(directory))
    for current, dirs, files in os.walk(root):
        kept = []
        for name in sorted(dirs):
            path = os.path.join(current, name)
            included = path_filter.is_included(path, is_dir=True)
            yield WalkEntry(path=path, is_dir=True, included=included)
            if included:
                kept.append(name)
        # Prune in place so os.walk skips excluded directories
        dirs[:] = kept

        for name in sorted(files):
            path = os.path.join(current, name)
            yield WalkEntry(path=path, is_dir=False, included=path_filter.is_included(path))


def iter_included_files(path_filter: PathFilter, directory: PathLike) -> Iterator[str]:
    """Yield the absolute paths of all files the filter keeps."""
    for entry in walk(path_filter, directory):
        if entry.included and not entry.is_dir:
            yield entry.path
