"""
Path collection for bindata.

Walks file and directory arguments and opens every file found, keyed by
its path relative to a root prefix. Directory children are visited in
sorted order so that repeated runs see the same tree the same way.
"""

import os
import sys
from pathlib import Path
from typing import BinaryIO, Dict, Iterable, List

from .errors import PathOutsidePrefixError


class FileEntry:
    """An open input file waiting to be formatted."""

    __slots__ = ('key', 'path', 'stream')

    def __init__(self, key: str, path: str, stream: BinaryIO):
        self.key = key
        self.path = path
        self.stream = stream

    def close(self):
        self.stream.close()

    def __repr__(self):
        return f"FileEntry({self.key!r}, {self.path!r})"


OutputMapping = Dict[str, FileEntry]


def relative_key(path: str, prefix: str = '') -> str:
    """
    Compute the map key for a file path.

    The key is the path relative to prefix (or to the current directory
    when prefix is empty), always with forward slashes.

    Raises:
        PathOutsidePrefixError: if the path does not live under prefix
    """
    start = prefix or os.curdir
    try:
        rel = os.path.relpath(path, start)
    except ValueError as e:
        # Different drives on Windows
        raise PathOutsidePrefixError(path, prefix) from e
    if rel == os.pardir or rel.startswith(os.pardir + os.sep):
        raise PathOutsidePrefixError(path, prefix)
    return Path(rel).as_posix()


def parse_response_file(filepath: Path) -> List[str]:
    """
    Read the paths listed in a response file.

    Blank lines and lines starting with '#' are ignored. Bytes that are not
    UTF-8 are kept as surrogate escapes, the way os.listdir returns them.
    """
    paths = []
    with open(filepath, 'r', encoding='utf-8', errors='surrogateescape') as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith('#'):
                paths.append(line)
    return paths


def expand_response_files(path_args: Iterable[str]) -> List[str]:
    """Replace every @file argument with the paths it lists."""
    expanded = []
    for path_arg in path_args:
        if path_arg.startswith('@'):
            expanded.extend(parse_response_file(Path(path_arg[1:])))
        else:
            expanded.append(path_arg)
    return expanded


def close_all(mapping: OutputMapping) -> None:
    """Close every stream still held by the mapping."""
    for entry in mapping.values():
        entry.close()


def add_path(mapping: OutputMapping, path: str, prefix: str = '', warn: bool = True) -> None:
    """
    Add path to mapping, recursing into directories.

    Files are opened here and read later by the renderer. When the same
    key is added twice the later file wins and the earlier handle is
    closed.
    """
    if os.path.isdir(path):
        for name in sorted(os.listdir(path)):
            add_path(mapping, os.path.join(path, name), prefix, warn)
        return

    # Raises for missing or unreadable paths
    os.stat(path)
    key = relative_key(path, prefix)
    stream = open(path, 'rb')

    previous = mapping.get(key)
    if previous is not None:
        previous.close()
        if warn:
            print(f"bindata: warning: {path} replaces {previous.path} as {key!r}",
                  file=sys.stderr)
    mapping[key] = FileEntry(key, path, stream)


def collect(roots: Iterable[str], prefix: str = '', warn: bool = True) -> OutputMapping:
    """
    Collect every file under roots into a mapping keyed by relative path.

    Args:
        roots: Files and directories to embed
        prefix: Root the keys are made relative to ('' means the current directory)
        warn: Print a warning to stderr when a key is collected twice

    Returns:
        Mapping from relative key to an open FileEntry

    Raises:
        OSError: if a path cannot be read or listed, or lies outside prefix.
        Any file already opened is closed before the error propagates.
    """
    mapping: OutputMapping = {}
    try:
        for root in roots:
            add_path(mapping, os.fspath(root), prefix, warn)
    except BaseException:
        close_all(mapping)
        raise
    return mapping
