# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module locates the catalog.yml, README.md and images directory that go with a package.

Each lookup starts in a directory and moves up to its parents until a match is found. At most
``MAX_SEARCH_DEPTH`` directories are visited: the starting directory and four of its ancestors.
"""

import logging
import os
from collections.abc import Callable

from dmcatalog.config.defaults import defaults
from dmcatalog.filesystem import FileSystem, LocalFileSystem

logger: logging.Logger = logging.getLogger(__name__)

#: The number of directories visited by a lookup, starting directory included.
MAX_SEARCH_DEPTH = 5


def _manifest_file_names() -> list[str]:
    names = defaults.get_list("discovery", "manifest_file_names", fallback=["catalog.yml", "manifest.yml"])
    return [name.lower() for name in names]


def _base_name(path: str) -> str:
    return os.path.basename(os.path.normpath(path))


def find_closest(
    fs: FileSystem,
    directory: str,
    list_entries: Callable[[str], list[str]],
    names: list[str],
) -> str | None:
    """Return the first entry named after one of ``names`` in ``directory`` or its ancestors.

    Names are compared case-insensitively. The lookup visits at most ``MAX_SEARCH_DEPTH``
    directories.

    Parameters
    ----------
    fs : FileSystem
        The file system to search.
    directory : str
        The directory to start from.
    list_entries : Callable[[str], list[str]]
        Returns the candidate entries of a directory, e.g. ``fs.list_files``.
    names : list[str]
        The lower-cased names to look for.

    Returns
    -------
    str | None
        The path to the matching entry or None if it cannot be found.
    """
    current: str | None = directory
    remaining = MAX_SEARCH_DEPTH
    while current and remaining > 0:
        remaining -= 1
        for entry in list_entries(current):
            if _base_name(entry).lower() in names:
                logger.debug("Found %s.", entry)
                return entry

        logger.debug("No match for %s in %s.", names, current)
        current = fs.get_parent(current)

    return None


def _start_directory(fs: FileSystem, start: str) -> str | None:
    if fs.is_dir(start):
        return start
    return fs.get_parent(start)


def find_manifest(start: str, fs: FileSystem | None = None, fallback_root: str | None = None) -> str | None:
    """Return the path to the catalog.yml or manifest.yml closest to ``start``.

    A ``start`` path ending with ``.yml`` is returned as is. Otherwise the directory of
    ``start`` and its ancestors are searched. If nothing is found, ``fallback_root`` (the
    current working directory by default) is searched recursively.

    Parameters
    ----------
    start : str
        A directory, a file next to the manifest, or the manifest itself.
    fs : FileSystem | None
        The file system to search, the local one by default.
    fallback_root : str | None
        The directory searched recursively when the ancestors do not hold a manifest.

    Returns
    -------
    str | None
        The path to the manifest or None if it cannot be found.
    """
    fs = fs or LocalFileSystem()
    if start.lower().endswith(".yml") and not fs.is_dir(start):
        return start

    names = _manifest_file_names()
    directory = _start_directory(fs, start)
    found = find_closest(fs, directory, fs.list_files, names) if directory else None
    if found:
        return found

    root = fallback_root or os.getcwd()
    logger.debug("No manifest found near %s, searching %s.", start, root)
    return _find_manifest_under(fs, root, names)


def _find_manifest_under(fs: FileSystem, root: str, names: list[str]) -> str | None:
    pending = [root]
    while pending:
        directory = pending.pop(0)
        for entry in fs.list_files(directory):
            if _base_name(entry).lower() in names:
                logger.debug("Found %s.", entry)
                return entry
        pending[0:0] = fs.list_dirs(directory)
    return None


def find_readme(start: str, fs: FileSystem | None = None) -> str | None:
    """Return the path to the README.md closest to ``start``.

    A ``start`` path ending with ``.md`` is returned as is.

    Parameters
    ----------
    start : str
        A directory, a file next to the README, or the README itself.
    fs : FileSystem | None
        The file system to search, the local one by default.

    Returns
    -------
    str | None
        The path to the README or None if it cannot be found.
    """
    fs = fs or LocalFileSystem()
    if start.lower().endswith(".md") and not fs.is_dir(start):
        return start

    directory = _start_directory(fs, start)
    if not directory:
        return None
    readme_name = defaults.get("discovery", "readme_file_name", fallback="readme.md").lower()
    return find_closest(fs, directory, fs.list_files, [readme_name])


def find_images(after_readme_path: str, fs: FileSystem | None = None) -> str | None:
    """Return the path to the images directory closest to a README.

    Parameters
    ----------
    after_readme_path : str
        The path to the README, or to the directory holding it.
    fs : FileSystem | None
        The file system to search, the local one by default.

    Returns
    -------
    str | None
        The path to the images directory or None if it cannot be found.
    """
    fs = fs or LocalFileSystem()
    directory = _start_directory(fs, after_readme_path)
    if not directory:
        return None
    images_name = defaults.get("discovery", "images_dir_name", fallback="images").lower()
    return find_closest(fs, directory, fs.list_dirs, [images_name])
