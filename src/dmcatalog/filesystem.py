# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the file system used to look up, read and write catalog files."""

import logging
import os
from abc import ABC, abstractmethod

logger: logging.Logger = logging.getLogger(__name__)


class FileSystem(ABC):
    """The interface to the file system used by dmcatalog.

    All paths are plain strings. Listing methods return full paths, not bare names.
    """

    @abstractmethod
    def is_dir(self, path: str) -> bool:
        """Return True if ``path`` is an existing directory."""

    @abstractmethod
    def is_file(self, path: str) -> bool:
        """Return True if ``path`` is an existing regular file."""

    def exists(self, path: str) -> bool:
        """Return True if ``path`` is an existing file or directory."""
        return self.is_file(path) or self.is_dir(path)

    @abstractmethod
    def list_files(self, directory: str) -> list[str]:
        """Return the files directly inside ``directory``, sorted by path."""

    @abstractmethod
    def list_dirs(self, directory: str) -> list[str]:
        """Return the sub-directories directly inside ``directory``, sorted by path."""

    @abstractmethod
    def get_parent(self, path: str) -> str | None:
        """Return the directory containing ``path`` or None if ``path`` is a root."""

    @abstractmethod
    def read_bytes(self, path: str) -> bytes:
        """Return the content of the file at ``path``."""

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        """Return the content of the file at ``path`` decoded as text."""
        return self.read_bytes(path).decode(encoding)

    @abstractmethod
    def write_bytes(self, path: str, content: bytes) -> None:
        """Write ``content`` to the file at ``path``, replacing it if it exists."""


class LocalFileSystem(FileSystem):
    """The file system of the machine running dmcatalog."""

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(path)

    def is_file(self, path: str) -> bool:
        return os.path.isfile(path)

    def _list_entries(self, directory: str) -> list[str]:
        try:
            return sorted(os.path.join(directory, entry) for entry in os.listdir(directory))
        except (NotADirectoryError, PermissionError, FileNotFoundError) as error:
            logger.debug("Cannot list the content of %s: %s", directory, error)
            return []

    def list_files(self, directory: str) -> list[str]:
        return [entry for entry in self._list_entries(directory) if os.path.isfile(entry)]

    def list_dirs(self, directory: str) -> list[str]:
        return [entry for entry in self._list_entries(directory) if os.path.isdir(entry)]

    def get_parent(self, path: str) -> str | None:
        abs_path = os.path.abspath(path)
        parent = os.path.dirname(abs_path)
        if not parent or parent == abs_path:
            return None
        return parent

    def read_bytes(self, path: str) -> bytes:
        with open(path, "rb") as file:
            return file.read()

    def write_bytes(self, path: str, content: bytes) -> None:
        with open(path, "wb") as file:
            file.write(content)
