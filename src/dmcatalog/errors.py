# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains error classes for dmcatalog."""


class CatalogError(Exception):
    """The base class for dmcatalog errors."""


class UnsupportedFormatError(CatalogError):
    """Happens when the artifact is not a .dmapp or a .dmprotocol package."""


class ArtifactAccessError(CatalogError):
    """Happens when the package file does not exist or cannot be read."""


class MissingDescriptorError(CatalogError):
    """Happens when a required file inside a package is absent or empty.

    Examples are ``AppInfo.xml`` in a .dmapp package, or ``Description.txt`` and the
    ``*Protocol.xml`` file in a .dmprotocol package.
    """


class MalformedDescriptorError(CatalogError):
    """Happens when a package descriptor or a catalog manifest cannot be parsed."""


class ManifestNotFoundError(CatalogError):
    """Happens when no catalog.yml or manifest.yml file can be located."""
