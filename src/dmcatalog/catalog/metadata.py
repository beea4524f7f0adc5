# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the metadata describing an entry in the DataMiner catalog."""

import re
from dataclasses import asdict, astuple, dataclass, field
from typing import Any

#: The version description used when a package does not provide one.
DEFAULT_VERSION_DESCRIPTION = "No Description."

#: The branch a version belongs to when none is given.
DEFAULT_BRANCH = "main"

# A released DataMiner version, optionally with a cumulative update suffix: 1.0.2 or 1.0.2-CU3.
_RELEASE_VERSION_PATTERN = re.compile(r"^[0-9]+\.[0-9]+\.[0-9]+(-CU[0-9]+)?$")


@dataclass
class CatalogOwner:
    """The owner of a catalog entry."""

    #: The name of the owner.
    name: str | None = None

    #: The e-mail address of the owner.
    email: str | None = None

    #: The website of the owner.
    url: str | None = None


@dataclass
class VersionMetadata:
    """The metadata of one version of a catalog entry."""

    #: The version of the package.
    value: str = ""

    #: The description, or release notes, of this version.
    version_description: str = DEFAULT_VERSION_DESCRIPTION

    #: The branch, range or category this version belongs to.
    branch: str = DEFAULT_BRANCH

    #: The e-mail address of the author, often the committer of the tag the package is built from.
    committer_mail: str | None = None

    #: The URI leading to the release notes of this version.
    release_uri: str | None = None


def _same_text(first: str | None, second: str | None) -> bool:
    if first is None or second is None:
        return first is second
    return first.casefold() == second.casefold()


def _fold(text: str | None) -> str | None:
    return text.casefold() if text is not None else None


@dataclass(eq=False)
class CatalogMetadata:
    """The canonical metadata of a package registered in the catalog.

    Text fields are compared case-insensitively, ``owners`` and ``tags`` are compared
    as sequences and ``version`` is compared structurally.
    """

    #: The GUID of the entry in the catalog.
    catalog_identifier: str | None = None

    #: The type of content, as understood by the catalog.
    content_type: str | None = None

    #: The name of the package.
    name: str | None = None

    #: A brief description of the package.
    short_description: str | None = None

    #: The URL to the documentation of the package.
    documentation_url: str | None = None

    #: The URI to the source code of the package.
    source_code_uri: str | None = None

    #: The owners of the package, in the order they were provided.
    owners: list[CatalogOwner] = field(default_factory=list)

    #: The tags of the package, in the order they were provided.
    tags: list[str] = field(default_factory=list)

    #: The path to the README file to publish with the package.
    path_to_readme: str | None = None

    #: The path to the directory holding the images referenced by the README.
    path_to_images: str | None = None

    #: The version information of the package.
    version: VersionMetadata = field(default_factory=VersionMetadata)

    #: Whether the package declared a build number, which makes it a pre-release.
    artifact_had_build_number: bool = False

    def _text_fields(self) -> tuple[str | None, ...]:
        return (
            self.catalog_identifier,
            self.content_type,
            self.name,
            self.short_description,
            self.documentation_url,
            self.source_code_uri,
            self.path_to_readme,
            self.path_to_images,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CatalogMetadata):
            return NotImplemented
        return (
            all(_same_text(mine, theirs) for mine, theirs in zip(self._text_fields(), other._text_fields()))
            and self.owners == other.owners
            and self.tags == other.tags
            and self.version == other.version
        )

    def __hash__(self) -> int:
        return hash(
            (
                tuple(_fold(text) for text in self._text_fields()),
                tuple((owner.name, owner.email, owner.url) for owner in self.owners),
                tuple(self.tags),
                astuple(self.version),
            )
        )

    def is_pre_release(self) -> bool:
        """Return True if this version is a pre-release rather than a full release.

        A package with a build number is always a pre-release. Otherwise DataMiner style
        versions (``1.0.0-CU2``) are pre-releases only in the ``0.0.0-`` range, and any
        other version is treated as a semantic version where a ``-`` marks a pre-release.

        Returns
        -------
        bool
            True if the version is a pre-release.

        Examples
        --------
        >>> CatalogMetadata(version=VersionMetadata(value="1.0.0-CU2")).is_pre_release()
        False
        >>> CatalogMetadata(version=VersionMetadata(value="0.0.0-CU2")).is_pre_release()
        True
        >>> CatalogMetadata(version=VersionMetadata(value="1.0.0.1-alpha1")).is_pre_release()
        True
        """
        if self.artifact_had_build_number:
            return True

        if _RELEASE_VERSION_PATTERN.match(self.version.value):
            return self.version.value.startswith("0.0.0-")

        return "-" in self.version.value

    def to_dict(self) -> dict[str, Any]:
        """Return the metadata as a JSON serializable dictionary."""
        return asdict(self)
