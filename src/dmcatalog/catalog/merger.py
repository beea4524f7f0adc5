# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module merges the catalog metadata coming from a package, a catalog.yml file and the command line.

The sources are applied from the lowest to the highest precedence: the package, then the
catalog.yml file, then the command line. A source only overwrites a field with a non-blank
value. Owners and tags from the catalog.yml file are appended to the existing ones.

Every step returns a new ``CatalogMetadata``; the inputs are never modified.
"""

import copy
import logging
from dataclasses import dataclass

from dmcatalog.catalog.metadata import CatalogMetadata, CatalogOwner
from dmcatalog.parsers.catalog_yaml import CatalogYaml

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CliOverrides:
    """The metadata provided on the command line, each value is optional."""

    #: The URI to the source code.
    source_code_uri: str | None = None

    #: The version overriding the one from the package.
    version: str | None = None

    #: The branch the version belongs to.
    branch: str | None = None

    #: The e-mail address of the committer.
    committer_mail: str | None = None

    #: The URI to the release notes.
    release_uri: str | None = None

    #: The GUID of the entry in the catalog.
    catalog_identifier: str | None = None


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _stripped(value: str | None) -> str | None:
    stripped = value.strip() if value else ""
    return stripped or None


def apply_yaml(target: CatalogMetadata, yaml_doc: CatalogYaml | None) -> CatalogMetadata:
    """Return a copy of ``target`` completed with the content of a catalog.yml file.

    Parameters
    ----------
    target : CatalogMetadata
        The metadata collected so far.
    yaml_doc : CatalogYaml | None
        The catalog.yml content. Nothing is applied if None.

    Returns
    -------
    CatalogMetadata
        The merged metadata.
    """
    merged = copy.deepcopy(target)
    if yaml_doc is None:
        return merged

    scalar_fields = (
        ("catalog_identifier", yaml_doc.id),
        ("content_type", yaml_doc.type),
        ("name", yaml_doc.title),
        ("short_description", yaml_doc.short_description),
        ("source_code_uri", yaml_doc.source_code_url),
        ("documentation_url", yaml_doc.documentation_url),
    )
    for attribute, value in scalar_fields:
        if not _is_blank(value):
            setattr(merged, attribute, value)

    merged.owners.extend(CatalogOwner(name=owner.name, email=owner.email, url=owner.url) for owner in yaml_doc.owners)
    merged.tags.extend(yaml_doc.tags)
    return merged


def apply_overrides(target: CatalogMetadata, overrides: CliOverrides | None) -> CatalogMetadata:
    """Return a copy of ``target`` with the values given on the command line.

    Values are stripped of surrounding whitespace. Blank values are ignored.

    Parameters
    ----------
    target : CatalogMetadata
        The metadata collected so far.
    overrides : CliOverrides | None
        The command line values. Nothing is applied if None.

    Returns
    -------
    CatalogMetadata
        The merged metadata.
    """
    merged = copy.deepcopy(target)
    if overrides is None:
        return merged

    if source_code_uri := _stripped(overrides.source_code_uri):
        merged.source_code_uri = source_code_uri
    if version := _stripped(overrides.version):
        merged.version.value = version
    if branch := _stripped(overrides.branch):
        merged.version.branch = branch
    if committer_mail := _stripped(overrides.committer_mail):
        merged.version.committer_mail = committer_mail
    if release_uri := _stripped(overrides.release_uri):
        merged.version.release_uri = release_uri
    if catalog_identifier := _stripped(overrides.catalog_identifier):
        merged.catalog_identifier = catalog_identifier

    return merged


def merge(
    from_package: CatalogMetadata | None,
    from_yaml: CatalogYaml | None,
    from_cli: CliOverrides | None,
) -> CatalogMetadata:
    """Merge the metadata of the three sources into one record.

    Parameters
    ----------
    from_package : CatalogMetadata | None
        The metadata extracted from the package, the baseline.
    from_yaml : CatalogYaml | None
        The content of the catalog.yml file.
    from_cli : CliOverrides | None
        The values given on the command line, applied last.

    Returns
    -------
    CatalogMetadata
        The merged metadata.

    Examples
    --------
    >>> package = CatalogMetadata(name="A")
    >>> merged = merge(package, CatalogYaml(tags=["x"]), CliOverrides(branch=" B "))
    >>> (merged.name, merged.tags, merged.version.branch)
    ('A', ['x'], 'B')
    """
    baseline = from_package if from_package is not None else CatalogMetadata()
    merged = apply_overrides(apply_yaml(baseline, from_yaml), from_cli)
    logger.debug("Merged catalog metadata: %s", merged)
    return merged
