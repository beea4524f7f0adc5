# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module resolves the complete catalog metadata of a package.

The metadata is gathered in order of precedence: first the content of the package, then the
catalog.yml file, and finally the values given on the command line. The README and images
directory are looked up last.
"""

import logging
from dataclasses import replace

from dmcatalog.artifact.inspector import inspect_artifact
from dmcatalog.catalog.merger import CliOverrides, apply_yaml, merge
from dmcatalog.catalog.metadata import CatalogMetadata
from dmcatalog.discovery.finder import MAX_SEARCH_DEPTH, find_images, find_manifest, find_readme
from dmcatalog.errors import ManifestNotFoundError
from dmcatalog.filesystem import FileSystem, LocalFileSystem
from dmcatalog.parsers.catalog_yaml import CatalogYaml, load_catalog_yaml

logger: logging.Logger = logging.getLogger(__name__)


def apply_readme_and_images(
    metadata: CatalogMetadata,
    start: str,
    path_to_readme: str | None = None,
    path_to_images: str | None = None,
    fs: FileSystem | None = None,
) -> CatalogMetadata:
    """Return a copy of ``metadata`` with the README and images paths set.

    Paths given explicitly are used as is. Otherwise the README is looked up from ``start``
    and the images directory from the README.
    """
    fs = fs or LocalFileSystem()
    readme = path_to_readme if path_to_readme is not None else find_readme(start, fs)
    images = path_to_images
    if images is None and readme:
        images = find_images(readme, fs)

    if readme is None:
        logger.info("No README found for %s.", start)
    return replace(metadata, path_to_readme=readme, path_to_images=images)


def _load_manifest(start: str, fs: FileSystem, fallback_root: str | None) -> CatalogYaml:
    manifest_path = find_manifest(start, fs, fallback_root)
    if manifest_path is None:
        raise ManifestNotFoundError(
            "Unable to locate a catalog.yml or manifest.yml file within the provided directory/file"
            f" or up to {MAX_SEARCH_DEPTH} parent directories."
        )
    if not fs.is_file(manifest_path):
        raise ManifestNotFoundError(f"The catalog manifest {manifest_path} does not exist.")
    logger.info("Using the catalog manifest %s.", manifest_path)
    return load_catalog_yaml(manifest_path, fs)


def metadata_from_artifact(
    artifact_path: str,
    path_to_readme: str | None = None,
    path_to_images: str | None = None,
    fs: FileSystem | None = None,
) -> CatalogMetadata:
    """Return the metadata of a package, with the README and images found next to it.

    Raises
    ------
    CatalogError
        If the package cannot be inspected.
    """
    metadata = inspect_artifact(artifact_path)
    return apply_readme_and_images(metadata, artifact_path, path_to_readme, path_to_images, fs)


def metadata_from_catalog_yaml(
    start: str,
    path_to_readme: str | None = None,
    path_to_images: str | None = None,
    fs: FileSystem | None = None,
    fallback_root: str | None = None,
) -> CatalogMetadata:
    """Return the metadata described by the catalog.yml file closest to ``start``.

    Raises
    ------
    ManifestNotFoundError
        If there is no catalog.yml or manifest.yml file.
    MalformedDescriptorError
        If the file cannot be parsed.
    """
    fs = fs or LocalFileSystem()
    metadata = apply_yaml(CatalogMetadata(), _load_manifest(start, fs, fallback_root))
    return apply_readme_and_images(metadata, start, path_to_readme, path_to_images, fs)


def resolve_catalog_details(
    artifact_path: str | None = None,
    manifest_path: str | None = None,
    overrides: CliOverrides | None = None,
    path_to_readme: str | None = None,
    path_to_images: str | None = None,
    fs: FileSystem | None = None,
    fallback_root: str | None = None,
) -> CatalogMetadata:
    """Return the complete metadata of a catalog entry.

    With a package, the catalog.yml file is optional and looked up from ``manifest_path``
    or, if not given, from the package itself. Without a package, the catalog.yml file is required.

    Parameters
    ----------
    artifact_path : str | None
        The path to a .dmapp or .dmprotocol package.
    manifest_path : str | None
        The path to the catalog.yml file, or a path to start looking for it.
    overrides : CliOverrides | None
        The values given on the command line.
    path_to_readme : str | None
        The README to use instead of looking one up.
    path_to_images : str | None
        The images directory to use instead of looking one up.
    fs : FileSystem | None
        The file system to use, the local one by default.
    fallback_root : str | None
        The directory searched recursively for a catalog.yml file, the current directory by default.

    Returns
    -------
    CatalogMetadata
        The merged metadata.

    Raises
    ------
    CatalogError
        If the package or the catalog.yml file is invalid, or if no catalog.yml file can be found
        when there is no package.
    """
    fs = fs or LocalFileSystem()
    start = manifest_path or artifact_path
    if not start:
        raise ManifestNotFoundError("Either a package or a catalog.yml file is required.")

    from_package = inspect_artifact(artifact_path) if artifact_path else None

    from_yaml: CatalogYaml | None = None
    if from_package is None:
        from_yaml = _load_manifest(start, fs, fallback_root)
    else:
        try:
            from_yaml = _load_manifest(start, fs, fallback_root)
        except ManifestNotFoundError:
            logger.info("No catalog manifest found for %s, using the package content only.", artifact_path)

    metadata = merge(from_package, from_yaml, overrides)
    return apply_readme_and_images(metadata, start, path_to_readme, path_to_images, fs)
