# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module builds the catalog details archive submitted when registering a catalog entry.

The archive holds:

* ``manifest.yml``, the catalog.yml content derived from the metadata.
* ``README.md``, a copy of the README, if there is one.
* ``Images/<name>``, a copy of every file in the images directory, if there is one.
"""

import io
import logging
import os
import zipfile

import yaml

from dmcatalog.catalog.metadata import CatalogMetadata, CatalogOwner
from dmcatalog.config.defaults import defaults
from dmcatalog.filesystem import FileSystem, LocalFileSystem
from dmcatalog.parsers.catalog_yaml import CatalogYaml

logger: logging.Logger = logging.getLogger(__name__)


def to_catalog_yaml(metadata: CatalogMetadata) -> CatalogYaml:
    """Return the catalog.yml model of ``metadata``."""
    return CatalogYaml(
        id=metadata.catalog_identifier,
        type=metadata.content_type,
        title=metadata.name,
        short_description=metadata.short_description,
        source_code_url=metadata.source_code_uri,
        documentation_url=metadata.documentation_url,
        owners=[CatalogOwner(name=owner.name, email=owner.email, url=owner.url) for owner in metadata.owners],
        tags=list(metadata.tags),
    )


def serialize_manifest(metadata: CatalogMetadata) -> str:
    """Return the manifest.yml content of ``metadata``.

    Examples
    --------
    >>> print(serialize_manifest(CatalogMetadata(catalog_identifier="1234", name="My package")), end="")
    id: '1234'
    documentation_url: null
    short_description: null
    title: My package
    type: null
    source_code_url: null
    owners: []
    tags: []
    """
    return yaml.safe_dump(
        to_catalog_yaml(metadata).to_dict(),
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )


def package(metadata: CatalogMetadata, fs: FileSystem | None = None) -> bytes:
    """Return the catalog details archive of ``metadata``.

    Parameters
    ----------
    metadata : CatalogMetadata
        The metadata of the catalog entry.
    fs : FileSystem | None
        The file system holding the README and images, the local one by default.

    Returns
    -------
    bytes
        The content of the ZIP archive.
    """
    fs = fs or LocalFileSystem()
    manifest_entry = defaults.get("packager", "manifest_entry", fallback="manifest.yml")
    readme_entry = defaults.get("packager", "readme_entry", fallback="README.md")
    images_folder = defaults.get("packager", "images_folder", fallback="Images")

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, mode="w", compression=zipfile.ZIP_DEFLATED) as archive:
        archive.writestr(manifest_entry, serialize_manifest(metadata).encode("utf-8"))

        if metadata.path_to_readme and fs.is_file(metadata.path_to_readme):
            logger.debug("Adding %s to the catalog details.", metadata.path_to_readme)
            archive.writestr(readme_entry, fs.read_bytes(metadata.path_to_readme))

        if metadata.path_to_images and fs.is_dir(metadata.path_to_images):
            for image_path in fs.list_files(metadata.path_to_images):
                logger.debug("Adding %s to the catalog details.", image_path)
                archive.writestr(f"{images_folder}/{os.path.basename(image_path)}", fs.read_bytes(image_path))

    return buffer.getvalue()


def write_package(metadata: CatalogMetadata, output_path: str, fs: FileSystem | None = None) -> str:
    """Write the catalog details archive of ``metadata`` to ``output_path``.

    Returns
    -------
    str
        The path to the written archive.
    """
    fs = fs or LocalFileSystem()
    fs.write_bytes(output_path, package(metadata, fs))
    logger.info("The catalog details of %s are stored in %s.", metadata.name, output_path)
    return output_path
