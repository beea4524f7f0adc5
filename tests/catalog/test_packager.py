# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""Tests for the catalog details archive."""

import io
import zipfile
from pathlib import Path

from dmcatalog.catalog.metadata import CatalogMetadata, CatalogOwner
from dmcatalog.catalog.packager import package, serialize_manifest, write_package
from dmcatalog.parsers.catalog_yaml import parse_catalog_yaml

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\xff\xfe"


def _metadata(**kwargs: object) -> CatalogMetadata:
    return CatalogMetadata(
        catalog_identifier="9d1f5b8e-0000-4000-8000-000000000000",
        content_type="Automation",
        name="My Package",
        short_description="Does things.",
        source_code_uri="https://github.com/example/package",
        owners=[CatalogOwner(name="Jane", email="jane@example.com", url="https://example.com")],
        tags=["a", "b"],
        **kwargs,
    )


def _open(content: bytes) -> zipfile.ZipFile:
    return zipfile.ZipFile(io.BytesIO(content))


def test_manifest_round_trip() -> None:
    """Test that the manifest of a package parses back to the same values."""
    metadata = _metadata()
    with _open(package(metadata)) as archive:
        assert archive.namelist() == ["manifest.yml"]
        manifest = parse_catalog_yaml(archive.read("manifest.yml").decode("utf-8"))

    assert manifest.id == metadata.catalog_identifier
    assert manifest.type == "Automation"
    assert manifest.title == "My Package"
    assert manifest.short_description == "Does things."
    assert manifest.source_code_url == "https://github.com/example/package"
    assert manifest.documentation_url is None
    assert manifest.owners == metadata.owners
    assert manifest.tags == ["a", "b"]


def test_manifest_key_order() -> None:
    """Test that the manifest keys follow the catalog.yml layout."""
    keys = [line.split(":", 1)[0] for line in serialize_manifest(_metadata()).splitlines() if line[0].isalpha()]
    assert keys == [
        "id",
        "documentation_url",
        "short_description",
        "title",
        "type",
        "source_code_url",
        "owners",
        "tags",
    ]


def test_package_with_readme_and_images(tmp_path: Path) -> None:
    """Test that the README and the images are copied into the archive."""
    readme = tmp_path.joinpath("readme.md")
    readme.write_text("# My Package\n\n![overview](Images/overview.png)\n", encoding="utf-8")
    images = tmp_path.joinpath("images")
    images.mkdir()
    images.joinpath("overview.png").write_bytes(PNG_BYTES)
    images.joinpath("nested").mkdir()

    content = package(_metadata(path_to_readme=str(readme), path_to_images=str(images)))

    with _open(content) as archive:
        assert sorted(archive.namelist()) == ["Images/overview.png", "README.md", "manifest.yml"]
        assert archive.read("README.md") == readme.read_bytes()
        assert archive.read("Images/overview.png") == PNG_BYTES


def test_package_with_missing_paths(tmp_path: Path) -> None:
    """Test that README and images paths that do not exist are skipped."""
    metadata = _metadata(
        path_to_readme=str(tmp_path.joinpath("missing.md")),
        path_to_images=str(tmp_path.joinpath("missing")),
    )
    with _open(package(metadata)) as archive:
        assert archive.namelist() == ["manifest.yml"]


def test_package_with_empty_images(tmp_path: Path) -> None:
    """Test that an empty images directory adds nothing."""
    with _open(package(_metadata(path_to_images=str(tmp_path)))) as archive:
        assert archive.namelist() == ["manifest.yml"]


def test_write_package(tmp_path: Path) -> None:
    """Test writing the archive to disk."""
    output_path = str(tmp_path.joinpath("catalog_details.zip"))

    assert write_package(_metadata(), output_path) == output_path
    assert zipfile.is_zipfile(output_path)
