# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""Tests for resolving the complete catalog metadata of a package."""

from collections.abc import Callable
from pathlib import Path

import pytest

from dmcatalog.catalog.merger import CliOverrides
from dmcatalog.catalog.metadata import CatalogMetadata
from dmcatalog.errors import ManifestNotFoundError
from dmcatalog.pipeline import (
    apply_readme_and_images,
    metadata_from_artifact,
    metadata_from_catalog_yaml,
    resolve_catalog_details,
)
from tests.conftest import make_app_info

CATALOG_YAML = """
id: 8c4d2e9a-0000-4000-8000-000000000000
type: Automation
title: From Yaml
short_description: Preserved from the yaml file.
tags: [pre-existing-tag, auto, deploy]
"""


@pytest.fixture(name="empty_root")
def empty_root_fixture(tmp_path: Path) -> str:
    """Return an empty directory used as the recursive search root."""
    empty = tmp_path.joinpath("empty")
    empty.mkdir()
    return str(empty)


@pytest.fixture(name="repository")
def repository_fixture(tmp_path: Path) -> Path:
    """Create a repository with a catalog.yml, a README and an images directory."""
    repository = tmp_path.joinpath("repository")
    repository.mkdir()
    repository.joinpath("catalog.yml").write_text(CATALOG_YAML, encoding="utf-8")
    repository.joinpath("README.md").write_text("# From Yaml\n", encoding="utf-8")
    repository.joinpath("images").mkdir()
    return repository


def test_apply_readme_and_images(repository: Path) -> None:
    """Test that the README and images are found from the starting path."""
    metadata = CatalogMetadata(name="A")

    result = apply_readme_and_images(metadata, str(repository))

    assert result.path_to_readme == str(repository.joinpath("README.md"))
    assert result.path_to_images == str(repository.joinpath("images"))
    assert metadata.path_to_readme is None


def test_apply_readme_and_images_explicit(repository: Path, tmp_path: Path) -> None:
    """Test that explicit paths are used as is."""
    result = apply_readme_and_images(
        CatalogMetadata(),
        str(repository),
        path_to_readme=str(tmp_path.joinpath("other.md")),
        path_to_images=str(tmp_path),
    )

    assert result.path_to_readme == str(tmp_path.joinpath("other.md"))
    assert result.path_to_images == str(tmp_path)


def test_metadata_from_catalog_yaml(repository: Path, empty_root: str) -> None:
    """Test the metadata described by a catalog.yml file only."""
    metadata = metadata_from_catalog_yaml(str(repository), fallback_root=empty_root)

    assert metadata.name == "From Yaml"
    assert metadata.content_type == "Automation"
    assert metadata.tags == ["pre-existing-tag", "auto", "deploy"]
    assert metadata.path_to_readme == str(repository.joinpath("README.md"))


def test_metadata_from_artifact(repository: Path, dmapp_factory: Callable[..., str]) -> None:
    """Test the metadata of a package, with the README found next to it."""
    package_path = Path(dmapp_factory(app_info=make_app_info()))
    target = repository.joinpath(package_path.name)
    package_path.rename(target)

    metadata = metadata_from_artifact(str(target))

    assert metadata.name == "Demo InterAppCalls"
    assert metadata.path_to_readme == str(repository.joinpath("README.md"))


def test_resolve_catalog_details(repository: Path, dmapp_factory: Callable[..., str], empty_root: str) -> None:
    """Test the precedence of the package, the catalog.yml file and the command line."""
    package_path = dmapp_factory(
        app_info=make_app_info(display_name="From Package", version="1.0.0-CU1"),
        entries={"AppInstallContent/Dashboards/Overview.dmadb.json": "{}"},
    )

    metadata = resolve_catalog_details(
        artifact_path=package_path,
        manifest_path=str(repository),
        overrides=CliOverrides(version="1.0.1", branch="release"),
        fallback_root=empty_root,
    )

    assert metadata.name == "From Yaml"
    assert metadata.content_type == "Automation"
    assert metadata.short_description == "Preserved from the yaml file."
    assert metadata.version.value == "1.0.1"
    assert metadata.version.branch == "release"
    assert metadata.path_to_readme == str(repository.joinpath("README.md"))


def test_resolve_without_manifest(dmapp_factory: Callable[..., str], empty_root: str) -> None:
    """Test that the catalog.yml file is optional when a package is given."""
    package_path = dmapp_factory(app_info=make_app_info(version="2.0.0"))

    metadata = resolve_catalog_details(artifact_path=package_path, fallback_root=empty_root)

    assert metadata.name == "Demo InterAppCalls"
    assert metadata.version.value == "2.0.0"


def test_resolve_manifest_required_without_package(tmp_path: Path, empty_root: str) -> None:
    """Test that the catalog.yml file is required when there is no package."""
    with pytest.raises(ManifestNotFoundError):
        resolve_catalog_details(manifest_path=str(tmp_path), fallback_root=empty_root)


def test_resolve_nothing() -> None:
    """Test that either a package or a catalog.yml file is required."""
    with pytest.raises(ManifestNotFoundError):
        resolve_catalog_details()


def test_resolve_missing_explicit_manifest(tmp_path: Path, empty_root: str) -> None:
    """Test that an explicit catalog.yml path that does not exist is reported."""
    with pytest.raises(ManifestNotFoundError):
        resolve_catalog_details(manifest_path=str(tmp_path.joinpath("catalog.yml")), fallback_root=empty_root)


def test_resolve_missing_explicit_manifest_with_package(
    tmp_path: Path, dmapp_factory: Callable[..., str], empty_root: str
) -> None:
    """Test that a package is still resolved when its explicit catalog.yml does not exist."""
    metadata = resolve_catalog_details(
        artifact_path=dmapp_factory(app_info=make_app_info()),
        manifest_path=str(tmp_path.joinpath("missing", "catalog.yml")),
        fallback_root=empty_root,
    )

    assert metadata.name == "Demo InterAppCalls"
