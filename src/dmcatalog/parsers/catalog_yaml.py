# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the model of the catalog.yml (or manifest.yml) file.

The keys of the file use the underscored naming convention expected by the catalog:

.. code-block:: yaml

    id: 3a1e7f3c-5c4b-4f0e-9d56-8f1c0e0a2b11
    type: Automation
    title: My package
    short_description: What the package does.
    source_code_url: https://github.com/example/my-package
    documentation_url: https://docs.example.com/my-package
    owners:
      - name: Jane
        email: jane@example.com
        url: https://example.com
    tags: [monitoring, automation]
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Any

import yamale
from yamale.schema import Schema

from dmcatalog import DMCATALOG_PATH
from dmcatalog.catalog.metadata import CatalogOwner
from dmcatalog.errors import MalformedDescriptorError
from dmcatalog.filesystem import FileSystem
from dmcatalog.parsers.yaml.loader import YamlLoader

logger: logging.Logger = logging.getLogger(__name__)

SCHEMA_PATH = os.path.join(DMCATALOG_PATH, "parsers", "catalog_yaml_schema.yaml")

CATALOG_YAML_SCHEMA: Schema = yamale.make_schema(SCHEMA_PATH)


def _as_text(value: Any) -> str | None:
    return None if value is None else str(value)


@dataclass
class CatalogYaml:
    """The content of a catalog.yml file."""

    id: str | None = None  # pylint: disable=invalid-name
    type: str | None = None
    title: str | None = None
    short_description: str | None = None
    source_code_url: str | None = None
    documentation_url: str | None = None
    owners: list[CatalogOwner] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, content: dict) -> "CatalogYaml":
        """Create the model from the dictionary loaded from a catalog.yml file.

        Parameters
        ----------
        content : dict
            The loaded yaml document.

        Returns
        -------
        CatalogYaml
            The model of the file.

        Raises
        ------
        MalformedDescriptorError
            If the document is not a mapping.
        """
        if not isinstance(content, dict):
            raise MalformedDescriptorError("The catalog yaml document must be a mapping.")

        owners = [
            CatalogOwner(
                name=_as_text(owner.get("name")),
                email=_as_text(owner.get("email")),
                url=_as_text(owner.get("url")),
            )
            for owner in content.get("owners") or []
            if isinstance(owner, dict)
        ]
        return cls(
            id=_as_text(content.get("id")),
            type=_as_text(content.get("type")),
            title=_as_text(content.get("title")),
            short_description=_as_text(content.get("short_description")),
            source_code_url=_as_text(content.get("source_code_url")),
            documentation_url=_as_text(content.get("documentation_url")),
            owners=owners,
            tags=[str(tag) for tag in content.get("tags") or []],
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the model as a dictionary, with the keys in the order of the catalog.yml file."""
        return {
            "id": self.id,
            "documentation_url": self.documentation_url,
            "short_description": self.short_description,
            "title": self.title,
            "type": self.type,
            "source_code_url": self.source_code_url,
            "owners": [{"name": owner.name, "email": owner.email, "url": owner.url} for owner in self.owners],
            "tags": list(self.tags),
        }


def parse_catalog_yaml(content: str, source: str = "<string>") -> CatalogYaml:
    """Parse and validate the content of a catalog.yml file.

    Raises
    ------
    MalformedDescriptorError
        If the content is not valid yaml or does not match the catalog.yml schema.
    """
    return CatalogYaml.from_dict(YamlLoader.loads(content, source, CATALOG_YAML_SCHEMA))


def load_catalog_yaml(path: str, fs: FileSystem | None = None) -> CatalogYaml:
    """Load and validate a catalog.yml file.

    Parameters
    ----------
    path : str
        The path to the catalog.yml or manifest.yml file.
    fs : FileSystem | None
        The file system to read from, the local one by default.

    Returns
    -------
    CatalogYaml
        The model of the file.

    Raises
    ------
    MalformedDescriptorError
        If the file is not valid yaml or does not match the catalog.yml schema.
    """
    return CatalogYaml.from_dict(YamlLoader.load(path, CATALOG_YAML_SCHEMA, fs))
