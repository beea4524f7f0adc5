# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module classifies the content of a .dmapp package from the layout of the archive.

The classification is a best effort. Every kind of installable content found in the package
sets one bit of a bitset, and the bitset is looked up in a fixed table. Packages holding a
single kind of content, optionally with companion files, get a specific content type. All
other combinations are folded into the generic ``Custom Solution`` content type.
"""

import logging
import zipfile
from collections.abc import Iterable
from enum import Enum

from dmcatalog.config.defaults import defaults

logger: logging.Logger = logging.getLogger(__name__)


class ContentCategory(int, Enum):
    """The kinds of content that can be installed by a package, one bit each."""

    NONE = 0
    AUTOMATION = 1 << 0
    DASHBOARDS = 1 << 1
    PROTOCOLS = 1 << 2
    OTHER_APP_PACKAGES = 1 << 3
    COMPANION_FILES = 1 << 4
    FUNCTIONS = 1 << 5
    VISIOS = 1 << 6


class ContentType(str, Enum):
    """The content types of a catalog entry, as understood by the catalog."""

    AUTOMATION = "Automation"
    DASHBOARD = "Dashboard"
    CONNECTOR = "Connector"
    VISUAL_OVERVIEW = "Visual Overview"
    FUNCTION = "Function"
    COMPANION_FILE = "Companion File"
    CUSTOM_SOLUTION = "Custom Solution"


def _with_companion_files(category: ContentCategory) -> int:
    return category | ContentCategory.COMPANION_FILES


# Any combination missing from this table is a Custom Solution.
CONTENT_TYPE_TABLE: dict[int, ContentType] = {
    ContentCategory.AUTOMATION: ContentType.AUTOMATION,
    _with_companion_files(ContentCategory.AUTOMATION): ContentType.AUTOMATION,
    ContentCategory.DASHBOARDS: ContentType.DASHBOARD,
    _with_companion_files(ContentCategory.DASHBOARDS): ContentType.DASHBOARD,
    ContentCategory.PROTOCOLS: ContentType.CONNECTOR,
    _with_companion_files(ContentCategory.PROTOCOLS): ContentType.CONNECTOR,
    ContentCategory.VISIOS: ContentType.VISUAL_OVERVIEW,
    _with_companion_files(ContentCategory.VISIOS): ContentType.VISUAL_OVERVIEW,
    ContentCategory.FUNCTIONS: ContentType.FUNCTION,
    _with_companion_files(ContentCategory.FUNCTIONS): ContentType.FUNCTION,
    ContentCategory.COMPANION_FILES: ContentType.COMPANION_FILE,
}


class _ContentLayout:
    """The entries of a package, with the predicates for each kind of content."""

    def __init__(self, entry_names: Iterable[str]) -> None:
        # Packages built on Windows may use backslashes as separator.
        self.all_entries = [name.replace("\\", "/") for name in entry_names]
        self.content_root = defaults.get("artifact", "content_root", fallback="AppInstallContent")
        self.content_entries = [name for name in self.all_entries if name.startswith(f"{self.content_root}/")]

    def _has_folder(self, option: str, fallback: str) -> bool:
        prefix = f"{self.content_root}/{defaults.get('artifact', option, fallback=fallback)}/"
        return any(name.startswith(prefix) for name in self.content_entries)

    def has_automation_scripts(self) -> bool:
        return self._has_folder("scripts_dir", "Scripts")

    def has_dashboards(self) -> bool:
        return self._has_folder("dashboards_dir", "Dashboards")

    def has_protocols(self) -> bool:
        # A protocols folder holding only a Visio drawing makes a Visual Overview, not a Connector.
        prefix = f"{self.content_root}/{defaults.get('artifact', 'protocols_dir', fallback='Protocols')}/"
        return any(name.startswith(prefix) and name.endswith(".xml") for name in self.content_entries)

    def has_other_app_packages(self) -> bool:
        return self._has_folder("app_packages_dir", "AppPackages")

    def has_companion_files(self) -> bool:
        return self._has_folder("companion_files_dir", "CompanionFiles")

    def has_functions(self) -> bool:
        return self._has_folder("functions_dir", "Functions")

    def has_visios(self) -> bool:
        extension = defaults.get("artifact", "visio_extension", fallback=".vsdx")
        return any(name.endswith(extension) for name in self.all_entries)


def get_content_categories(entry_names: Iterable[str]) -> int:
    """Return the bitset of the content categories present in a package.

    Parameters
    ----------
    entry_names : Iterable[str]
        The names of the entries in the package archive.

    Returns
    -------
    int
        The bitwise OR of the ``ContentCategory`` values found.
    """
    layout = _ContentLayout(entry_names)
    predicates = (
        (layout.has_automation_scripts, ContentCategory.AUTOMATION),
        (layout.has_dashboards, ContentCategory.DASHBOARDS),
        (layout.has_protocols, ContentCategory.PROTOCOLS),
        (layout.has_other_app_packages, ContentCategory.OTHER_APP_PACKAGES),
        (layout.has_companion_files, ContentCategory.COMPANION_FILES),
        (layout.has_functions, ContentCategory.FUNCTIONS),
        (layout.has_visios, ContentCategory.VISIOS),
    )

    content = ContentCategory.NONE.value
    for predicate, category in predicates:
        if predicate():
            content |= category
    return content


def classify_entries(entry_names: Iterable[str]) -> ContentType:
    """Return the content type of a package from the names of its entries.

    Examples
    --------
    >>> classify_entries(["AppInfo.xml", "AppInstallContent/Scripts/Script.xml"])
    <ContentType.AUTOMATION: 'Automation'>
    >>> classify_entries(["AppInfo.xml"])
    <ContentType.CUSTOM_SOLUTION: 'Custom Solution'>
    """
    content = get_content_categories(entry_names)
    content_type = CONTENT_TYPE_TABLE.get(content, ContentType.CUSTOM_SOLUTION)
    logger.debug("Package content categories %s classified as %s.", bin(content), content_type.value)
    return content_type


def classify_content(archive: zipfile.ZipFile) -> str:
    """Return the content type label of an opened package archive.

    Parameters
    ----------
    archive : zipfile.ZipFile
        The opened .dmapp archive.

    Returns
    -------
    str
        One of the ``ContentType`` values.
    """
    return classify_entries(archive.namelist()).value
