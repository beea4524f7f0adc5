# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module extracts the catalog metadata embedded in .dmapp and .dmprotocol packages."""

import logging
import re
import zipfile
from xml.etree.ElementTree import Element  # nosec B405

from dmcatalog.artifact.content_type import ContentType, classify_content
from dmcatalog.catalog.metadata import DEFAULT_VERSION_DESCRIPTION, CatalogMetadata, VersionMetadata
from dmcatalog.config.defaults import defaults
from dmcatalog.errors import (
    ArtifactAccessError,
    MalformedDescriptorError,
    MissingDescriptorError,
    UnsupportedFormatError,
)
from dmcatalog.parsers.xmlparser import find_child, find_child_text, iter_children, local_name, parse_xml_string

logger: logging.Logger = logging.getLogger(__name__)

DMAPP_EXTENSION = ".dmapp"
DMPROTOCOL_EXTENSION = ".dmprotocol"

PRE_RELEASE_NOTICE = "Pre-Release (Unofficial) version."

# The cumulative update suffix of a DataMiner version, e.g. the "-CU2" of "1.0.0-CU2".
_CU_SUFFIX_PATTERN = re.compile(r"-CU[0-9]+$")

# The path to the changes of one version in the version history of a protocol.
_VERSION_HISTORY_PATH = (
    ("Branches", "Branch"),
    ("SystemVersions", "SystemVersion"),
    ("MajorVersions", "MajorVersion"),
    ("MinorVersions", "MinorVersion"),
)


def inspect_artifact(archive_path: str) -> CatalogMetadata:
    """Return the catalog metadata found inside a package.

    Parameters
    ----------
    archive_path : str
        The path to a .dmapp or .dmprotocol package.

    Returns
    -------
    CatalogMetadata
        The partial metadata extracted from the package.

    Raises
    ------
    UnsupportedFormatError
        If the path does not end with .dmapp or .dmprotocol.
    ArtifactAccessError
        If the package file does not exist or cannot be read.
    MissingDescriptorError
        If a file required to describe the package is absent or empty.
    MalformedDescriptorError
        If the package or one of its descriptors cannot be parsed.
    """
    if not archive_path or not archive_path.strip():
        raise UnsupportedFormatError("The path to the artifact cannot be empty.")

    lowered = archive_path.lower()
    if lowered.endswith(DMAPP_EXTENSION):
        return extract_from_dmapp(archive_path)
    if lowered.endswith(DMPROTOCOL_EXTENSION):
        return extract_from_dmprotocol(archive_path)

    raise UnsupportedFormatError(
        f"Invalid path to artifact. Expected a path that ends with {DMAPP_EXTENSION} or {DMPROTOCOL_EXTENSION}"
        f" but received {archive_path}."
    )


def truncate_description(description: str) -> str:
    """Limit ``description`` to the maximum length accepted by the catalog.

    Examples
    --------
    >>> truncate_description("short")
    'short'
    >>> len(truncate_description("x" * 600))
    500
    """
    max_length = defaults.getint("artifact", "max_description_length", fallback=500)
    if len(description) <= max_length:
        return description
    return description[: max_length - 3] + "..."


def _open_archive(archive_path: str) -> zipfile.ZipFile:
    try:
        return zipfile.ZipFile(archive_path)
    except zipfile.BadZipFile as error:
        raise MalformedDescriptorError(f"{archive_path} is not a valid package archive: {error}") from error
    except OSError as error:
        raise ArtifactAccessError(f"Cannot open the package {archive_path}: {error}") from error


def _read_entry(archive: zipfile.ZipFile, entry_name: str) -> bytes | None:
    """Return the content of an entry, or None if the archive has no such entry."""
    try:
        return archive.read(entry_name)
    except KeyError:
        return None
    except zipfile.BadZipFile as error:
        raise MalformedDescriptorError(f"Cannot read {entry_name} from the package: {error}") from error


def _read_text_entry(archive: zipfile.ZipFile, entry_name: str) -> str | None:
    """Return the text of an entry, or None if the archive has no such entry.

    Bytes that are not valid UTF-8 are replaced rather than rejected.
    """
    content = _read_entry(archive, entry_name)
    if content is None:
        return None
    return content.decode("utf-8-sig", errors="replace")


def _default_description() -> str:
    return defaults.get("artifact", "default_description", fallback=DEFAULT_VERSION_DESCRIPTION)


def _strip_version_line(description: str) -> str:
    """Remove the first line of a .dmapp description if it repeats the package version."""
    lines = description.splitlines()
    if lines and "version:" in lines[0].lower():
        lines = lines[1:]
    return "\n".join(lines)


def extract_from_dmapp(archive_path: str) -> CatalogMetadata:
    """Return the catalog metadata of a .dmapp package.

    The name and version come from ``AppInfo.xml``. A ``Build`` element marks the package
    as a pre-release: its cumulative update suffix is dropped and ``-B<build>`` is appended
    to the version. The version description is made of the pre-release notice, the minimum
    DataMiner version and the content of ``Description.txt``.

    Parameters
    ----------
    archive_path : str
        The path to the .dmapp package.

    Returns
    -------
    CatalogMetadata
        The partial metadata extracted from the package.

    Raises
    ------
    MissingDescriptorError
        If ``AppInfo.xml`` is absent or empty.
    MalformedDescriptorError
        If the package or ``AppInfo.xml`` cannot be parsed.
    """
    logger.debug("Extracting metadata from %s.", archive_path)
    with _open_archive(archive_path) as archive:
        app_info_raw = _read_entry(archive, "AppInfo.xml")
        if not app_info_raw or not app_info_raw.strip():
            raise MissingDescriptorError(f"Could not find AppInfo.xml in {archive_path}.")

        description_raw = _read_text_entry(archive, "Description.txt")
        content_type = classify_content(archive)

    app_info = parse_xml_string(app_info_raw, "AppInfo.xml")
    version = find_child_text(app_info, "Version")
    build_number = find_child_text(app_info, "Build")
    min_dma_version = find_child_text(app_info, "MinDmaVersion")

    meta = CatalogMetadata(name=find_child_text(app_info, "DisplayName"), content_type=content_type)

    description_parts = []
    if build_number:
        meta.artifact_had_build_number = True
        description_parts.append(PRE_RELEASE_NOTICE)
        if version:
            # A build number means a pre-release, so the cumulative update is irrelevant.
            meta.version.value = f"{_CU_SUFFIX_PATTERN.sub('', version)}-B{build_number}"
    else:
        meta.artifact_had_build_number = False
        meta.version.value = version or ""

    if min_dma_version:
        description_parts.append(f"Minimum DataMiner Version: {min_dma_version}")

    if description_raw:
        description = _strip_version_line(description_raw)
        if description.strip():
            description_parts.append(description)

    if description_parts:
        meta.version.version_description = truncate_description("\n".join(description_parts))
    else:
        meta.version.version_description = _default_description()

    logger.info("Found %s package %s version %s.", content_type, meta.name, meta.version.value)
    return meta


def _parse_protocol_description(description: str, archive_path: str) -> tuple[str | None, str]:
    """Return the protocol name and version from the Description.txt of a .dmprotocol package."""
    name = None
    version = None
    for line in description.splitlines()[:2]:
        key, separator, value = line.partition(":")
        if not separator:
            continue
        match key.strip():
            case "Protocol Name":
                name = value.strip()
            case "Protocol Version":
                version = value.strip()
            case _:
                logger.debug("Ignoring line '%s' in the Description.txt of %s.", line, archive_path)

    if not version:
        raise MalformedDescriptorError(f"Could not find the protocol version in the Description.txt of {archive_path}.")
    return name, version


def _find_protocol_xml(archive: zipfile.ZipFile) -> str | None:
    for entry_name in archive.namelist():
        if entry_name.endswith("Protocol.xml"):
            return entry_name
    return None


def _find_by_id(parent: Element | None, container: str, item: str, identifier: str) -> Element | None:
    if parent is None:
        return None
    items = find_child(parent, container)
    if items is None:
        return None
    for candidate in iter_children(items, item):
        if (candidate.get("id") or "").strip() == identifier:
            return candidate
    return None


def get_version_changes(protocol: Element, version: str) -> str | None:
    """Return the changes recorded in the version history of a protocol for ``version``.

    The version has the form ``branch.system.major.minor`` with an optional ``_suffix`` on
    the minor number. Each change is rendered as ``<ChangeType>: <text>``, one per line.

    Parameters
    ----------
    protocol : Element
        The root element of the protocol XML.
    version : str
        The version to look up.

    Returns
    -------
    str | None
        The changes, or None if the version history has no entry for ``version``.
    """
    segments = version.split("_", 1)[0].split(".")
    if len(segments) != len(_VERSION_HISTORY_PATH):
        logger.debug("Version %s does not have the branch.system.major.minor form.", version)
        return None

    node = find_child(protocol, "VersionHistory")
    for (container, item), identifier in zip(_VERSION_HISTORY_PATH, segments):
        node = _find_by_id(node, container, item, identifier.strip())

    if node is None:
        return None
    changes = find_child(node, "Changes")
    if changes is None:
        return None

    lines = [f"{local_name(change)}: {(change.text or '').strip()}" for change in changes]
    return "\n".join(lines) if lines else None


def extract_from_dmprotocol(archive_path: str) -> CatalogMetadata:
    """Return the catalog metadata of a .dmprotocol package.

    The name and version come from ``Description.txt``, the version description from the
    version history in the protocol XML. An underscore in the version, as in ``6.0.0.4_B2``,
    marks a build of a pre-release.

    Parameters
    ----------
    archive_path : str
        The path to the .dmprotocol package.

    Returns
    -------
    CatalogMetadata
        The partial metadata extracted from the package.

    Raises
    ------
    MissingDescriptorError
        If ``Description.txt`` or the protocol XML is absent or empty.
    MalformedDescriptorError
        If the package or one of its descriptors cannot be parsed.
    """
    logger.debug("Extracting metadata from %s.", archive_path)
    with _open_archive(archive_path) as archive:
        description_raw = _read_text_entry(archive, "Description.txt")
        if not description_raw or not description_raw.strip():
            raise MissingDescriptorError(f"Could not find Description.txt in {archive_path}.")

        protocol_entry = _find_protocol_xml(archive)
        protocol_raw = _read_entry(archive, protocol_entry) if protocol_entry else None
        if not protocol_raw or not protocol_raw.strip():
            raise MissingDescriptorError(f"Could not find the protocol XML in {archive_path}.")

    name, version = _parse_protocol_description(description_raw, archive_path)
    protocol = parse_xml_string(protocol_raw, protocol_entry or "Protocol.xml")
    protocol_version = find_child_text(protocol, "Version") or version

    changes = get_version_changes(protocol, protocol_version)
    meta = CatalogMetadata(
        name=name,
        content_type=ContentType.CONNECTOR.value,
        version=VersionMetadata(
            value=version,
            version_description=truncate_description(changes) if changes else _default_description(),
        ),
        artifact_had_build_number="_" in version,
    )

    logger.info("Found protocol %s version %s.", meta.name, meta.version.value)
    return meta
