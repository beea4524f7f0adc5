# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the parser for the XML descriptors found in DataMiner packages."""
import logging
from collections.abc import Iterator
from xml.etree.ElementTree import Element  # nosec B405

import defusedxml.ElementTree
from defusedxml import DefusedXmlException
from defusedxml.ElementTree import fromstring

from dmcatalog.errors import MalformedDescriptorError

logger: logging.Logger = logging.getLogger(__name__)


def parse_xml_string(xml_content: str | bytes, source: str) -> Element:
    """
    Parse the passed XML string using defusedxml.

    Parameters
    ----------
    xml_content : str | bytes
        The contents of an XML file. Bytes are decoded according to the encoding declared
        in the XML header, UTF-8 by default.
    source : str
        The name of the file the XML comes from, used in error messages.

    Returns
    -------
    Element
        The root element of the parsed XML document.

    Raises
    ------
    MalformedDescriptorError
        If the XML content cannot be parsed.
    """
    try:
        # Stored here first to help with type checking.
        root: Element = fromstring(xml_content)
        return root
    except (DefusedXmlException, defusedxml.ElementTree.ParseError) as error:
        logger.debug("Failed to parse XML from %s: %s", source, error)
        raise MalformedDescriptorError(f"Failed to parse {source}: {error}") from error


def local_name(element: Element) -> str:
    """Return the tag of ``element`` without its namespace.

    Examples
    --------
    >>> from xml.etree.ElementTree import Element
    >>> local_name(Element("{http://www.skyline.be/protocol}Version"))
    'Version'
    """
    return element.tag.rsplit("}", 1)[-1] if isinstance(element.tag, str) else ""


def iter_children(element: Element, name: str) -> Iterator[Element]:
    """Yield the direct children of ``element`` named ``name``, ignoring namespaces."""
    for child in element:
        if local_name(child) == name:
            yield child


def find_child(element: Element, name: str) -> Element | None:
    """Return the first direct child of ``element`` named ``name``, ignoring namespaces."""
    return next(iter_children(element, name), None)


def find_child_text(element: Element, name: str) -> str | None:
    """Return the stripped text of the first direct child named ``name``.

    Returns
    -------
    str | None
        The text, or None if the child is absent or has no text.
    """
    child = find_child(element, name)
    if child is None or child.text is None:
        return None
    return child.text.strip()
