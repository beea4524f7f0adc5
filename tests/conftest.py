# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""Fixtures for tests."""
import zipfile
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from dmcatalog.config.defaults import defaults, load_defaults

# We need to pass fixture names as arguments to maintain an order.
# pylint: disable=redefined-outer-name

PROTOCOL_XML = """<?xml version="1.0" encoding="utf-8"?>
<Protocol xmlns="http://www.skyline.be/protocol">
  <Name>Microsoft Platform</Name>
  <Version>6.0.0.4_B2</Version>
  <VersionHistory>
    <Branches>
      <Branch id="6">
        <SystemVersions>
          <SystemVersion id="0">
            <MajorVersions>
              <MajorVersion id="0">
                <MinorVersions>
                  <MinorVersion id="3">
                    <Changes>
                      <NewFeature>Initial version</NewFeature>
                    </Changes>
                  </MinorVersion>
                  <MinorVersion id="4">
                    <Changes>
                      <Fix>Fixed the CPU usage of the processes table.</Fix>
                      <NewFeature>Added the services table.</NewFeature>
                    </Changes>
                  </MinorVersion>
                </MinorVersions>
              </MajorVersion>
            </MajorVersions>
          </SystemVersion>
        </SystemVersions>
      </Branch>
    </Branches>
  </VersionHistory>
</Protocol>
"""


def make_app_info(
    display_name: str | None = "Demo InterAppCalls",
    version: str | None = "1.0.0-CU1",
    build: str | None = None,
    min_dma_version: str | None = "10.0.9.0-9312",
) -> str:
    """Return the content of an AppInfo.xml file."""
    elements = [
        ("DisplayName", display_name),
        ("MinDmaVersion", min_dma_version),
        ("Version", version),
        ("Build", build),
    ]
    body = "".join(f"  <{tag}>{value}</{tag}>\n" for tag, value in elements if value is not None)
    return f'<?xml version="1.0" encoding="utf-8"?>\n<AppInfo>\n{body}</AppInfo>\n'


def make_archive(path: Path, entries: dict[str, str | bytes]) -> str:
    """Write a ZIP archive with ``entries`` at ``path`` and return the path as string."""
    with zipfile.ZipFile(path, "w") as archive:
        for name, content in entries.items():
            archive.writestr(name, content)
    return str(path)


@pytest.fixture(autouse=True)
def setup_test() -> Iterator[None]:
    """Load the values from defaults.ini for each test and clear them afterwards."""
    load_defaults("")
    yield
    defaults.clear()


@pytest.fixture()
def dmapp_factory(tmp_path: Path) -> Callable[..., str]:
    """Return a function creating .dmapp packages in the temporary directory.

    Returns
    -------
    Callable[..., str]
        The function, taking the AppInfo.xml content, the Description.txt content and
        extra entries, and returning the path to the package.
    """

    def _make(
        app_info: str | bytes | None = None,
        description: str | bytes | None = None,
        entries: dict[str, str | bytes] | None = None,
        file_name: str = "package.dmapp",
    ) -> str:
        content: dict[str, str | bytes] = {}
        if app_info is not None:
            content["AppInfo.xml"] = app_info
        if description is not None:
            content["Description.txt"] = description
        content.update(entries or {})
        return make_archive(tmp_path.joinpath(file_name), content)

    return _make


@pytest.fixture()
def dmprotocol_factory(tmp_path: Path) -> Callable[..., str]:
    """Return a function creating .dmprotocol packages in the temporary directory."""

    def _make(
        description: str | bytes | None = "Protocol Name: Microsoft Platform\nProtocol Version: 6.0.0.4_B2\n",
        protocol_xml: str | bytes | None = PROTOCOL_XML,
        file_name: str = "package.dmprotocol",
    ) -> str:
        content: dict[str, str | bytes] = {}
        if description is not None:
            content["Description.txt"] = description
        if protocol_xml is not None:
            content["Microsoft Platform/Protocol.xml"] = protocol_xml
        return make_archive(tmp_path.joinpath(file_name), content)

    return _make
