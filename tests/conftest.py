"""Shared test fixtures for accubridge."""

from pathlib import Path

import pytest
from unittest.mock import MagicMock

from accubridge_core.client import AccuRevClient
from accubridge_core.config.models import AccuBridgeConfig, AccuWorkConfig
from accubridge_core.errors import ExternalToolError
from accubridge_core.runner import ProcessRunner


STREAMS_XML = b"""<?xml version="1.0" encoding="utf-8"?>
<streams>
  <stream name="acme" depotName="acme" streamNumber="1" isDynamic="true" type="normal"/>
  <stream name="acme_dev" basis="acme" depotName="acme" streamNumber="2" type="normal"/>
  <stream name="acme_alice" basis="acme_dev" depotName="acme" streamNumber="3" type="workspace"/>
  <stream name="acme_rel" basis="acme" depotName="acme" streamNumber="4" type="normal"/>
</streams>
"""

# `files` replies keyed by the listed depot path
FILES_XML = {
    "\\.\\": b"""<?xml version="1.0" encoding="utf-8"?>
<AcResponse Command="files" Directory="/ws">
  <element location="\\.\\src" dir="yes" id="2" elemType="dir"/>
  <element location="\\.\\README.txt" id="3" size="120" modTime="1300000000" elemType="text"/>
</AcResponse>
""",
    "\\.\\src": b"""<AcResponse Command="files">
  <element location="\\.\\src\\lib" dir="yes" id="4"/>
  <element location="\\.\\src\\main.c" id="5" size="42" modTime="1300000100"/>
</AcResponse>
""",
    "\\.\\src\\lib": b"""<AcResponse Command="files">
  <element location="\\.\\src\\lib\\util.c" id="6" size="7" modTime="0"/>
</AcResponse>
""",
}

SCHEMA_XML = b"""<?xml version="1.0" encoding="utf-8"?>
<template>
  <field name="issueNum" type="internal" label="Issue" width="10" fid="1"/>
  <field name="status" type="Choose" label="Status" width="10" fid="3">
    <value>New</value>
    <value>Open</value>
    <value>Closed</value>
  </field>
  <field name="shortDescription" type="Text" label="Short Description" width="60" fid="4"/>
  <field name="description" type="Text" label="Description" width="60" fid="5"/>
  <field name="targetRelease" type="Text" label="Target Release" width="10" fid="6"/>
  <field name="productArea" type="Choose" label="Product Area" width="10" fid="7">
    <value>Server</value>
    <value>Client</value>
  </field>
</template>
"""

ISSUES_XML = b"""<acResponse>
  <issues>
    <issue ataid="1">
      <issueNum fid="1">12</issueNum>
      <status fid="3">Open</status>
      <shortDescription fid="4">Crash on start</shortDescription>
      <description fid="5">It crashes.</description>
      <targetRelease fid="6">1.0</targetRelease>
    </issue>
    <issue ataid="2">
      <issueNum fid="1">13</issueNum>
      <status fid="3">Closed</status>
      <shortDescription fid="4">Typo in banner</shortDescription>
      <targetRelease fid="6">1.0</targetRelease>
    </issue>
  </issues>
</acResponse>
"""


class FakeAccuRev:
    """Stands in for ProcessRunner.run, answering from canned XML."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, ...]] = []
        self.queries: list[bytes] = []
        self.failures: dict[str, ExternalToolError] = {}

    def commands(self) -> list[str]:
        return [c[0] for c in self.calls]

    def __call__(self, command: str, *args: str, cwd=None) -> bytes:
        self.calls.append((command, *args))
        if command in self.failures:
            raise self.failures[command]
        if command == "login":
            return b""
        if command == "show":
            return STREAMS_XML
        if command == "files":
            return FILES_XML.get(args[-1], b"<AcResponse/>")
        if command == "getconfig":
            return SCHEMA_XML
        if command == "xml":
            self.queries.append(Path(args[-1]).read_bytes())
            return ISSUES_XML
        if command == "pop":
            staging = Path(args[args.index("-L") + 1])
            (staging / "src" / "lib").mkdir(parents=True)
            (staging / "src" / "main.c").write_text("int main(void) { return 0; }\n")
            (staging / "src" / "lib" / "util.c").write_text("/* util */\n")
            return b'<AcResponse Command="pop"/>'
        raise AssertionError(f"unexpected accurev command: {command}")


@pytest.fixture
def fake_accurev():
    return FakeAccuRev()


@pytest.fixture
def mock_runner(fake_accurev):
    runner = MagicMock(spec=ProcessRunner)
    runner.exe_path = "/opt/accurev/bin/accurev"
    runner.run.side_effect = fake_accurev
    runner.is_available.return_value = True
    return runner


@pytest.fixture
def accurev_client(mock_runner):
    return AccuRevClient(mock_runner, username="alice", password="s3cret")


@pytest.fixture
def accuwork_config():
    return AccuWorkConfig(depot="acme", filter_category="productArea", category_id_filter=["Server"])


@pytest.fixture
def sample_config():
    return AccuBridgeConfig()


@pytest.fixture
def streams_xml():
    return STREAMS_XML


@pytest.fixture
def files_xml():
    return FILES_XML


@pytest.fixture
def schema_xml():
    return SCHEMA_XML


@pytest.fixture
def issues_xml():
    return ISSUES_XML
