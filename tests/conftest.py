"""Shared fixtures: a fake `wix` executable and sample *.wxs sources."""

import os
import subprocess
from unittest.mock import patch

import pytest

LEGACY_NS = "http://schemas.microsoft.com/wix/2006/wi"
V4_NS = "http://wixtoolset.org/schemas/v4/wxs"

# What `wix convert` does to the namespaces we care about
CONVERTED_NAMESPACES = {
    LEGACY_NS: V4_NS,
    "http://schemas.microsoft.com/wix/UtilExtension": V4_NS + "/util",
    "http://schemas.microsoft.com/wix/UIExtension": V4_NS + "/ui",
}

LEGACY_WXS = f"""<?xml version="1.0" encoding="utf-8"?>
<Wix xmlns="{LEGACY_NS}" xmlns:ui="http://schemas.microsoft.com/wix/UIExtension">
  <Product Id="*" Name="Example" Language="1033" Version="1.0.0" Manufacturer="Example">
    <Package InstallerVersion="200" Compressed="yes" />
  </Product>
</Wix>
"""

MODERN_UI_WXS = f"""<?xml version="1.0" encoding="utf-8"?>
<Wix xmlns="{V4_NS}" xmlns:ui="{V4_NS}/ui">
  <Package Name="Example" Version="1.0.0" Manufacturer="Example" UpgradeCode="*">
    <ui:WixUI Id="WixUI_Minimal" />
  </Package>
</Wix>
"""

MODERN_UI_UTIL_WXS = f"""<?xml version="1.0" encoding="utf-8"?>
<Wix xmlns="{V4_NS}" xmlns:ui="{V4_NS}/ui" xmlns:util="{V4_NS}/util">
  <Package Name="Example" Version="1.0.0" Manufacturer="Example" UpgradeCode="*" />
</Wix>
"""

UNSUPPORTED_WXS = """<?xml version="1.0" encoding="utf-8"?>
<Wix xmlns="http://example.com/not/wix" xmlns:util="http://wixtoolset.org/schemas/v4/wxs/util">
  <Product />
</Wix>
"""


class FakeWix:
    """Stands in for subprocess.run when the `wix` executable is invoked.

    Responses are keyed by action name: version, convert, list, list_global,
    add, add_global. Each value is (returncode, stdout, stderr).
    """

    def __init__(self):
        self.calls = []
        self.responses = {
            "version": (0, "4.0.2\n", ""),
            "convert": (0, "", ""),
            "list": (0, "", ""),
            "list_global": (0, "", ""),
            "add": (0, "", ""),
            "add_global": (0, "", ""),
        }
        self.convert_namespaces = dict(CONVERTED_NAMESPACES)

    @staticmethod
    def action_of(argv):
        args = list(argv[1:])
        if args[:1] == ["--version"]:
            return "version"
        if args[:1] == ["convert"]:
            return "convert"
        if args[:2] == ["extension", "list"]:
            return "list_global" if "--global" in args else "list"
        if args[:2] == ["extension", "add"]:
            return "add_global" if "--global" in args else "add"
        raise AssertionError(f"unexpected wix invocation: {argv}")

    def calls_for(self, action):
        return [(argv, cwd) for argv, cwd in self.calls if self.action_of(argv) == action]

    def _convert(self, path):
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
        for old, new in self.convert_namespaces.items():
            text = text.replace(f'"{old}"', f'"{new}"')
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)

    def __call__(self, argv, cwd=None, **kwargs):
        self.calls.append((list(argv), cwd))
        action = self.action_of(argv)
        returncode, stdout, stderr = self.responses[action]
        if action == "convert" and returncode == 0:
            self._convert(argv[-1])
        return subprocess.CompletedProcess(argv, returncode, stdout, stderr)


@pytest.fixture
def fake_wix():
    """Patch subprocess.run used by the toolset wrapper with a FakeWix."""
    fake = FakeWix()
    with patch("toolset.command.subprocess.run", side_effect=fake) as mock_run:
        fake.mock = mock_run
        yield fake


@pytest.fixture
def write_wxs(tmp_path):
    """Write a .wxs file under tmp_path and return its path as a string."""

    def _write(name, content, folder=None):
        directory = tmp_path if folder is None else tmp_path / folder
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        path.write_text(content, encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def chdir_tmp(tmp_path):
    """Run the test with tmp_path as the current directory."""
    old = os.getcwd()
    os.chdir(tmp_path)
    try:
        yield tmp_path
    finally:
        os.chdir(old)
