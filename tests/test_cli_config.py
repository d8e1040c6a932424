"""Tests for configuration loading and precedence."""

import argparse
import json
import os

from cli_config import SetupConfig, find_config_path, load_config, resolve_setup_config


def _args(**kwargs):
    defaults = {"TOOLSET": None, "INCLUDES": [], "MODE": None}
    defaults.update(kwargs)
    return argparse.Namespace(**defaults)


class TestLoadConfig:
    """YAML/JSON loading."""

    def test_yaml(self, tmp_path):
        path = tmp_path / "cfg.yml"
        path.write_text("toolset: C:/wix/wix.exe\nincludes:\n  - a.wxs\n", encoding="utf-8")
        assert load_config(str(path)) == {"toolset": "C:/wix/wix.exe", "includes": ["a.wxs"]}

    def test_json(self, tmp_path):
        path = tmp_path / "cfg.json"
        path.write_text(json.dumps({"mode": "sxs"}), encoding="utf-8")
        assert load_config(str(path)) == {"mode": "sxs"}

    def test_default_location(self, tmp_path):
        (tmp_path / "wixsetup.yml").write_text("mode: vendor\n", encoding="utf-8")
        assert load_config(None, str(tmp_path)) == {"mode": "vendor"}

    def test_no_default_file(self, tmp_path):
        assert load_config(None, str(tmp_path)) == {}

    def test_missing_explicit_file(self, tmp_path):
        assert load_config(str(tmp_path / "nope.yml")) == {}

    def test_malformed_yaml_ignored(self, tmp_path):
        path = tmp_path / "cfg.yml"
        path.write_text("toolset: [unclosed\n", encoding="utf-8")
        assert load_config(str(path)) == {}

    def test_non_mapping_ignored(self, tmp_path):
        path = tmp_path / "cfg.yml"
        path.write_text("- just\n- a list\n", encoding="utf-8")
        assert load_config(str(path)) == {}


class TestResolveSetupConfig:
    """CLI > environment > config file > defaults."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("WIXSETUP_TOOLSET", raising=False)
        assert resolve_setup_config(_args()) == SetupConfig()

    def test_config_values(self, monkeypatch):
        monkeypatch.delenv("WIXSETUP_TOOLSET", raising=False)
        cfg = {"toolset": "/opt/wix", "includes": ["a.wxs"], "mode": "SXS"}
        resolved = resolve_setup_config(_args(), cfg)
        assert resolved.toolset == "/opt/wix"
        assert resolved.includes == ["a.wxs"]
        assert resolved.mode == "sxs"

    def test_env_beats_config(self, monkeypatch):
        monkeypatch.setenv("WIXSETUP_TOOLSET", "/env/wix")
        resolved = resolve_setup_config(_args(), {"toolset": "/opt/wix"})
        assert resolved.toolset == "/env/wix"

    def test_cli_beats_env(self, monkeypatch):
        monkeypatch.setenv("WIXSETUP_TOOLSET", "/env/wix")
        resolved = resolve_setup_config(
            _args(TOOLSET="/cli/wix", INCLUDES=["b.wxs"], MODE="vendor"),
            {"includes": ["a.wxs"], "mode": "sxs"},
        )
        assert resolved.toolset == "/cli/wix"
        assert resolved.includes == ["b.wxs"]
        assert resolved.mode == "vendor"

    def test_bad_includes_ignored(self, monkeypatch):
        monkeypatch.delenv("WIXSETUP_TOOLSET", raising=False)
        resolved = resolve_setup_config(_args(), {"includes": "a.wxs"})
        assert resolved.includes == []

    def test_includes_relative_to_config_dir(self, monkeypatch, tmp_path):
        monkeypatch.delenv("WIXSETUP_TOOLSET", raising=False)
        absolute = str(tmp_path / "abs.wxs")
        resolved = resolve_setup_config(
            _args(), {"includes": ["extra/a.wxs", absolute]}, config_dir="project"
        )
        assert resolved.includes == [os.path.join("project", "extra", "a.wxs"), absolute]

    def test_cli_includes_not_rebased(self, monkeypatch):
        monkeypatch.delenv("WIXSETUP_TOOLSET", raising=False)
        resolved = resolve_setup_config(_args(INCLUDES=["b.wxs"]), {}, config_dir="project")
        assert resolved.includes == ["b.wxs"]


class TestFindConfigPath:
    def test_explicit_path_returned(self, tmp_path):
        assert find_config_path("custom.json", str(tmp_path)) == "custom.json"

    def test_default_file_in_base_dir(self, tmp_path):
        (tmp_path / ".wixsetup.yml").write_text("mode: sxs\n", encoding="utf-8")
        assert find_config_path(None, str(tmp_path)) == str(tmp_path / ".wixsetup.yml")

    def test_nothing_found(self, tmp_path):
        assert find_config_path(None, str(tmp_path)) is None
