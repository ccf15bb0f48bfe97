"""Tests for the accubridge CLI."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from accubridge.cli import app
from accubridge_core.config.models import AccuWorkConfig
from accubridge_core.errors import ExternalToolError
from accubridge_core.issues import AccuWorkProvider
from accubridge_core.vcs import AccuRevProvider

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch):
    """Run every command in an empty directory with an empty home."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    return tmp_path


@pytest.fixture
def vcs(accurev_client, monkeypatch):
    provider = AccuRevProvider(accurev_client)
    monkeypatch.setattr("accubridge.cli.create_source_control_provider", lambda cfg: provider)
    return provider


@pytest.fixture
def tracker(accurev_client, accuwork_config, monkeypatch):
    provider = AccuWorkProvider(accurev_client, accuwork_config)
    monkeypatch.setattr(
        "accubridge.cli.create_issue_tracking_provider", lambda accurev, accuwork: provider
    )
    return provider


# ── streams / ls / get ───────────────────────────────────────────────


def test_streams_prints_hierarchy(vcs):
    result = runner.invoke(app, ["streams"])
    assert result.exit_code == 0
    for name in (":acme", ":acme_dev", ":acme_alice", ":acme_rel"):
        assert name in result.output


def test_ls_root(vcs):
    result = runner.invoke(app, ["ls"])
    assert result.exit_code == 0
    assert ":acme/" in result.output


def test_ls_directory(vcs):
    result = runner.invoke(app, ["ls", "acme/:acme_dev/src"])
    assert result.exit_code == 0
    assert "lib/" in result.output
    assert "main.c" in result.output
    assert "42" in result.output


def test_ls_missing_directory(vcs):
    result = runner.invoke(app, ["ls", "acme/:acme_dev/nope"])
    assert result.exit_code == 1
    assert "Not found" in result.output


def test_ls_invalid_path(vcs, fake_accurev):
    result = runner.invoke(app, ["ls", "acme/dev"])
    assert result.exit_code == 1
    assert "stream not specified" in result.output
    assert fake_accurev.calls == []


def test_get_copies_files(vcs, isolated_config: Path):
    target = isolated_config / "out"
    result = runner.invoke(app, ["get", "acme/:acme_dev/src", str(target)])
    assert result.exit_code == 0
    assert (target / "main.c").is_file()
    assert (target / "lib" / "util.c").is_file()


def test_get_reports_tool_failure(vcs, fake_accurev, isolated_config: Path):
    fake_accurev.failures["pop"] = ExternalToolError("accurev", "pop", 1, b"Stream not found")
    result = runner.invoke(app, ["get", "acme/:acme_dev/src", str(isolated_config / "out")])
    assert result.exit_code == 1
    assert "Stream not found" in result.output


# ── issues / categories ──────────────────────────────────────────────


def test_issues_for_release(tracker, fake_accurev):
    result = runner.invoke(app, ["issues", "--release", "1.0"])
    assert result.exit_code == 0
    assert "Crash on start" in result.output
    assert "Typo in banner" in result.output
    assert b'7 == "Server"' in fake_accurev.queries[0]


def test_issues_category_override(tracker, fake_accurev):
    result = runner.invoke(app, ["issues", "-r", "1.0", "--category", "Client"])
    assert result.exit_code == 0
    assert b'7 == "Client"' in fake_accurev.queries[0]


def test_issues_category_without_filter_field(accurev_client, fake_accurev, monkeypatch):
    provider = AccuWorkProvider(accurev_client, AccuWorkConfig(depot="acme"))
    monkeypatch.setattr(
        "accubridge.cli.create_issue_tracking_provider", lambda accurev, accuwork: provider
    )
    result = runner.invoke(app, ["issues", "--category", "Client"])
    assert result.exit_code == 1
    assert "filter_category" in result.output
    assert fake_accurev.queries == []


def test_issues_without_depot():
    result = runner.invoke(app, ["issues"])
    assert result.exit_code == 1
    assert "depot" in result.output


def test_categories(tracker):
    result = runner.invoke(app, ["categories"])
    assert result.exit_code == 0
    assert "Product Area" in result.output
    assert "Server" in result.output
    assert "Client" in result.output


# ── check ────────────────────────────────────────────────────────────


def test_check_unavailable_executable(isolated_config: Path):
    (isolated_config / "accubridge.yaml").write_text(
        yaml.dump({"accurev": {"exe_path": str(isolated_config / "missing" / "accurev")}})
    )
    result = runner.invoke(app, ["check"])
    assert result.exit_code == 1
    assert "Not available" in result.output


def test_check_ok_without_depot(vcs):
    result = runner.invoke(app, ["check"])
    assert result.exit_code == 0
    assert "AccuRev:" in result.output
    assert "skipped" in result.output


def test_check_validates_accuwork(vcs, tracker, fake_accurev, isolated_config: Path):
    (isolated_config / "accubridge.yaml").write_text(yaml.dump({"accuwork": {"depot": "acme"}}))
    result = runner.invoke(app, ["check"])
    assert result.exit_code == 0
    assert "AccuWork:" in result.output
    assert "getconfig" in fake_accurev.commands()


def test_check_login_failure(vcs, fake_accurev):
    fake_accurev.failures["login"] = ExternalToolError("accurev", "login", 1, b"Invalid password")
    result = runner.invoke(app, ["check"])
    assert result.exit_code == 1
    assert "login failed" in result.output


# ── config ───────────────────────────────────────────────────────────


def test_config_init_creates_file(isolated_config: Path):
    result = runner.invoke(app, ["config", "init"])
    assert result.exit_code == 0
    assert (isolated_config / "accubridge.yaml").is_file()


def test_config_init_refuses_overwrite(isolated_config: Path):
    (isolated_config / "accubridge.yaml").write_text("log_level: debug\n")
    result = runner.invoke(app, ["config", "init"])
    assert result.exit_code == 1
    assert "already exists" in result.output
    assert (isolated_config / "accubridge.yaml").read_text() == "log_level: debug\n"


def test_config_init_force(isolated_config: Path):
    (isolated_config / "accubridge.yaml").write_text("log_level: debug\n")
    result = runner.invoke(app, ["config", "init", "--force"])
    assert result.exit_code == 0
    assert "accuwork:" in (isolated_config / "accubridge.yaml").read_text()


def test_config_show_uses_explicit_file(isolated_config: Path):
    path = isolated_config / "custom.yaml"
    path.write_text(yaml.dump({"accuwork": {"depot": "widgets"}}))
    result = runner.invoke(app, ["--config", str(path), "config", "show"])
    assert result.exit_code == 0
    assert "widgets" in result.output


def test_invalid_config_file(isolated_config: Path):
    path = isolated_config / "bad.yaml"
    path.write_text(yaml.dump({"log_level": "chatty"}))
    result = runner.invoke(app, ["-c", str(path), "config", "show"])
    assert result.exit_code == 1
    assert "Invalid config" in result.output
