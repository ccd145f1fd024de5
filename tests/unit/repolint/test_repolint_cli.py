"""Tests for the repolint CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from repolint import __version__
from repolint.cli import cli
from repolint.rules import RuleKind
from repolint.types import RepositoryRef
from tests.unit.repolint.rule_test_utils import FakeContentClient

runner = CliRunner()


def _write_config(tmp_path: Path, rules: list[dict]) -> Path:
    config_path = tmp_path / "repolint.json"
    config_path.write_text(json.dumps({"rules": rules}), encoding="utf-8")
    return config_path


def _install_client(monkeypatch: pytest.MonkeyPatch, client: FakeContentClient) -> list[str]:
    tokens: list[str] = []

    def _factory(token: str) -> FakeContentClient:
        tokens.append(token)
        return client

    monkeypatch.setattr("repolint.cli.GitHubClient", _factory)
    return tokens


def test_version_flag() -> None:
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_rules_lists_every_identifier() -> None:
    result = runner.invoke(cli, ["rules"])

    assert result.exit_code == 0
    for kind in RuleKind:
        assert kind.value in result.output


def test_validate_accepts_good_config(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path, [{"name": "readme/exists", "level": "error"}])

    result = runner.invoke(cli, ["validate", "--config", str(config_path)])

    assert result.exit_code == 0
    assert "Config OK" in result.output


def test_validate_rejects_unknown_rule(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path, [{"name": "no-such-rule", "level": "error"}])

    result = runner.invoke(cli, ["validate", "--config", str(config_path)])

    assert result.exit_code == 1
    assert "Configuration error" in result.output
    assert "no-such-rule" in result.output


def test_run_requires_token(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    config_path = _write_config(tmp_path, [])

    result = runner.invoke(cli, ["run", "--config", str(config_path)])

    assert result.exit_code == 1
    assert "GitHub token is required" in result.output


def test_run_rejects_blank_token(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    config_path = _write_config(tmp_path, [])

    result = runner.invoke(cli, ["run", "--config", str(config_path), "--token", "   "])

    assert result.exit_code == 1
    assert "GitHub token is required" in result.output
    assert not isinstance(result.exception, ValueError)


def test_run_reports_config_errors_before_token_check(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)

    result = runner.invoke(cli, ["run", "--config", str(tmp_path / "missing.json")])

    assert result.exit_code == 1
    assert "Configuration error" in result.output


def test_run_exits_nonzero_on_error_level_violations(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    client = FakeContentClient(repositories=[RepositoryRef(owner="acme", name="widgets")])
    tokens = _install_client(monkeypatch, client)
    monkeypatch.setenv("GITHUB_TOKEN", "env-token")
    config_path = _write_config(tmp_path, [{"name": "readme/exists", "level": "error"}])

    result = runner.invoke(cli, ["run", "--config", str(config_path)])

    assert result.exit_code == 1
    assert tokens == ["env-token"]
    assert "acme/widgets" in result.output
    assert "❌ readme/exists: README.md not found" in result.output


def test_run_exits_zero_when_only_warnings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    client = FakeContentClient(repositories=[RepositoryRef(owner="acme", name="widgets")])
    tokens = _install_client(monkeypatch, client)
    config_path = _write_config(tmp_path, [{"name": "license/exists", "level": "warning"}])

    result = runner.invoke(cli, ["run", "--config", str(config_path), "--token", "flag-token"])

    assert result.exit_code == 0
    assert tokens == ["flag-token"]
    assert "license/exists: LICENSE.md not found" in result.output


def test_run_explicit_repositories_and_json_output(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    client = FakeContentClient({"README.md": "# ok\n"})
    _install_client(monkeypatch, client)
    config_path = _write_config(tmp_path, [{"name": "readme/exists", "level": "error"}])
    json_out = tmp_path / "out" / "report.json"

    result = runner.invoke(
        cli,
        [
            "run",
            "--config",
            str(config_path),
            "--token",
            "t",
            "--repo",
            "acme/one",
            "--repo",
            "acme/two",
            "--json-out",
            str(json_out),
        ],
    )

    assert result.exit_code == 0
    assert client.visibility_requests == []
    payload = json.loads(json_out.read_text(encoding="utf-8"))
    assert payload["has_errors"] is False
    assert [item["repository"] for item in payload["repositories"]] == ["acme/one", "acme/two"]


def test_run_rejects_malformed_repo_argument(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _install_client(monkeypatch, FakeContentClient())
    config_path = _write_config(tmp_path, [])

    result = runner.invoke(cli, ["run", "--config", str(config_path), "--token", "t", "--repo", "no-slash"])

    assert result.exit_code == 2
    assert "owner/name" in result.output
