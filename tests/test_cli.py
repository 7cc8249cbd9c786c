from __future__ import annotations

import json
from pathlib import Path

import pytest

from chaincfg.runtime.lifecycle import main


def test_builtin_print_config(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--builtin"]) == 0

    out = json.loads(capsys.readouterr().out)
    assert out == {
        "solidity": "0.8.20",
        "gasReporter": {"enabled": True},
        "networks": {"hardhat": {}},
        "paths": {"tests": "./test"},
    }


def test_default_profile_reads_configs_dir(
    repo_root: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.chdir(repo_root)

    assert main(["print-config"]) == 0
    assert json.loads(capsys.readouterr().out)["solidity"] == "0.8.20"


def test_ci_profile_without_env_fails_fast(
    repo_root: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.chdir(repo_root)
    monkeypatch.delenv("SOLC_VERSION", raising=False)

    assert main(["--profile", "ci"]) == 2

    err = capsys.readouterr().err
    assert "ConfigError" in err
    assert "SOLC_VERSION" in err


def test_networks_command(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    p = tmp_path / "project.yaml"
    p.write_text(
        """
networks:
  hardhat: {}
  localhost:
    url: http://127.0.0.1:8545
""".lstrip(),
        encoding="utf-8",
    )

    assert main(["--config", str(p), "networks"]) == 0
    assert capsys.readouterr().out.splitlines() == ["hardhat", "localhost"]


def test_missing_config_file_exit_code(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--config", str(tmp_path / "missing.yaml")]) == 2
    assert "missing.yaml" in capsys.readouterr().err


def test_help_does_not_need_config(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.chdir(tmp_path)

    assert main(["--help"]) == 0
    assert "chaincfg" in capsys.readouterr().out


def test_conflicting_sources_is_usage_error(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--builtin", "--profile", "ci"]) == 2
    assert "not allowed" in capsys.readouterr().err
