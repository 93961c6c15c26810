# File: tests/test_cli.py
"""Тесты для CLI с использованием click.testing.CliRunner.
Проверяют команды `scan`, `config`, `show`, `--version`, а также обработку ошибок.
"""
import asyncio
import importlib
import json
import types

import pytest
from click.testing import CliRunner
from domain_scout.cli import cli
from domain_scout.logger import setup_logging
from domain_scout.persist import Persister
from domain_scout.registry import RegistryNetworkError
from domain_scout.store import ResultStore

# `domain_scout.cli` as an attribute is the click group re-exported by the
# package, so the module itself has to come from the import system.
cli_module = importlib.import_module("domain_scout.cli")


@pytest.fixture(autouse=True)
def restore_logging():
    """CLI rebinds the log handler to CliRunner's stdout; point it back afterwards."""
    yield
    setup_logging()


@pytest.fixture()
def scanned(monkeypatch, ok_outcome, failed_outcome):
    """Патчим start_scan: без сети, запоминаем переданный конфиг."""
    seen = {}

    async def fake_scan(cfg):
        seen["config"] = cfg
        store = ResultStore()
        store.record(ok_outcome)
        store.record(failed_outcome)
        return store

    monkeypatch.setattr(cli_module, "start_scan", fake_scan)
    return seen


@pytest.fixture()
def cfg_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps({"concurrency": 3, "timeout": 1.0, "output": str(tmp_path / "out.json")}),
        encoding="utf-8",
    )
    return path


def test_patch_target_is_the_cli_module():
    assert isinstance(cli_module, types.ModuleType)
    assert cli_module.cli is cli
    assert hasattr(cli_module, "start_scan")


def test_version_option():
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "DomainScout" in result.output


def test_show_config(cfg_file):
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "config"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["concurrency"] == 3
    assert data["persist_mode"] == "eager"


def test_bad_config_exits_nonzero(tmp_path):
    bad = tmp_path / "bad.yaml"
    bad.write_text("concurrency: -1", encoding="utf-8")
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(bad), "config"])
    assert result.exit_code == 1


def test_scan_summary(scanned, cfg_file):
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "scan"])
    assert result.exit_code == 0
    assert "Probed 2 domains: 1 ok, 1 failed" in result.output
    assert scanned["config"].concurrency == 3


def test_scan_options_override_config(scanned, cfg_file, tmp_path):
    out = tmp_path / "other.json.gz"
    runner = CliRunner()
    result = runner.invoke(
        cli,
        [
            "--config", str(cfg_file), "scan",
            "--concurrency", "9", "--timeout", "0.5", "--output", str(out),
            "--compress", "--persist", "batch", "--resume",
        ],
    )
    assert result.exit_code == 0
    cfg = scanned["config"]
    assert (cfg.concurrency, cfg.timeout, cfg.output) == (9, 0.5, out)
    assert cfg.compress is True
    assert cfg.persist_mode == "batch"
    assert cfg.resume is True


def test_scan_rejects_zero_concurrency(scanned, cfg_file):
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "scan", "--concurrency", "0"])
    assert result.exit_code != 0
    assert "config" not in scanned


def test_scan_registry_failure(monkeypatch, cfg_file):
    async def broken(cfg):
        raise RegistryNetworkError("Registry down")

    monkeypatch.setattr(cli_module, "start_scan", broken)
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "scan"])
    assert result.exit_code == 1
    assert "Registry down" in result.output


def test_scan_persist_failure(monkeypatch, cfg_file):
    async def unwritable(cfg):
        raise PermissionError("read-only filesystem")

    monkeypatch.setattr(cli_module, "start_scan", unwritable)
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "scan"])
    assert result.exit_code == 1
    assert "read-only filesystem" in result.output


def test_scan_timeout(monkeypatch, cfg_file):
    async def slow(cfg):
        await asyncio.sleep(2)
        return ResultStore()

    monkeypatch.setattr(cli_module, "start_scan", slow)
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(cfg_file), "scan", "--scan-timeout", "0.2"])
    assert result.exit_code == 1
    assert "не завершён" in result.output


@pytest.mark.parametrize("compress", [False, True])
def test_show_results(tmp_path, ok_outcome, failed_outcome, compress):
    path = tmp_path / "domains.json"
    store = ResultStore()
    store.record(ok_outcome)
    store.record(failed_outcome)
    asyncio.run(Persister(path, compress=compress).persist(store))

    args = ["--log-level", "WARNING", "show", str(path)] + (["--compressed"] if compress else [])
    runner = CliRunner()
    result = runner.invoke(cli, args)
    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[0] == "a.example\t200\tT"
    assert lines[1].startswith("c.example\tERROR\tCannot connect")


def test_show_missing_default_output(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()
    result = runner.invoke(cli, ["show"])
    assert result.exit_code == 1
