"""End-to-end tests for the spawn-catalog CLI over the fixture content directory."""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from spawn_catalog.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _restore_root_logger(monkeypatch):
    for var in ("SPAWN_CATALOG_CONTENT_DIR", "SPAWN_CATALOG_LOG_LEVEL", "SPAWN_CATALOG_DEBUG"):
        monkeypatch.delenv(var, raising=False)
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def config_file(tmp_path: Path, content_dir: Path) -> Path:
    path = tmp_path / "cli.toml"
    path.write_text(
        f'[content]\ncontent_dir = "{content_dir.as_posix()}"\n'
        "[catalog]\nwallpaper_count = 3\nflooring_count = 2\n"
        '[logging]\nlevel = "WARNING"\n',
        encoding="utf-8",
    )
    return path


def _invoke(*args: str):
    return runner.invoke(app, list(args))


class TestValidateConfig:
    def test_valid(self, config_file: Path):
        result = _invoke("validate-config", "--config", str(config_file))
        assert result.exit_code == 0
        assert "[OK] Config valid." in result.stdout

    def test_full_dump(self, config_file: Path):
        result = _invoke("validate-config", "--config", str(config_file), "--full")
        assert '"wallpaper_count": 3' in result.stdout

    def test_missing_file(self, tmp_path: Path):
        assert _invoke("validate-config", "--config", str(tmp_path / "nope.toml")).exit_code == 1

    def test_invalid_file(self, tmp_path: Path):
        path = tmp_path / "bad.toml"
        path.write_text("[catalog]\ncustom_id_offset = 0\n", encoding="utf-8")
        assert _invoke("validate-config", "--config", str(path)).exit_code == 1


class TestList:
    def test_by_type(self, config_file: Path):
        result = _invoke("list", "--config", str(config_file), "--type", "hat")
        assert result.exit_code == 0
        assert "Cowboy Hat" in result.stdout
        assert "Pufferfish" not in result.stdout

    def test_json_with_limit(self, config_file: Path):
        result = _invoke("list", "--config", str(config_file), "--json", "-n", "2")
        assert result.exit_code == 0
        lines = result.stdout.strip().splitlines()
        assert len(lines) == 2
        assert [json.loads(line)["type"] for line in lines] == ["Tool", "Tool"]

    def test_no_variants(self, config_file: Path):
        result = _invoke("list", "--config", str(config_file), "-t", "Object", "--no-variants")
        assert "Melon Wine" not in result.stdout
        assert "Secret Note #1" in result.stdout

    def test_unknown_type(self, config_file: Path):
        assert _invoke("list", "--config", str(config_file), "--type", "Vehicle").exit_code == 1

    def test_content_dir_override_missing(self, config_file: Path, tmp_path: Path):
        result = _invoke("list", "--config", str(config_file), "--content-dir", str(tmp_path / "none"))
        assert result.exit_code == 1


class TestSearch:
    def test_finds_roe(self, config_file: Path):
        result = _invoke("search", "pufferfish roe", "--config", str(config_file))
        assert result.exit_code == 0
        assert "128/roe" in result.stdout
        assert "128/aged-roe" in result.stdout

    def test_no_match(self, config_file: Path):
        result = _invoke("search", "zzz", "--config", str(config_file))
        assert result.exit_code == 0
        assert "No entities match 'zzz'." in result.stdout


class TestStats:
    def test_counts(self, config_file: Path):
        result = _invoke("stats", "--config", str(config_file))
        assert result.exit_code == 0
        lines = {line.split()[0]: int(line.split()[1]) for line in result.stdout.strip().splitlines()}
        assert lines["Tool"] == 28
        assert lines["Object"] == 31
        assert lines["Ring"] == 1
        assert lines["Total"] == 73


class TestExport:
    def test_csv(self, config_file: Path, tmp_path: Path):
        out = tmp_path / "out" / "catalog.csv"
        result = _invoke(
            "export", "--config", str(config_file), "--format", "csv", "--out", str(out), "-t", "BigCraftable",
        )
        assert result.exit_code == 0
        assert "Wrote 2 entities" in result.stdout
        with out.open(encoding="utf-8") as f:
            assert [row["name"] for row in csv.DictReader(f)] == ["Keg", "Preserves Jar"]

    def test_unknown_format(self, config_file: Path, tmp_path: Path):
        result = _invoke("export", "--config", str(config_file), "--format", "xml", "--out", str(tmp_path / "x"))
        assert result.exit_code == 1
