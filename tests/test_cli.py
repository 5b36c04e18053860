"""Tests for the CLI commands."""

import json
import subprocess
from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner

from rsloc.cli import app, parse_revisions

runner = CliRunner()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("RSLOC_FORMAT", "RSLOC_JOBS", "RSLOC_EXCLUDE", "RSLOC_FAIL_ON_ERROR"):
        monkeypatch.delenv(name, raising=False)


class TestVersion:
    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "rsloc" in result.output


class TestInit:
    def test_creates_config(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["init"])
        assert result.exit_code == 0
        assert (tmp_path / ".rsloc.toml").exists()

    def test_refuses_overwrite(self, tmp_path: Path):
        (tmp_path / ".rsloc.toml").write_text("existing")
        result = runner.invoke(app, ["init", str(tmp_path)])
        assert result.exit_code == 1
        assert (tmp_path / ".rsloc.toml").read_text() == "existing"

    def test_force_overwrites(self, tmp_path: Path):
        (tmp_path / ".rsloc.toml").write_text("existing")
        result = runner.invoke(app, ["init", str(tmp_path), "--force"])
        assert result.exit_code == 0
        assert "[count]" in (tmp_path / ".rsloc.toml").read_text()


class TestCount:
    def test_table_output(self, rust_tree: Path):
        result = runner.invoke(app, ["count", str(rust_tree)])
        assert result.exit_code == 0
        assert "Production" in result.output

    def test_json_output(self, rust_tree: Path):
        result = runner.invoke(app, ["count", str(rust_tree), "--format", "json", "--by-crate"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["total"]["test"]["code"] == 9
        assert [c["name"] for c in data["crates"]] == ["cli", "core"]

    def test_exclude_flag(self, rust_tree: Path):
        result = runner.invoke(app, ["count", str(rust_tree), "-f", "json", "-e", "*/tests/*"])
        data = json.loads(result.stdout)
        assert data["file_count"] == 3
        assert data["total"]["test"]["code"] == 7

    def test_config_file_applies(self, rust_tree: Path):
        (rust_tree / ".rsloc.toml").write_text('[output]\nformat = "csv"\n')
        result = runner.invoke(app, ["count", str(rust_tree)])
        assert result.exit_code == 0
        assert result.stdout.startswith("scope,name,context,code")

    def test_output_file(self, rust_tree: Path, tmp_path: Path):
        report = tmp_path / "report.json"
        result = runner.invoke(app, ["count", str(rust_tree), "-o", str(report)])
        assert result.exit_code == 0
        assert json.loads(report.read_text())["kind"] == "count"

    def test_invalid_format(self, rust_tree: Path):
        result = runner.invoke(app, ["count", str(rust_tree), "-f", "xml"])
        assert result.exit_code == 2

    def test_missing_path(self, tmp_path: Path):
        result = runner.invoke(app, ["count", str(tmp_path / "nope")])
        assert result.exit_code == 2

    def test_failed_files_exit_code(self, rust_tree: Path, monkeypatch):
        (rust_tree / "bad.rs").write_bytes(b"\xff\xfe\x00")
        assert runner.invoke(app, ["count", str(rust_tree)]).exit_code == 0
        monkeypatch.setenv("RSLOC_FAIL_ON_ERROR", "1")
        assert runner.invoke(app, ["count", str(rust_tree)]).exit_code == 1

    def test_crate_and_type_filters(self, rust_tree: Path):
        result = runner.invoke(
            app, ["count", str(rust_tree), "-f", "json", "--crate", "core", "-t", "tests"],
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["file_count"] == 2
        assert data["total"]["test"]["code"] == 9
        assert data["total"]["production"]["all"] == 0

    def test_unknown_type(self, rust_tree: Path):
        result = runner.invoke(app, ["count", str(rust_tree), "-t", "code,benches"])
        assert result.exit_code == 2

    def test_by_module(self, rust_tree: Path):
        result = runner.invoke(app, ["count", str(rust_tree), "-m", "-f", "json"])
        assert result.exit_code == 0
        modules = json.loads(result.stdout)["modules"]
        assert [m["name"] for m in modules][:2] == ["cli", "cli::examples::demo"]

    def test_tests_directory_root(self, rust_tree: Path):
        result = runner.invoke(app, ["count", str(rust_tree / "core" / "tests"), "-f", "json"])
        data = json.loads(result.stdout)
        assert data["total"]["test"]["code"] == 2
        assert data["total"]["production"]["all"] == 0


class TestDiff:
    def test_working_tree_json(self, tmp_git_repo: Path):
        (tmp_git_repo / "src" / "lib.rs").write_text("pub fn a() {}\npub fn b() {}\n")
        result = runner.invoke(app, ["diff", "--path", str(tmp_git_repo), "-f", "json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["to"] == "working tree"
        assert data["total"]["production"]["net"]["code"] == 1

    def test_commit_range_table(self, tmp_git_repo: Path):
        (tmp_git_repo / "src" / "lib.rs").write_text("pub fn a() {}\n// note\n")
        subprocess.run(["git", "commit", "-qam", "note"], cwd=tmp_git_repo, check=True)
        result = runner.invoke(app, ["diff", "HEAD~1..HEAD", "--path", str(tmp_git_repo)])
        assert result.exit_code == 0
        assert "+1/-0/1" in result.output

    def test_by_crate_json(self, tmp_git_repo: Path):
        (tmp_git_repo / "Cargo.toml").write_text('[package]\nname = "demo"\nversion = "0.1.0"\n')
        subprocess.run(["git", "add", "Cargo.toml"], cwd=tmp_git_repo, check=True)
        subprocess.run(["git", "commit", "-qm", "manifest"], cwd=tmp_git_repo, check=True)
        (tmp_git_repo / "src" / "lib.rs").write_text("pub fn a() {}\n#[test]\nfn t() {}\n")

        result = runner.invoke(
            app, ["diff", "--path", str(tmp_git_repo), "--by-crate", "-t", "tests", "-f", "json"],
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [c["name"] for c in data["crates"]] == ["demo"]
        assert data["crates"][0]["diff"]["test"]["added"]["code"] == 2
        assert data["total"]["production"]["added"]["all"] == 0

    def test_outside_repo(self, tmp_path: Path):
        result = runner.invoke(app, ["diff", "--path", str(tmp_path)])
        assert result.exit_code == 2

    def test_unknown_revision(self, tmp_git_repo: Path):
        result = runner.invoke(app, ["diff", "nope..HEAD", "--path", str(tmp_git_repo)])
        assert result.exit_code == 2


class TestParseRevisions:
    def test_defaults(self):
        assert parse_revisions([], staged=False) == ("HEAD", None)
        assert parse_revisions([], staged=True) == ("HEAD", None)

    def test_forms(self):
        assert parse_revisions(["a..b"], staged=False) == ("a", "b")
        assert parse_revisions(["a", "b"], staged=False) == ("a", "b")
        assert parse_revisions(["a"], staged=False) == ("a", "HEAD")

    def test_invalid(self):
        with pytest.raises(typer.BadParameter):
            parse_revisions(["a..."], staged=False)
        with pytest.raises(typer.BadParameter):
            parse_revisions(["a"], staged=True)


class TestLines:
    def test_trace(self, tmp_path: Path):
        source = tmp_path / "lib.rs"
        source.write_text("#[test]\nfn t() {}\n")
        result = runner.invoke(app, ["lines", str(source)])
        assert result.exit_code == 0
        assert "test" in result.output
        assert "code" in result.output

    def test_missing_file(self, tmp_path: Path):
        result = runner.invoke(app, ["lines", str(tmp_path / "none.rs")])
        assert result.exit_code == 2
