# ABOUTME: End-to-end tests for the `folio sync` command.
# ABOUTME: Runs the CLI via Click's CliRunner against a real media tree and catalog file.

from pathlib import Path

from click.testing import CliRunner

from folio.cli import cli
from folio.db.catalog import WorkCatalog
from folio.db.connection import open_catalog


class TestSyncCommand:
    """E2e tests for `folio sync`."""

    def test_sync_reports_each_work(self, tmp_path: Path, media_root: Path) -> None:
        db_path = tmp_path / "catalog.db"
        runner = CliRunner()
        result = runner.invoke(
            cli, ["sync", "--root", str(media_root), "--db", str(db_path)]
        )

        assert result.exit_code == 0, result.output
        assert "Synced Alpha (3 pages)" in result.output
        assert "Synced beta (2 pages)" in result.output
        assert "Synced gamma (1 pages)" in result.output
        assert "3 work(s) processed" in result.output
        assert ".hidden" not in result.output

    def test_sync_lists_recovered_issues(self, tmp_path: Path, media_root: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(
            cli, ["sync", "-r", str(media_root), "--db", str(tmp_path / "c.db")]
        )

        assert result.exit_code == 0
        assert "2 issue(s)" in result.output

    def test_sync_writes_catalog(self, tmp_path: Path, media_root: Path) -> None:
        db_path = tmp_path / "catalog.db"
        CliRunner().invoke(cli, ["sync", "-r", str(media_root), "--db", str(db_path)])

        conn = open_catalog(db_path)
        record = WorkCatalog(conn).get_by_key("Alpha")
        conn.close()
        assert record is not None
        assert record.title == "Alpha Story"

    def test_root_from_environment(self, tmp_path: Path, media_root: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["sync"],
            env={"MEDIA_ROOT": str(media_root), "FOLIO_DB": str(tmp_path / "env.db")},
        )

        assert result.exit_code == 0, result.output
        assert (tmp_path / "env.db").exists()
        assert "3 work(s) processed" in result.output

    def test_missing_root_fails(self, tmp_path: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["sync", "-r", str(tmp_path / "nope"), "--db", str(tmp_path / "c.db")],
        )

        assert result.exit_code == 1
        assert "Failed to read root directory" in result.output

    def test_root_is_required(self, tmp_path: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(
            cli, ["sync", "--db", str(tmp_path / "c.db")], env={"MEDIA_ROOT": None, "FOLIO_ROOT": None}
        )
        assert result.exit_code == 2

    def test_prune_reports_count(self, tmp_path: Path, media_root: Path) -> None:
        db_path = tmp_path / "catalog.db"
        runner = CliRunner()
        runner.invoke(cli, ["sync", "-r", str(media_root), "--db", str(db_path)])

        for child in (media_root / "gamma").iterdir():
            child.unlink()
        (media_root / "gamma").rmdir()
        result = runner.invoke(
            cli, ["sync", "-r", str(media_root), "--db", str(db_path), "--prune"]
        )

        assert result.exit_code == 0, result.output
        assert "1 pruned" in result.output

    def test_invalid_worker_count(self, tmp_path: Path, media_root: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["sync", "-r", str(media_root), "--db", str(tmp_path / "c.db"), "-w", "0"],
        )
        assert result.exit_code == 2


class TestPackaging:
    def test_top_level_is_namespace_package(self) -> None:
        import folio

        assert getattr(folio, "__file__", None) is None

    def test_version_option(self) -> None:
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output
